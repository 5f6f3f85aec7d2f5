"""Robot twin bridge.

Keeps the virtual twin of the robotic arm in sync with ROS:

- mirrors joint angles received on the joint topic onto the kinematic chain
- applies a base pose received on the base topic (once or continuously)
- publishes the base pose, manually or at a fixed frequency
- publishes arbitrary poses (e.g. the end effector) relative to the base
- turns reachability replies into one of two callback lists

The bridge is frame-driven: the host calls :meth:`RobotPoseBridge.tick`
once per frame with the elapsed time.

Usage::

    connection = LocalConnection()
    bridge = RobotPoseBridge(connection, base, links, config.robot)
    bridge.on_reachable.add(show_green_marker)
    bridge.start()
    connection.connect()

    # every frame
    bridge.tick(delta_time)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence
import logging
import math

import numpy as np

from tpi.core import (
    Frame, ReceiveMode, PublishMode,
    Pose, TransformMessage, PoseMessage, JointStateMessage, BoolMessage,
    CallbackList, ConfigurationError, MessageError, JointStateError,
)
from tpi.core.frames import (
    FORWARD, UP, to_external, convert, look_rotation, rotate_vector,
    quaternion_inverse,
)
from tpi.core.types import as_vector, as_quaternion
from tpi.interfaces import RosConnection
from tpi.utils.config import RobotBridgeConfig


logger = logging.getLogger(__name__)


# ============================================================================
# Scene Types
# ============================================================================

@dataclass
class ArticulatedLink:
    """A link of the twin with a single revolute joint.

    Position and rotation are world values in the scene frame.
    """
    name: str
    angle: float = 0.0  # radians
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 0.0, 1.0]))

    @property
    def pose(self) -> Pose:
        return Pose(self.position, self.rotation, Frame.NATIVE)


@dataclass
class ArticulatedBase(ArticulatedLink):
    """Root link of the twin."""
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angular_velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    immovable: bool = False
    visible: bool = True

    def teleport(self, position: Sequence[float], rotation: Sequence[float]) -> None:
        """Move the root to a new pose and stop all motion."""
        if self.immovable:
            raise RuntimeError(f"{self.name} is immovable and cannot be teleported")
        self.position = as_vector(position, 3, "position")
        self.rotation = as_quaternion(rotation, "rotation")
        self.velocity = np.zeros(3)
        self.angular_velocity = np.zeros(3)

    def world_to_local_point(self, point: Sequence[float]) -> np.ndarray:
        """Express a world point in the base's local frame."""
        offset = as_vector(point, 3, "point") - self.position
        return rotate_vector(quaternion_inverse(self.rotation), offset)

    def world_to_local_vector(self, vector: Sequence[float]) -> np.ndarray:
        """Express a world direction in the base's local frame."""
        return rotate_vector(quaternion_inverse(self.rotation), vector)


class JointChain:
    """Fixed-order chain of joints.

    Index ``i`` of an incoming angle array drives ``links[i]``.
    """

    def __init__(self, links: Sequence[ArticulatedLink]):
        self._links: List[ArticulatedLink] = list(links)

    @classmethod
    def resolve(cls, names: Sequence[str], links: Mapping[str, ArticulatedLink]) -> "JointChain":
        """Look up every link name once.

        Raises:
            ConfigurationError: if a name is not in ``links``
        """
        resolved = []
        for name in names:
            if name not in links:
                raise ConfigurationError(f"Joint link not found: {name}")
            resolved.append(links[name])
        return cls(resolved)

    def __len__(self) -> int:
        return len(self._links)

    @property
    def names(self) -> List[str]:
        return [link.name for link in self._links]

    @property
    def angles(self) -> List[float]:
        return [link.angle for link in self._links]

    def apply(self, angles: Sequence[Any]) -> None:
        """Copy ``angles[0..N-1]`` onto the chain, in order.

        Extra trailing entries (e.g. gripper fingers) are ignored. Nothing
        is written unless the whole array is valid.

        Raises:
            JointStateError: if fewer than N angles are given
            MessageError: if an angle is not a finite number
        """
        if angles is None:
            raise MessageError("Joint state has no positions")
        if len(angles) < len(self._links):
            raise JointStateError(
                f"Joint state has {len(angles)} positions, chain needs {len(self._links)}"
            )
        values = []
        for i in range(len(self._links)):
            try:
                value = float(angles[i])
            except (TypeError, ValueError) as e:
                raise MessageError(f"Joint position {i} is not numeric: {e}") from e
            if not math.isfinite(value):
                raise MessageError(f"Joint position {i} is not finite")
            values.append(value)
        for link, value in zip(self._links, values):
            link.angle = value


# ============================================================================
# Bridge
# ============================================================================

class RobotPoseBridge:
    """Synchronizes the robot twin with the ROS feed."""

    def __init__(
        self,
        connection: RosConnection,
        base: ArticulatedBase,
        links: Mapping[str, ArticulatedLink],
        config: Optional[RobotBridgeConfig] = None,
    ):
        """Initialize the bridge.

        Args:
            connection: ROS connection wrapper
            base: Root link of the twin
            links: All links of the twin keyed by hierarchy path
            config: Topics, base pose modes and joint order

        Raises:
            ConfigurationError: if a configured joint link does not exist
        """
        self.config = config or RobotBridgeConfig()
        self.connection = connection
        self.base = base
        self._links: Dict[str, ArticulatedLink] = dict(links)
        self.chain = JointChain.resolve(self.config.link_names, self._links)

        self.on_reachable = CallbackList()
        self.on_not_reachable = CallbackList()

        self._time_elapsed = 0.0
        self._started = False

    @property
    def publish_period(self) -> float:
        """Seconds between automatic base pose publications."""
        return 1.0 / self.config.publish_frequency_hz

    @property
    def time_elapsed(self) -> float:
        return self._time_elapsed

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Lock the base and register the data streams once connected."""
        if self._started:
            logger.debug("Robot bridge already started")
            return
        self._started = True
        self.base.immovable = True
        self.connection.on_connected(self._register_streams)

    def _register_streams(self) -> None:
        cfg = self.config
        if cfg.receive_base_pose != ReceiveMode.DO_NOT:
            self.connection.subscribe(cfg.base_topic, self.apply_incoming_base_pose)
        if (cfg.receive_base_pose != ReceiveMode.DO_NOT
                or cfg.publish_base_pose != PublishMode.DO_NOT):
            self.connection.register_publisher(cfg.base_topic)
        self.connection.subscribe(cfg.joint_topic, self.apply_incoming_joint_angles)
        self.connection.register_publisher(cfg.pose_topic)
        self.connection.subscribe(cfg.pose_reachable_topic, self.on_reachability_update)
        self.set_robot_active(True)
        logger.info(f"Robot bridge streams registered ({len(self.chain)} joints)")

    def tick(self, delta_time: float) -> bool:
        """Advance the publish timer by one frame.

        Returns:
            True if the base pose was published this frame. The timer
            restarts after every attempt, even one the connection dropped
        """
        if self.config.publish_base_pose != PublishMode.AUTOMATICALLY:
            return False
        if not self.connection.is_connected() or self.connection.has_error():
            return False

        self._time_elapsed += delta_time
        if self._time_elapsed > self.publish_period:
            self._time_elapsed = 0.0
            return self.publish_current_base_pose()
        return False

    def set_robot_active(self, active: bool) -> None:
        """Show (True) or hide (False) the twin."""
        self.base.visible = active

    def is_robot_active(self) -> bool:
        return self.base.visible

    # =========================================================================
    # Base Pose
    # =========================================================================

    def apply_incoming_base_pose(self, message: Any) -> bool:
        """Teleport the base to a pose received from ROS.

        Malformed payloads are logged and ignored. In ``ONCE`` mode the base
        topic is unsubscribed after the first pose is applied.
        """
        topic = self.config.base_topic
        try:
            native = convert(self._as_external_pose(message), Frame.NATIVE)
        except MessageError as e:
            logger.error(f"Rejected base pose on {topic}: {e}")
            return False

        self.base.immovable = False
        self.base.teleport(native.position, native.orientation)
        self.base.immovable = True
        logger.debug(f"Base moved to {native.position.round(4).tolist()}")

        if self.config.receive_base_pose != ReceiveMode.CONTINUOUSLY:
            self.connection.unsubscribe(topic)
            logger.info(f"Base pose received once, unsubscribed from {topic}")
        return True

    def publish_current_base_pose(self) -> bool:
        """Publish the live base pose on the base topic."""
        pose = to_external(self.base.position, self.base.rotation)
        return self.connection.publish(
            self.config.base_topic, TransformMessage.from_pose(pose)
        )

    @staticmethod
    def _as_external_pose(message: Any) -> Pose:
        if isinstance(message, (TransformMessage, PoseMessage)):
            return message.to_pose(Frame.EXTERNAL)
        if isinstance(message, Pose):
            return message
        raise MessageError(f"Unsupported base pose payload: {type(message).__name__}")

    # =========================================================================
    # Joints
    # =========================================================================

    def apply_incoming_joint_angles(self, message: Any) -> bool:
        """Mirror a joint state onto the chain.

        Accepts a :class:`JointStateMessage` or a plain sequence of angles.
        """
        angles = message.position if isinstance(message, JointStateMessage) else message
        try:
            self.chain.apply(angles)
        except MessageError as e:
            logger.error(f"Rejected joint state on {self.config.joint_topic}: {e}")
            return False
        return True

    # =========================================================================
    # Poses
    # =========================================================================

    def get_relative_pose(self, world_position: Sequence[float],
                          world_rotation: Sequence[float]) -> Pose:
        """Express a world pose relative to the base, in the ROS frame.

        The rotation is rebuilt from the transformed forward and up vectors.
        """
        local_position = self.base.world_to_local_point(world_position)
        forward = self.base.world_to_local_vector(rotate_vector(world_rotation, FORWARD))
        up = self.base.world_to_local_vector(rotate_vector(world_rotation, UP))
        return to_external(local_position, look_rotation(forward, up))

    def publish_pose(self, world_position: Sequence[float],
                     world_rotation: Sequence[float], relative: bool = True) -> bool:
        """Publish a pose on the pose topic.

        Args:
            world_position: Position in the scene frame
            world_rotation: Rotation in the scene frame (x, y, z, w)
            relative: Express the pose relative to the robot base

        Returns:
            True if published, False if the message could not be built
            or the connection dropped it
        """
        try:
            if relative:
                pose = self.get_relative_pose(world_position, world_rotation)
            else:
                pose = to_external(world_position, world_rotation)
            message = PoseMessage.from_pose(pose)
        except MessageError as e:
            logger.error(f"Could not build pose message, nothing was published: {e}")
            return False
        return self.connection.publish(self.config.pose_topic, message)

    def publish_link_pose(self, link_name: str, relative: bool = True) -> bool:
        """Publish the current pose of a named link."""
        link = self._links.get(link_name)
        if link is None:
            logger.error(f"Link not found, nothing was published: {link_name}")
            return False
        return self.publish_pose(link.position, link.rotation, relative)

    def publish_end_effector_pose(self, relative: bool = True) -> bool:
        """Publish the current pose of the configured end effector link."""
        return self.publish_link_pose(self.config.end_effector_link, relative)

    # =========================================================================
    # Reachability
    # =========================================================================

    def on_reachability_update(self, message: Any) -> None:
        """Run ``on_reachable`` or ``on_not_reachable`` for a reply."""
        data = message.data if isinstance(message, BoolMessage) else message
        if message is not None and bool(data):
            self.on_reachable.invoke()
        else:
            self.on_not_reachable.invoke()
