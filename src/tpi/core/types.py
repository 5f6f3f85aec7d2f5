"""Core data types for the TPI core."""

from dataclasses import dataclass, field
from typing import Optional, List, Sequence, Any
import numpy as np

from .enums import Frame
from .errors import MessageError


def as_vector(values: Any, size: int, name: str = "vector") -> np.ndarray:
    """Convert ``values`` to a finite float array of exactly ``size`` entries.

    Raises:
        MessageError: if the values are missing, non-numeric, non-finite
            or have the wrong length.
    """
    if values is None:
        raise MessageError(f"{name} is missing")
    try:
        arr = np.asarray(values, dtype=float).reshape(-1)
    except (TypeError, ValueError) as e:
        raise MessageError(f"{name} is not numeric: {e}") from e
    if arr.shape[0] != size:
        raise MessageError(f"{name} must have {size} entries, got {arr.shape[0]}")
    if not np.all(np.isfinite(arr)):
        raise MessageError(f"{name} contains non-finite values")
    return arr


def as_quaternion(values: Any, name: str = "orientation") -> np.ndarray:
    """Like :func:`as_vector` for an ``x, y, z, w`` quaternion, rejecting zero norm."""
    q = as_vector(values, 4, name)
    if np.linalg.norm(q) < 1e-9:
        raise MessageError(f"{name} has zero norm")
    return q


# ============================================================================
# Geometry Types
# ============================================================================

@dataclass
class Pose:
    """Position + unit quaternion (``x, y, z, w``) tagged with its frame."""
    position: np.ndarray
    orientation: np.ndarray
    frame: Frame = Frame.NATIVE

    def __post_init__(self):
        self.position = as_vector(self.position, 3, "position")
        self.orientation = as_quaternion(self.orientation)

    @classmethod
    def identity(cls, frame: Frame = Frame.NATIVE) -> "Pose":
        """Pose at the origin with no rotation."""
        return cls(np.zeros(3), np.array([0.0, 0.0, 0.0, 1.0]), frame)

    def is_close(self, other: "Pose", atol: float = 1e-5) -> bool:
        """Compare two poses, treating ``q`` and ``-q`` as the same rotation."""
        if self.frame != other.frame:
            return False
        if not np.allclose(self.position, other.position, atol=atol):
            return False
        return (np.allclose(self.orientation, other.orientation, atol=atol)
                or np.allclose(self.orientation, -other.orientation, atol=atol))


# ============================================================================
# Message Types
# ============================================================================

@dataclass
class TransformMessage:
    """Base pose payload (geometry_msgs/Transform shape)."""
    translation: Sequence[float]
    rotation: Sequence[float]  # x, y, z, w

    @classmethod
    def from_pose(cls, pose: Pose) -> "TransformMessage":
        return cls(
            translation=tuple(float(v) for v in pose.position),
            rotation=tuple(float(v) for v in pose.orientation),
        )

    def to_pose(self, frame: Frame = Frame.EXTERNAL) -> Pose:
        """Validate the payload and return it as a tagged pose."""
        return Pose(
            as_vector(self.translation, 3, "translation"),
            as_quaternion(self.rotation, "rotation"),
            frame,
        )


@dataclass
class PoseMessage:
    """Pose payload (geometry_msgs/Pose shape)."""
    position: Sequence[float]
    orientation: Sequence[float]  # x, y, z, w

    @classmethod
    def from_pose(cls, pose: Pose) -> "PoseMessage":
        return cls(
            position=tuple(float(v) for v in pose.position),
            orientation=tuple(float(v) for v in pose.orientation),
        )

    def to_pose(self, frame: Frame = Frame.EXTERNAL) -> Pose:
        return Pose(
            as_vector(self.position, 3, "position"),
            as_quaternion(self.orientation),
            frame,
        )


@dataclass
class JointStateMessage:
    """Joint angle payload (sensor_msgs/JointState, positions only)."""
    position: List[float] = field(default_factory=list)
    name: List[str] = field(default_factory=list)


@dataclass
class BoolMessage:
    """Single boolean payload (std_msgs/Bool)."""
    data: bool = False


@dataclass
class ButtonWidget:
    """A labelled button in the hand menu (label text + quad icon)."""
    label: str = ""
    icon: Optional[str] = None

    def configure(self, label: str, icon: Optional[str]) -> None:
        self.label = label
        self.icon = icon
