"""Wires the controllers to their collaborators.

The manager is the single place that knows about every collaborator. The
controllers receive what they need through their constructors.
"""

from typing import Mapping, Optional
import logging

from tpi.core import ButtonWidget, CallbackList
from tpi.controllers import (
    ArticulatedBase, ArticulatedLink, RobotPoseBridge, TutorialSequencer,
)
from tpi.interfaces import DialogMenu, PlacementHelper, RosConnection
from tpi.utils.config import TpiConfig


logger = logging.getLogger(__name__)


class TpiManager:
    """Owns the robot bridge and the tutorial sequencer."""

    def __init__(
        self,
        config: TpiConfig,
        connection: RosConnection,
        dialogs: DialogMenu,
        placement: PlacementHelper,
        robot_base: ArticulatedBase,
        robot_links: Mapping[str, ArticulatedLink],
        widgets: Optional[Mapping[str, ButtonWidget]] = None,
    ):
        self.config = config
        self.connection = connection
        self.dialogs = dialogs
        self.on_reset = CallbackList()

        self.robot = RobotPoseBridge(connection, robot_base, robot_links, config.robot)
        self.tutorial = TutorialSequencer(
            dialogs,
            placement,
            config.tutorial,
            widgets=widgets,
            on_reset_requested=self.reset,
        )

    def start(self) -> None:
        self.robot.start()
        logger.info(f"{self.config.project_name} v{self.config.version} started")

    def update(self, delta_time: float) -> None:
        """Per-frame update, called by the host."""
        self.robot.tick(delta_time)

    def reset(self) -> None:
        """Return the interface to a fresh state."""
        self.tutorial.reset()
        self.on_reset.invoke()
        logger.info("TPI reset")
