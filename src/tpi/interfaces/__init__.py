"""External collaborators of the TPI core (ROS connection, dialogs, placement)."""

from .connection import RosConnection, LocalConnection, PublishedMessage
from .ui import (
    DialogMenu,
    DialogNotice,
    LoggingDialogMenu,
    PlacementHelper,
    FixedPlacement,
)

__all__ = [
    "RosConnection",
    "LocalConnection",
    "PublishedMessage",
    "DialogMenu",
    "DialogNotice",
    "LoggingDialogMenu",
    "PlacementHelper",
    "FixedPlacement",
]
