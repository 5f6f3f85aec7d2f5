"""Core enumerations for the TPI core."""

from enum import Enum, auto


class Frame(Enum):
    """Coordinate frame a pose is expressed in."""
    NATIVE = auto()    # right / up / forward (scene)
    EXTERNAL = auto()  # forward / left / up (ROS)


class ReceiveMode(Enum):
    """Whether the robot base pose is taken from the ROS feed."""
    DO_NOT = auto()
    ONCE = auto()
    CONTINUOUSLY = auto()


class PublishMode(Enum):
    """Whether the robot base pose is published to the ROS feed."""
    DO_NOT = auto()
    MANUALLY = auto()
    AUTOMATICALLY = auto()


class TutorialState(Enum):
    """State of the tutorial sequencer."""
    INACTIVE = auto()
    STEP_ACTIVE = auto()
    COMPLETED = auto()  # transient, immediately resets to INACTIVE


class StartingPosition(Enum):
    """Anchor spot the placement helper starts searching from."""
    TOP_LEFT = auto()
    TOP_CENTER = auto()
    TOP_RIGHT = auto()
    MIDDLE_LEFT = auto()
    MIDDLE_CENTER = auto()
    MIDDLE_RIGHT = auto()
    BOTTOM_LEFT = auto()
    BOTTOM_CENTER = auto()
    BOTTOM_RIGHT = auto()


class SearchAlgorithm(Enum):
    """How the placement helper walks the spot grid."""
    CLOSEST_POSITION = auto()
    HORIZONTAL_FIRST = auto()
    VERTICAL_FIRST = auto()


class SearchDirection(Enum):
    """Direction the placement helper searches in."""
    BOTH_WAYS = auto()
    LEFT_OR_UP = auto()
    RIGHT_OR_DOWN = auto()
