"""Core types, enums and frame conversion for the TPI core."""

from .enums import (
    Frame,
    ReceiveMode,
    PublishMode,
    TutorialState,
    StartingPosition,
    SearchAlgorithm,
    SearchDirection,
)

from .errors import (
    TpiError,
    ConfigurationError,
    MessageError,
    JointStateError,
)

from .types import (
    # Geometry
    Pose,
    # Messages
    TransformMessage,
    PoseMessage,
    JointStateMessage,
    BoolMessage,
    # UI
    ButtonWidget,
)

from .events import CallbackList

from .frames import (
    to_external,
    to_native,
    convert,
    look_rotation,
    rotate_vector,
    quaternion_inverse,
)

__all__ = [
    # Enums
    "Frame",
    "ReceiveMode",
    "PublishMode",
    "TutorialState",
    "StartingPosition",
    "SearchAlgorithm",
    "SearchDirection",
    # Errors
    "TpiError",
    "ConfigurationError",
    "MessageError",
    "JointStateError",
    # Types
    "Pose",
    "TransformMessage",
    "PoseMessage",
    "JointStateMessage",
    "BoolMessage",
    "ButtonWidget",
    "CallbackList",
    # Frames
    "to_external",
    "to_native",
    "convert",
    "look_rotation",
    "rotate_vector",
    "quaternion_inverse",
]
