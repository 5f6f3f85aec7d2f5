"""Host-driven controllers: robot twin bridge and tutorial sequencer."""

from .robot_bridge import (
    ArticulatedLink,
    ArticulatedBase,
    JointChain,
    RobotPoseBridge,
)
from .tutorial import (
    TextSlot,
    StepVisual,
    StepTemplate,
    TutorialStep,
    TutorialSequencer,
)

__all__ = [
    "ArticulatedLink",
    "ArticulatedBase",
    "JointChain",
    "RobotPoseBridge",
    "TextSlot",
    "StepVisual",
    "StepTemplate",
    "TutorialStep",
    "TutorialSequencer",
]
