"""UI collaborators: dialog menus and object placement.

The mixed-reality UI owns the actual widgets. The tutorial sequencer only
needs the small surface defined here.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, List, Optional
import logging

from tpi.core import Pose, StartingPosition, SearchAlgorithm, SearchDirection


logger = logging.getLogger(__name__)


# ============================================================================
# Dialog Menus
# ============================================================================

class DialogMenu(ABC):
    """Shows notices to the operator."""

    @abstractmethod
    def show_error(
        self,
        title: str,
        body: str,
        confirm_label: str = "Confirm",
        icon: Optional[str] = None,
    ) -> None:
        """Single-button notice."""

    @abstractmethod
    def show_two_button_dialog(
        self,
        title: str,
        body: str,
        label_a: str,
        callback_a: Optional[Callable[[], None]],
        label_b: str,
        callback_b: Optional[Callable[[], None]],
        icon: Optional[str] = None,
    ) -> None:
        """Notice with two choices; a ``None`` callback just closes it."""


@dataclass
class DialogNotice:
    """A notice shown through :class:`LoggingDialogMenu`."""
    title: str
    body: str
    buttons: List[str] = field(default_factory=list)
    callbacks: List[Optional[Callable[[], None]]] = field(default_factory=list)
    icon: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def press(self, index: int) -> None:
        """Simulate the operator pressing button ``index``."""
        callback = self.callbacks[index] if index < len(self.callbacks) else None
        if callback is not None:
            callback()


class LoggingDialogMenu(DialogMenu):
    """Dialog menu without a UI: logs notices and keeps them for inspection."""

    def __init__(self):
        self.notices: List[DialogNotice] = []

    def show_error(self, title, body, confirm_label="Confirm", icon=None):
        logger.warning(f"{title}: {body}")
        self.notices.append(DialogNotice(
            title=title, body=body, buttons=[confirm_label],
            callbacks=[None], icon=icon,
        ))

    def show_two_button_dialog(self, title, body, label_a, callback_a,
                               label_b, callback_b, icon=None):
        logger.info(f"{title}: {body} [{label_a} / {label_b}]")
        self.notices.append(DialogNotice(
            title=title, body=body, buttons=[label_a, label_b],
            callbacks=[callback_a, callback_b], icon=icon,
        ))

    @property
    def last_notice(self) -> Optional[DialogNotice]:
        return self.notices[-1] if self.notices else None


# ============================================================================
# Object Placement
# ============================================================================

class PlacementHelper(ABC):
    """Finds free spots in front of the operator for spawned objects."""

    @abstractmethod
    def find_and_reserve_position(
        self,
        obj: Any,
        anchor: StartingPosition = StartingPosition.MIDDLE_CENTER,
        strategy: SearchAlgorithm = SearchAlgorithm.CLOSEST_POSITION,
        direction: SearchDirection = SearchDirection.BOTH_WAYS,
    ) -> Pose:
        """Reserve a spot for ``obj`` and return its pose."""

    @abstractmethod
    def free_up_spot(self, obj: Any) -> None:
        """Release the spot held by ``obj`` (no-op if it holds none)."""


class FixedPlacement(PlacementHelper):
    """Places every object at the same pose and tracks reservations."""

    def __init__(self, pose: Optional[Pose] = None):
        self.pose = pose or Pose.identity()
        self._reserved: List[Any] = []

    def find_and_reserve_position(self, obj, anchor=StartingPosition.MIDDLE_CENTER,
                                  strategy=SearchAlgorithm.CLOSEST_POSITION,
                                  direction=SearchDirection.BOTH_WAYS):
        self._reserved.append(obj)
        return Pose(self.pose.position.copy(), self.pose.orientation.copy(), self.pose.frame)

    def free_up_spot(self, obj):
        if any(o is obj for o in self._reserved):
            self._reserved = [o for o in self._reserved if o is not obj]

    @property
    def reserved(self) -> List[Any]:
        return list(self._reserved)
