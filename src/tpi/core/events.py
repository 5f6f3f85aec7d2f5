"""Ordered callback lists used for step and reachability events."""

from typing import Callable, List
import logging


logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class CallbackList:
    """Ordered list of no-argument handlers.

    Handlers run in registration order. A handler that raises is logged
    and the remaining handlers still run.
    """

    def __init__(self, *handlers: Callback):
        self._handlers: List[Callback] = list(handlers)

    def add(self, handler: Callback) -> None:
        """Register a handler (duplicates are allowed and run twice)."""
        self._handlers.append(handler)

    def remove(self, handler: Callback) -> bool:
        """Remove the first registration of ``handler``."""
        if handler not in self._handlers:
            return False
        self._handlers.remove(handler)
        return True

    def clear(self) -> None:
        self._handlers.clear()

    def invoke(self) -> None:
        """Run every handler in order."""
        for handler in list(self._handlers):
            try:
                handler()
            except Exception as e:
                logger.error(f"Callback {handler!r} failed: {e}", exc_info=True)

    def __call__(self) -> None:
        self.invoke()

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self):
        return iter(list(self._handlers))
