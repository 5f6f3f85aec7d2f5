"""ROS connection wrapper used by the robot bridge.

The bridge only talks to a :class:`RosConnection`. The transport itself
(ROS-TCP endpoint, rosbridge, ...) lives behind this interface and is not
part of this package. :class:`LocalConnection` is an in-process
implementation for offline runs and tests: inbound traffic is injected with
:meth:`LocalConnection.deliver` and outbound traffic is kept in a history.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Set
import logging


logger = logging.getLogger(__name__)

MessageHandler = Callable[[Any], Any]


class RosConnection(ABC):
    """Publish/subscribe surface of a ROS connection."""

    @abstractmethod
    def subscribe(self, topic: str, handler: MessageHandler) -> None:
        """Call ``handler(message)`` for every message received on ``topic``."""

    @abstractmethod
    def unsubscribe(self, topic: str) -> None:
        """Drop all handlers of ``topic``."""

    @abstractmethod
    def register_publisher(self, topic: str) -> None:
        """Announce that this side will publish on ``topic``."""

    @abstractmethod
    def publish(self, topic: str, message: Any) -> bool:
        """Send ``message`` on ``topic``. Fire-and-forget."""

    @abstractmethod
    def is_connected(self) -> bool:
        pass

    @abstractmethod
    def has_error(self) -> bool:
        pass

    @abstractmethod
    def on_connected(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once a connection exists.

        Used to register subscribers and publishers. Runs immediately if the
        connection is already up.
        """


@dataclass
class PublishedMessage:
    """A message sent through a :class:`LocalConnection`."""
    topic: str
    message: Any
    timestamp: datetime = field(default_factory=datetime.now)


class LocalConnection(RosConnection):
    """In-process ROS connection.

    Features:
    - Handlers per topic, called in subscription order
    - Deferred registrations that run when :meth:`connect` is called
    - Outbound history for inspection
    """

    def __init__(self, history_size: int = 100):
        self._handlers: Dict[str, List[MessageHandler]] = defaultdict(list)
        self._publishers: Set[str] = set()
        self._pending: List[Callable[[], None]] = []
        self._history: List[PublishedMessage] = []
        self._history_size = history_size
        self._connected = False
        self._error = False

    # =========================================================================
    # Connection State
    # =========================================================================

    def connect(self) -> None:
        """Mark the connection as up and run queued registrations."""
        self._connected = True
        self._error = False
        pending, self._pending = self._pending, []
        for callback in pending:
            try:
                callback()
            except Exception as e:
                logger.error(f"Connection callback failed: {e}", exc_info=True)
        logger.info(f"Connected ({len(pending)} registrations run)")

    def disconnect(self) -> None:
        self._connected = False
        logger.info("Disconnected")

    def set_error(self, has_error: bool = True) -> None:
        self._error = has_error

    def is_connected(self) -> bool:
        return self._connected

    def has_error(self) -> bool:
        return self._error

    def on_connected(self, callback: Callable[[], None]) -> None:
        if self._connected:
            callback()
        else:
            self._pending.append(callback)

    # =========================================================================
    # Publish / Subscribe
    # =========================================================================

    def subscribe(self, topic: str, handler: MessageHandler) -> None:
        self._handlers[topic].append(handler)
        logger.debug(f"Subscribed to {topic}")

    def unsubscribe(self, topic: str) -> None:
        if self._handlers.pop(topic, None) is not None:
            logger.debug(f"Unsubscribed from {topic}")

    def has_subscriber(self, topic: str) -> bool:
        return bool(self._handlers.get(topic))

    def register_publisher(self, topic: str) -> None:
        self._publishers.add(topic)
        logger.debug(f"Registered publisher for {topic}")

    def has_publisher(self, topic: str) -> bool:
        return topic in self._publishers

    def publish(self, topic: str, message: Any) -> bool:
        if not self._connected:
            logger.warning(f"Not connected, dropping message on {topic}")
            return False
        if topic not in self._publishers:
            logger.warning(f"No publisher registered for {topic}, dropping message")
            return False

        self._history.append(PublishedMessage(topic=topic, message=message))
        if len(self._history) > self._history_size:
            self._history.pop(0)
        return True

    def deliver(self, topic: str, message: Any) -> int:
        """Inject an inbound message as if it came from ROS.

        Returns:
            Number of handlers the message was dispatched to
        """
        handlers = list(self._handlers.get(topic, []))
        for handler in handlers:
            try:
                handler(message)
            except Exception as e:
                logger.error(f"Handler error for {topic}: {e}", exc_info=True)
        return len(handlers)

    def get_history(self, topic: Optional[str] = None) -> List[PublishedMessage]:
        """Published messages, oldest first, optionally filtered by topic."""
        if topic is None:
            return list(self._history)
        return [m for m in self._history if m.topic == topic]
