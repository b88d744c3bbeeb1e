"""
Vault events.

VaultCore announces each committed change on a process-wide bus. Listeners
pick the event types they care about; a listener that raises is logged and
skipped so a commit is never undone by an observer.
"""
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    ITEM_CREATED = "item.created"
    ITEM_UPDATED = "item.updated"
    ITEM_DELETED = "item.deleted"
    PROMPT_VERSIONED = "prompt.versioned"
    PROMPT_BRANCHED = "prompt.branched"
    PROMPTS_IMPORTED = "prompts.imported"


@dataclass(frozen=True)
class VaultEvent:
    """A committed change to one user's vault.

    The item fields are empty for vault-wide events such as an import.
    """

    type: EventType
    user_id: str
    item_id: Optional[str] = None
    item_type: Optional[str] = None
    item_name: Optional[str] = None
    parent_id: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)


class EventListener(ABC):
    """Receives the vault events named in `events`."""

    events: ClassVar[FrozenSet[EventType]] = frozenset(EventType)

    @abstractmethod
    def handle(self, event: VaultEvent) -> None:
        ...


class EventBus:
    """Routes each published event to the listeners registered for its type."""

    def __init__(self) -> None:
        self._listeners: Dict[EventType, List[EventListener]] = defaultdict(list)

    def subscribe(self, listener: EventListener) -> None:
        """Register listener for its event types. Registering twice is a no-op."""
        for event_type in listener.events:
            registered = self._listeners[event_type]
            if listener not in registered:
                registered.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        for registered in self._listeners.values():
            if listener in registered:
                registered.remove(listener)

    def listeners(self, event_type: EventType) -> List[EventListener]:
        return list(self._listeners.get(event_type, ()))

    def publish(self, event: VaultEvent) -> None:
        for listener in self.listeners(event.type):
            try:
                listener.handle(event)
            except Exception:
                logger.exception(
                    "Listener %s failed on %s", type(listener).__name__, event.type.value
                )

    def clear(self) -> None:
        self._listeners.clear()


class LoggingListener(EventListener):
    """Writes every event to the log at DEBUG."""

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LoggingListener)

    def __hash__(self) -> int:
        return hash(LoggingListener)

    def handle(self, event: VaultEvent) -> None:
        if event.item_id is None:
            logger.debug("%s user=%s %s", event.type.value, event.user_id, event.data)
            return
        logger.debug(
            "%s user=%s item=%s (%s) %s",
            event.type.value, event.user_id, event.item_id, event.item_type, event.data,
        )


_bus = EventBus()


def get_event_bus() -> EventBus:
    """Return the process-wide bus."""
    return _bus
