"""
Fire-and-forget notifications for ledger state changes
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Protocol

event_logger = logging.getLogger("timelock_vault.events")


class EventKind(Enum):
    VAULT_CREATED = "vault_created"
    BENEFICIARY_SET = "beneficiary_set"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    EMERGENCY_WITHDRAWAL = "emergency_withdrawal"
    LOCK_EXTENDED = "lock_extended"


@dataclass(frozen=True)
class Notification:
    kind: EventKind
    payload: Dict[str, Any] = field(default_factory=dict)


class NotificationSink(Protocol):
    def emit(self, kind: EventKind, payload: Dict[str, Any]) -> None: ...


class LoggingSink:
    """Writes each notification to the events logger"""

    def emit(self, kind: EventKind, payload: Dict[str, Any]) -> None:
        event_logger.info("%s %s", kind.value, payload)


class RecordingSink:
    """Keeps notifications in memory so they can be inspected"""

    def __init__(self):
        self._events: List[Notification] = []
        self._lock = threading.Lock()

    def emit(self, kind: EventKind, payload: Dict[str, Any]) -> None:
        with self._lock:
            self._events.append(Notification(kind, dict(payload)))

    @property
    def events(self) -> List[Notification]:
        with self._lock:
            return list(self._events)

    def kinds(self) -> List[EventKind]:
        return [event.kind for event in self.events]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
