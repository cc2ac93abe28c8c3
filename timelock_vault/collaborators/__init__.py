"""
External collaborators of the vault ledger: time, value movement, notifications
"""

from .clock import Clock, SystemClock, ManualClock, DAY_SECONDS
from .funds import FundsTransfer, InMemoryFunds, TransferError
from .notifications import (
    EventKind,
    Notification,
    NotificationSink,
    LoggingSink,
    RecordingSink,
)

__all__ = [
    "Clock",
    "SystemClock",
    "ManualClock",
    "DAY_SECONDS",
    "FundsTransfer",
    "InMemoryFunds",
    "TransferError",
    "EventKind",
    "Notification",
    "NotificationSink",
    "LoggingSink",
    "RecordingSink",
]
