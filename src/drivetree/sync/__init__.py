"""Public sync exports for drivetree."""

from __future__ import annotations

from .dispatcher import Completion, RequestDispatcher
from .engine import SyncEngine
from .envelope import CollectionRecord, ItemRecord, ParentRef, decode_envelope
from .intent import Intent, OutstandingRequest
from .notifier import ChangeNotifier, LoggingNotifier

__all__ = [
    "SyncEngine",
    "ChangeNotifier",
    "LoggingNotifier",
    "RequestDispatcher",
    "Completion",
    "Intent",
    "OutstandingRequest",
    "CollectionRecord",
    "ItemRecord",
    "ParentRef",
    "decode_envelope",
]
