"""Diagnostic records for updates that did not apply."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class DiagnosticKind(str, Enum):
    """Why an update was dropped."""

    DECODE_ERROR = "DECODE_ERROR"
    UNKNOWN_PARENT = "UNKNOWN_PARENT"
    DUPLICATE_ID = "DUPLICATE_ID"
    HTTP_ERROR = "HTTP_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    INVALID_TRANSITION = "INVALID_TRANSITION"


@dataclass(slots=True)
class Diagnostic:
    """A single dropped update (record, response or token event)."""

    kind: DiagnosticKind
    message: str

    node_id: Optional[str] = None
    parent_id: Optional[str] = None
    status_code: Optional[int] = None
    details: dict[str, Any] = field(default_factory=dict)
