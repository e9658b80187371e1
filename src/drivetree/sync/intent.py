"""Request intents and outstanding request records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Intent(str, Enum):
    """Why a request was issued; decides how its response is routed."""

    TOKEN_EXCHANGE = "TOKEN_EXCHANGE"
    TOKEN_REFRESH = "TOKEN_REFRESH"
    LIST_CHILDREN = "LIST_CHILDREN"
    UPLOAD = "UPLOAD"


@dataclass(frozen=True, slots=True)
class OutstandingRequest:
    """
    A submitted request awaiting its response.

    Explicit fields per intent (no args dict):
        - LIST_CHILDREN: parent_id, optional page_token
        - UPLOAD: parent_id, local_path
    """

    request_id: str
    intent: Intent

    parent_id: Optional[str] = None
    page_token: Optional[str] = None
    local_path: Optional[str] = None

    def validate_required_fields(self) -> None:
        """Validate required fields according to intent. Raises ValueError."""
        if self.intent in (Intent.TOKEN_EXCHANGE, Intent.TOKEN_REFRESH):
            return

        if self.intent is Intent.LIST_CHILDREN:
            _require(self.parent_id, "parent_id")
            return

        if self.intent is Intent.UPLOAD:
            _require(self.parent_id, "parent_id")
            _require(self.local_path, "local_path")
            return

        raise ValueError(f"Unsupported intent: {self.intent}")


def _require(value: object, field_name: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"Missing required field: {field_name}")
