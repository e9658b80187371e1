"""ChangeNotifier contract consumed by view layers."""

from __future__ import annotations

import logging

from drivetree.tree.addressing import Address

logger = logging.getLogger(__name__)


class ChangeNotifier:
    """
    Receives tree and credential changes from SyncEngine.

    Subclass and override what the view needs; every hook defaults to a
    no-op. Hooks run on the thread that calls SyncEngine.process_pending().
    """

    def on_rows_inserted(self, parent_address: Address, start: int, end: int) -> None:
        """Rows start..end (inclusive) were inserted under the node at parent_address."""

    def on_credential_expired(self) -> None:
        """The server rejected the access token (HTTP 401)."""

    def on_tokens_issued(self) -> None:
        """A token exchange or refresh succeeded."""


class LoggingNotifier(ChangeNotifier):
    """Default notifier: records every notification at DEBUG level."""

    def on_rows_inserted(self, parent_address: Address, start: int, end: int) -> None:
        logger.debug(
            "Rows %d..%d inserted under %s@%d",
            start,
            end,
            parent_address.parent_id,
            parent_address.position,
        )

    def on_credential_expired(self) -> None:
        logger.debug("Credential expired")

    def on_tokens_issued(self) -> None:
        logger.debug("Tokens issued")
