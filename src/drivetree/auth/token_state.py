"""OAuth token state machine (pure, no I/O)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from drivetree.errors import InvalidTransitionError

logger = logging.getLogger(__name__)


class AuthState(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    AWAITING_EXCHANGE = "AWAITING_EXCHANGE"
    AUTHORIZED = "AUTHORIZED"
    EXPIRED = "EXPIRED"


class TokenEventKind(str, Enum):
    CODE_RECEIVED = "CODE_RECEIVED"
    EXCHANGE_SUCCEEDED = "EXCHANGE_SUCCEEDED"
    EXCHANGE_FAILED = "EXCHANGE_FAILED"
    CREDENTIAL_REJECTED = "CREDENTIAL_REJECTED"
    REFRESH_SUCCEEDED = "REFRESH_SUCCEEDED"


@dataclass(frozen=True, slots=True)
class TokenEvent:
    """An input to TokenState.transition(). Tokens are used by *_SUCCEEDED only."""

    kind: TokenEventKind
    access_token: str = ""
    refresh_token: str = ""

    @classmethod
    def code_received(cls) -> TokenEvent:
        return cls(TokenEventKind.CODE_RECEIVED)

    @classmethod
    def exchange_succeeded(cls, access_token: str, refresh_token: str) -> TokenEvent:
        return cls(TokenEventKind.EXCHANGE_SUCCEEDED, access_token, refresh_token)

    @classmethod
    def exchange_failed(cls) -> TokenEvent:
        return cls(TokenEventKind.EXCHANGE_FAILED)

    @classmethod
    def credential_rejected(cls) -> TokenEvent:
        return cls(TokenEventKind.CREDENTIAL_REJECTED)

    @classmethod
    def refresh_succeeded(cls, access_token: str, refresh_token: str = "") -> TokenEvent:
        return cls(TokenEventKind.REFRESH_SUCCEEDED, access_token, refresh_token)


class TokenState:
    """
    Tracks where the OAuth handshake stands and holds the current tokens.

    Transitions:
        UNAUTHENTICATED/EXPIRED --CODE_RECEIVED--> AWAITING_EXCHANGE
        AWAITING_EXCHANGE --EXCHANGE_SUCCEEDED--> AUTHORIZED
        AWAITING_EXCHANGE --EXCHANGE_FAILED--> UNAUTHENTICATED
        AUTHORIZED --CREDENTIAL_REJECTED--> EXPIRED
        EXPIRED/AUTHORIZED --REFRESH_SUCCEEDED--> AUTHORIZED

    A rejected event raises InvalidTransitionError and leaves state and tokens
    untouched.
    """

    def __init__(self) -> None:
        self._state = AuthState.UNAUTHENTICATED
        self._access_token = ""
        self._refresh_token = ""
        self._ever_authorized = False

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def ever_authorized(self) -> bool:
        """True once AUTHORIZED has been entered at least once."""
        return self._ever_authorized

    def current_access_token(self) -> str:
        return self._access_token

    def current_refresh_token(self) -> str:
        return self._refresh_token

    def transition(self, event: TokenEvent) -> AuthState:
        """Apply event and return the new state."""
        kind = event.kind
        state = self._state

        if kind is TokenEventKind.CODE_RECEIVED:
            if state in (AuthState.UNAUTHENTICATED, AuthState.EXPIRED):
                return self._enter(AuthState.AWAITING_EXCHANGE)

        elif kind is TokenEventKind.EXCHANGE_SUCCEEDED:
            if state is AuthState.AWAITING_EXCHANGE:
                self._require_access_token(event)
                self._access_token = event.access_token
                self._refresh_token = event.refresh_token
                return self._enter(AuthState.AUTHORIZED)
            if state is AuthState.AUTHORIZED:
                if (
                    event.access_token == self._access_token
                    and event.refresh_token == self._refresh_token
                ):
                    return state
                raise InvalidTransitionError(
                    "Conflicting tokens issued while already authorized",
                    details={"state": state.value, "event": kind.value},
                )

        elif kind is TokenEventKind.EXCHANGE_FAILED:
            if state is AuthState.AWAITING_EXCHANGE:
                return self._enter(AuthState.UNAUTHENTICATED)

        elif kind is TokenEventKind.CREDENTIAL_REJECTED:
            if state is AuthState.AUTHORIZED:
                return self._enter(AuthState.EXPIRED)
            if state is AuthState.EXPIRED:
                return state

        elif kind is TokenEventKind.REFRESH_SUCCEEDED:
            if state in (AuthState.EXPIRED, AuthState.AUTHORIZED):
                self._require_access_token(event)
                self._access_token = event.access_token
                if event.refresh_token:
                    self._refresh_token = event.refresh_token
                return self._enter(AuthState.AUTHORIZED)

        raise InvalidTransitionError(
            f"{kind.value} is not allowed in state {state.value}",
            details={"state": state.value, "event": kind.value},
        )

    def _enter(self, new_state: AuthState) -> AuthState:
        if new_state is not self._state:
            logger.info("Token state %s -> %s", self._state.value, new_state.value)
        self._state = new_state
        if new_state is AuthState.AUTHORIZED:
            self._ever_authorized = True
        return new_state

    def _require_access_token(self, event: TokenEvent) -> None:
        if not event.access_token:
            raise InvalidTransitionError(
                "Token grant carries no access token",
                details={"state": self._state.value, "event": event.kind.value},
            )
