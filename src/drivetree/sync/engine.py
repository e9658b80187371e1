"""SyncEngine: drives token exchange, listings and uploads into a FileTree."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any, Optional, Union

from drivetree.auth import AuthState, OAuthClient, TokenEvent, TokenState
from drivetree.config import SyncConfig
from drivetree.errors import (
    DecodeError,
    DriveTreeError,
    DuplicateIdError,
    HttpError,
    HttpErrorInfo,
    InvalidStateError,
    InvalidTransitionError,
    UnknownParentError,
    map_http_error,
)
from drivetree.local import FileReader, read_local_file
from drivetree.models import Diagnostic, DiagnosticKind, TokenGrant, TreeNode
from drivetree.remote import DriveRemoteClient, RawResponse, RemoteClient, metadata_part
from drivetree.remote.client import MultipartPart
from drivetree.remote.endpoints import bearer_headers, build_list_url, build_upload_url
from drivetree.tree import ROOT_ID, FileTree, PendingInserts
from drivetree.util.ids import new_request_id

from .dispatcher import Completion, RequestDispatcher
from .envelope import CollectionRecord, ItemRecord, decode_envelope
from .intent import Intent, OutstandingRequest
from .notifier import ChangeNotifier, LoggingNotifier

logger = logging.getLogger(__name__)


class SyncEngine:
    """
    Mirrors the remote tree into a FileTree.

    Flow:
        authorization code -> TOKEN_EXCHANGE -> AUTHORIZED (first time)
        -> LIST_CHILDREN("root") -> items inserted -> notifier.on_rows_inserted

    Requests run on the dispatcher's executor; their outcomes are applied only
    by process_pending(), one at a time, on the caller's thread.
    """

    def __init__(
        self,
        remote: RemoteClient,
        config: SyncConfig,
        *,
        tree: Optional[FileTree] = None,
        notifier: Optional[ChangeNotifier] = None,
        token_state: Optional[TokenState] = None,
        dispatcher: Optional[RequestDispatcher] = None,
        file_reader: FileReader = read_local_file,
    ) -> None:
        self._remote = remote
        self._config = config
        self._tree = tree if tree is not None else FileTree()
        self._notifier = notifier if notifier is not None else LoggingNotifier()
        self._token_state = token_state if token_state is not None else TokenState()
        self._dispatcher = dispatcher or RequestDispatcher(max_workers=config.max_workers)
        self._file_reader = file_reader

        self._pending = PendingInserts()
        self._parked: list[OutstandingRequest] = []
        self._diagnostics: list[Diagnostic] = []

    @classmethod
    def from_config(
        cls,
        config: SyncConfig,
        *,
        notifier: Optional[ChangeNotifier] = None,
    ) -> SyncEngine:
        """Create an engine talking to Drive through DriveRemoteClient."""
        remote = DriveRemoteClient(
            scopes=config.scopes,
            token_uri=config.token_url,
            timeout_sec=config.request_timeout_sec,
        )
        return cls(remote, config, notifier=notifier)

    # ----------------------------
    # Read APIs
    # ----------------------------
    @property
    def tree(self) -> FileTree:
        return self._tree

    @property
    def token_state(self) -> TokenState:
        return self._token_state

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    @property
    def pending(self) -> PendingInserts:
        return self._pending

    @property
    def parked(self) -> list[OutstandingRequest]:
        """Requests held back until credentials are renewed."""
        return list(self._parked)

    @property
    def outstanding(self) -> list[OutstandingRequest]:
        return self._dispatcher.outstanding

    # ----------------------------
    # Authorization
    # ----------------------------
    def authorization_url(self) -> str:
        client = OAuthClient(
            self._config.auth_info,
            scopes=self._config.scopes,
            token_uri=self._config.token_url,
        )
        return client.authorization_url()

    def on_authorization_code(self, code: str) -> str:
        """
        Start exchanging an authorization code for tokens.

        Returns:
            The request id of the TOKEN_EXCHANGE request.

        Raises:
            InvalidTransitionError: a code is not expected in the current state.
        """
        self._token_state.transition(TokenEvent.code_received())
        auth = self._config.auth_info
        request = OutstandingRequest(request_id=new_request_id(), intent=Intent.TOKEN_EXCHANGE)
        self._dispatcher.submit(
            request,
            lambda: self._remote.exchange_token(
                code,
                auth.client_id,
                auth.client_secret,
                auth.redirect_uri,
            ),
        )
        return request.request_id

    def refresh_credentials(self) -> str:
        """
        Start refreshing the access token with the stored refresh token.

        Raises:
            InvalidStateError: no refresh token is held.
        """
        refresh_token = self._token_state.current_refresh_token()
        if not refresh_token:
            raise InvalidStateError("No refresh token available")

        auth = self._config.auth_info
        request = OutstandingRequest(request_id=new_request_id(), intent=Intent.TOKEN_REFRESH)
        self._dispatcher.submit(
            request,
            lambda: self._remote.refresh_token(
                refresh_token,
                auth.client_id,
                auth.client_secret,
            ),
        )
        return request.request_id

    def on_token_response(self, grant: TokenGrant) -> AuthState:
        """
        Apply a successful token exchange.

        The first-ever authorization triggers the root listing. A later
        re-authorization resubmits requests parked while credentials were
        being renewed.

        Raises:
            InvalidTransitionError: the grant conflicts with the current tokens.
        """
        first = not self._token_state.ever_authorized
        state = self._token_state.transition(
            TokenEvent.exchange_succeeded(grant.access_token, grant.refresh_token)
        )
        self._notifier.on_tokens_issued()
        if first:
            self.list_children(ROOT_ID)
        self._replay_parked()
        return state

    def on_refresh_response(self, grant: TokenGrant) -> AuthState:
        """Apply a successful refresh and resubmit requests parked while expired."""
        state = self._token_state.transition(
            TokenEvent.refresh_succeeded(grant.access_token, grant.refresh_token)
        )
        self._notifier.on_tokens_issued()
        self._replay_parked()
        return state

    # ----------------------------
    # Requests
    # ----------------------------
    def list_children(self, parent_id: str, *, page_token: Optional[str] = None) -> Optional[str]:
        """
        Request the children of parent_id.

        Returns:
            The request id, or None when the request was parked until the
            credential is renewed (refresh or a new authorization code).

        Raises:
            InvalidStateError: never authorized.
        """
        request = OutstandingRequest(
            request_id=new_request_id(),
            intent=Intent.LIST_CHILDREN,
            parent_id=parent_id,
            page_token=page_token,
        )
        return self._submit(request)

    def request_upload(self, local_path: str, parent_id: str = ROOT_ID) -> Optional[str]:
        """
        Upload a local file under parent_id.

        The response is a single item record and goes through the same
        ingestion path as listings.

        Raises:
            InvalidStateError: never authorized.
            UnknownParentError: parent_id is not mirrored.
            InvalidArgumentError: the local file cannot be read.
        """
        if parent_id not in self._tree:
            raise UnknownParentError(
                f"Parent does not exist: {parent_id}",
                details={"parent_id": parent_id},
            )
        request = OutstandingRequest(
            request_id=new_request_id(),
            intent=Intent.UPLOAD,
            parent_id=parent_id,
            local_path=local_path,
        )
        return self._submit(request)

    def process_pending(self, *, block: bool = False, timeout: Optional[float] = None) -> int:
        """Apply finished requests; returns how many were handled."""
        return self._dispatcher.drain(self.handle_completion, block=block, timeout=timeout)

    def close(self) -> None:
        self._dispatcher.shutdown()

    # ----------------------------
    # Response routing
    # ----------------------------
    def handle_completion(self, completion: Completion) -> None:
        """Route a finished request by its intent."""
        request = completion.request
        if completion.error is not None:
            self._handle_failure(request, completion.error)
            return

        intent = request.intent
        if intent is Intent.TOKEN_EXCHANGE:
            self._apply_grant(completion.result, refresh=False)
        elif intent is Intent.TOKEN_REFRESH:
            self._apply_grant(completion.result, refresh=True)
        elif intent in (Intent.LIST_CHILDREN, Intent.UPLOAD):
            response: RawResponse = completion.result
            if self.on_http_status(response.status_code, request=request, response=response):
                self.on_list_response(response.body, request=request)
        else:
            raise ValueError(f"Unsupported intent: {intent}")

    def on_http_status(
        self,
        code: int,
        *,
        request: Optional[OutstandingRequest] = None,
        response: Optional[RawResponse] = None,
    ) -> bool:
        """
        Check a response status before decoding.

        Returns:
            True when the body should be decoded (2xx). A 401 moves the token
            state to EXPIRED and notifies once; the rejected request is parked
            for replay. Other statuses are recorded.
        """
        if code == 401:
            previous = self._token_state.state
            try:
                state = self._token_state.transition(TokenEvent.credential_rejected())
            except InvalidTransitionError as exc:
                # A stale 401 while a new code is being exchanged.
                if not self._token_state.ever_authorized:
                    self._diagnose(DiagnosticKind.INVALID_TRANSITION, str(exc), status_code=code)
                    return False
                state = previous
            if request is not None and request.intent in (Intent.LIST_CHILDREN, Intent.UPLOAD):
                self._parked.append(request)
            if state is not previous:
                self._notifier.on_credential_expired()
            return False

        if 200 <= code <= 299:
            return True

        info = response.error_info() if response is not None else HttpErrorInfo(status_code=code)
        err = map_http_error(info)
        self._diagnose(
            DiagnosticKind.HTTP_ERROR,
            f"{type(err).__name__}: {err}",
            parent_id=request.parent_id if request is not None else None,
            status_code=code,
            details={"reason": info.reason} if info.reason else None,
        )
        return False

    def on_list_response(
        self,
        raw_body: Union[bytes, str],
        *,
        request: Optional[OutstandingRequest] = None,
    ) -> list[int]:
        """
        Decode a listing (or upload) body and insert its items.

        Returns:
            Sibling positions of the inserted nodes, in record order.
        """
        try:
            payload = json.loads(raw_body)
        except (UnicodeDecodeError, ValueError) as exc:
            self._diagnose(DiagnosticKind.DECODE_ERROR, f"Response body is not JSON: {exc}")
            return []

        positions: list[int] = []
        self._ingest(payload, positions, request)
        return positions

    # ----------------------------
    # Internals
    # ----------------------------
    def _submit(self, request: OutstandingRequest) -> Optional[str]:
        state = self._token_state.state
        if state is not AuthState.AUTHORIZED:
            if self._token_state.ever_authorized:
                logger.info("Credential %s; parking %s request", state.value, request.intent.value)
                self._parked.append(request)
                return None
            raise InvalidStateError(
                "Not authorized. Exchange an authorization code first.",
                details={"state": state.value},
            )

        headers = bearer_headers(self._token_state.current_access_token())

        if request.intent is Intent.LIST_CHILDREN:
            url = build_list_url(
                request.parent_id or ROOT_ID,
                api_base_url=self._config.api_base_url,
                page_token=request.page_token,
            )
            self._dispatcher.submit(request, lambda: self._remote.get(url, headers))
        elif request.intent is Intent.UPLOAD:
            url = build_upload_url(upload_url=self._config.upload_url)
            parts = self._upload_parts(request)
            self._dispatcher.submit(
                request,
                lambda: self._remote.post_multipart(url, headers, parts),
            )
        else:
            raise ValueError(f"Cannot submit intent: {request.intent}")
        return request.request_id

    def _upload_parts(self, request: OutstandingRequest) -> list[MultipartPart]:
        local = self._file_reader(request.local_path or "")
        metadata = {
            "title": local.name,
            "mimeType": local.mime_type,
            "parents": [{"id": request.parent_id or ROOT_ID}],
        }
        return [
            metadata_part(metadata),
            MultipartPart(content_type=local.mime_type, body=local.content),
        ]

    def _follow_up(self, request: OutstandingRequest) -> None:
        """Submit a request issued while handling a response; failures become diagnostics."""
        try:
            self._submit(request)
        except DriveTreeError as exc:
            self._diagnose(
                DiagnosticKind.TRANSPORT_ERROR,
                f"Could not submit {request.intent.value} request: {exc}",
                parent_id=request.parent_id,
            )

    def _replay_parked(self) -> None:
        parked, self._parked = self._parked, []
        if parked:
            logger.info("Resubmitting %d parked request(s)", len(parked))
        for request in parked:
            self._follow_up(replace(request, request_id=new_request_id()))

    def _apply_grant(self, grant: TokenGrant, *, refresh: bool) -> None:
        try:
            if refresh:
                self.on_refresh_response(grant)
            else:
                self.on_token_response(grant)
        except InvalidTransitionError as exc:
            self._diagnose(DiagnosticKind.INVALID_TRANSITION, str(exc))

    def _handle_failure(self, request: OutstandingRequest, error: BaseException) -> None:
        status_code = error.status_code if isinstance(error, HttpError) else None
        kind = DiagnosticKind.HTTP_ERROR if status_code else DiagnosticKind.TRANSPORT_ERROR

        if request.intent is Intent.TOKEN_EXCHANGE:
            self._diagnose(kind, f"Token exchange failed: {error}", status_code=status_code)
            try:
                self._token_state.transition(TokenEvent.exchange_failed())
            except InvalidTransitionError as exc:
                self._diagnose(DiagnosticKind.INVALID_TRANSITION, str(exc))
            return

        if request.intent is Intent.TOKEN_REFRESH:
            self._diagnose(kind, f"Token refresh failed: {error}", status_code=status_code)
            return

        if status_code == 401:
            self.on_http_status(401, request=request)
            return

        self._diagnose(
            kind,
            f"{request.intent.value} request failed: {error}",
            parent_id=request.parent_id,
            status_code=status_code,
        )

    def _ingest(
        self,
        payload: Any,
        positions: list[int],
        request: Optional[OutstandingRequest],
    ) -> None:
        try:
            envelope = decode_envelope(payload)
        except DecodeError as exc:
            self._diagnose(
                DiagnosticKind.DECODE_ERROR,
                str(exc),
                node_id=exc.details.get("node_id"),
            )
            return

        if isinstance(envelope, CollectionRecord):
            for item in envelope.items:
                self._ingest(item, positions, request)
            if (
                envelope.next_page_token
                and request is not None
                and request.intent is Intent.LIST_CHILDREN
            ):
                self._follow_up(
                    replace(
                        request,
                        request_id=new_request_id(),
                        page_token=envelope.next_page_token,
                    )
                )
            return

        self._ingest_item(envelope, positions)

    def _ingest_item(self, record: ItemRecord, positions: list[int]) -> None:
        parent_id = record.parent.resolve()
        node = record.to_node()
        try:
            self._place(node, parent_id, positions)
        except UnknownParentError as exc:
            if self._config.defer_orphans and self._pending.defer(node, parent_id):
                logger.info("Deferring %s until parent %s arrives", node.id, parent_id)
                return
            self._diagnose(
                DiagnosticKind.UNKNOWN_PARENT,
                str(exc),
                node_id=node.id,
                parent_id=parent_id,
            )

    def _place(self, node: TreeNode, parent_id: str, positions: list[int]) -> None:
        try:
            position = self._tree.insert(node, parent_id)
        except DuplicateIdError as exc:
            self._diagnose(
                DiagnosticKind.DUPLICATE_ID,
                str(exc),
                node_id=node.id,
                parent_id=parent_id,
            )
            return

        positions.append(position)
        parent_address = self._tree.parent_address(node.id)
        if parent_address is not None:
            self._notifier.on_rows_inserted(parent_address, position, position)

        if self._config.recursive and node.is_folder:
            self._follow_up(
                OutstandingRequest(
                    request_id=new_request_id(),
                    intent=Intent.LIST_CHILDREN,
                    parent_id=node.id,
                )
            )

        for waiting in self._pending.release(node.id):
            logger.info("Replaying deferred %s under %s", waiting.id, node.id)
            self._place(waiting, node.id, positions)

    def _diagnose(
        self,
        kind: DiagnosticKind,
        message: str,
        *,
        node_id: Optional[str] = None,
        parent_id: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        logger.warning("[%s] %s", kind.value, message)
        self._diagnostics.append(
            Diagnostic(
                kind=kind,
                message=message,
                node_id=node_id,
                parent_id=parent_id,
                status_code=status_code,
                details=details or {},
            )
        )
