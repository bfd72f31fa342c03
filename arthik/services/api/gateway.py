"""
API Gateway

The only code that talks to the backend. Every round trip goes through
`ApiGateway.request`, which:
1. Attaches the bearer token when one is held
2. Refuses state-changing requests without a CSRF token, before any I/O
3. Maps non-2xx answers to the ApiError hierarchy
4. Tears the session down on 401 before raising
5. Drops answers that arrive after the session they were sent for ended
6. Picks up a refreshed CSRF token from any successful JSON body

GET requests are retried with exponential back-off when the transport
fails. Writes are never retried.
"""

from typing import Any, Awaitable, Callable, Optional
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from arthik.config.settings import ApiSettings, get_settings
from arthik.models.entities import (
    Account,
    DashboardPayload,
    LoginResult,
    Note,
    Recurrence,
    SettingsResult,
    Transaction,
    TransactionRequest,
)
from arthik.services.api.errors import (
    LOGIN_RATE_LIMITED_MESSAGE,
    AuthenticationFailedError,
    RateLimitedError,
    RequestFailedError,
    ResponseFormatError,
    SessionEndedError,
    SessionError,
    TransportFailedError,
    ValidationFailedError,
)
from arthik.state.session import SessionStore


logger = structlog.get_logger(__name__)

UnauthorizedHandler = Callable[[str], Awaitable[None]]

_ACCOUNTS = TypeAdapter(list[Account])
_TRANSACTIONS = TypeAdapter(list[Transaction])
_RECURRENCES = TypeAdapter(list[Recurrence])
_NOTES = TypeAdapter(list[Note])


def encode_segment(value: str) -> str:
    """URL-encode one path segment, slashes included."""
    return quote(value, safe="")


class ApiGateway:
    """
    Async client for the Arthik REST API.

    One instance per client session; it shares the SessionStore with the
    rest of the client so a login, logout or 401 is seen everywhere at once.
    """

    def __init__(
        self,
        session: SessionStore,
        settings: Optional[ApiSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_unauthorized: Optional[UnauthorizedHandler] = None,
    ):
        """
        Initialize the gateway.

        Args:
            session: Token holder, read on every request
            settings: Backend location and retry policy; defaults to the environment
            transport: Custom httpx transport (tests use httpx.MockTransport)
            on_unauthorized: Awaited with the request path after a 401 has cleared the session
        """
        self._session = session
        self._settings = settings or get_settings().api
        self._transport = transport
        self._on_unauthorized = on_unauthorized
        self._client: Optional[httpx.AsyncClient] = None

        self._send_get = retry(
            stop=stop_after_attempt(self._settings.retry_attempts),
            wait=wait_exponential(
                multiplier=1,
                min=self._settings.retry_wait_min,
                max=self._settings.retry_wait_max,
            ),
            retry=retry_if_exception_type(TransportFailedError),
            reraise=True,
        )(self._send)

    def set_unauthorized_handler(self, handler: Optional[UnauthorizedHandler]) -> None:
        self._on_unauthorized = handler

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    # =========================================================================
    # CORE REQUEST
    # =========================================================================

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Any] = None,
        *,
        is_login: bool = False,
    ) -> Any:
        """
        Perform one backend round trip.

        Args:
            method: HTTP method
            path: Path below the base URL, starting with "/"
            json: JSON body for writes
            is_login: The login call; exempt from the CSRF check and
                reported with the login rate-limit message

        Returns:
            Parsed JSON body, or None for an empty body

        Raises:
            SessionError: Write attempted without a CSRF token (nothing sent)
            SessionEndedError: No session held (nothing sent), or the session
                changed before the answer arrived (answer dropped)
            AuthenticationFailedError: 401; the session has been cleared
            RateLimitedError: 429
            ValidationFailedError: 400
            RequestFailedError: Other non-2xx
            TransportFailedError: No answer from the backend
            ResponseFormatError: Body is not JSON
        """
        method = method.upper()
        headers = {"Content-Type": "application/json"}

        token = self._session.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        elif not is_login:
            logger.info("api_request_without_session", method=method, path=path)
            raise SessionEndedError()

        if method != "GET" and not is_login:
            csrf_token = self._session.get_csrf_token()
            if not csrf_token:
                logger.warning("csrf_token_missing", method=method, path=path)
                raise SessionError()
            headers["X-CSRF-Token"] = csrf_token

        url = f"{self._settings.base_url}{path}"

        if method == "GET":
            response = await self._send_get(method, url, headers, json)
        else:
            response = await self._send(method, url, headers, json)

        if not is_login and self._session.get_token() != token:
            logger.info("api_answer_dropped", method=method, path=path)
            raise SessionEndedError()

        return await self._handle_response(response, path, is_login=is_login)

    async def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        json: Optional[Any],
    ) -> httpx.Response:
        try:
            return await self._get_client().request(method, url, headers=headers, json=json)
        except httpx.TransportError as e:
            logger.error("api_transport_failed", method=method, url=url, error=str(e))
            raise TransportFailedError(f"Could not reach the server: {e}") from e

    async def _handle_response(
        self,
        response: httpx.Response,
        path: str,
        *,
        is_login: bool,
    ) -> Any:
        status = response.status_code

        if status == 401 and not is_login:
            logger.info("api_unauthorized", path=path)
            self._session.clear()
            if self._on_unauthorized is not None:
                await self._on_unauthorized(path)
            raise AuthenticationFailedError()

        if status == 429:
            raise RateLimitedError(LOGIN_RATE_LIMITED_MESSAGE) if is_login else RateLimitedError()

        if status == 400:
            raise ValidationFailedError(self._error_message(response))

        if not response.is_success:
            logger.warning("api_request_failed", path=path, status=status)
            raise RequestFailedError(status)

        if not response.content or not response.content.strip():
            return None

        try:
            body = response.json()
        except ValueError as e:
            raise ResponseFormatError(f"Malformed response from {path}") from e

        if isinstance(body, dict):
            csrf_token = body.get("csrfToken")
            if csrf_token:
                self._session.set_csrf_token(csrf_token)

        return body

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Backend message of a 400: JSON `error`/`message`, else the text body."""
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            for key in ("error", "message"):
                if body.get(key):
                    return str(body[key])

        text = response.text.strip()
        return text or "Request failed"

    # =========================================================================
    # PARSING HELPERS
    # =========================================================================

    @staticmethod
    def _parse_list(adapter: TypeAdapter, body: Any, path: str) -> list:
        if body is None:
            return []
        try:
            return adapter.validate_python(body)
        except ValidationError as e:
            raise ResponseFormatError(f"Unexpected data from {path}: {e}") from e

    @staticmethod
    def _parse_model(model: type[BaseModel], body: Any, path: str) -> Any:
        try:
            return model.model_validate(body or {})
        except ValidationError as e:
            raise ResponseFormatError(f"Unexpected data from {path}: {e}") from e

    # =========================================================================
    # AUTH & SETTINGS
    # =========================================================================

    async def login(self, password: str) -> LoginResult:
        body = await self.request("POST", "/login", {"password": password}, is_login=True)
        return self._parse_model(LoginResult, body, "/login")

    async def logout(self) -> None:
        await self.request("POST", "/logout")

    async def get_settings(self) -> dict[str, Any]:
        body = await self.request("GET", "/settings")
        return body if isinstance(body, dict) else {}

    async def update_settings(self, payload: dict[str, Any]) -> SettingsResult:
        body = await self.request("POST", "/settings", payload)
        return self._parse_model(SettingsResult, body, "/settings")

    async def get_dashboard(self) -> DashboardPayload:
        body = await self.request("GET", "/dashboard")
        return self._parse_model(DashboardPayload, body, "/dashboard")

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    async def list_accounts(self) -> list[Account]:
        body = await self.request("GET", "/accounts")
        return self._parse_list(_ACCOUNTS, body, "/accounts")

    async def add_account(self, account: Account) -> Any:
        return await self.request("POST", "/accounts", account.to_wire())

    async def delete_account(self, name: str) -> Any:
        return await self.request("DELETE", f"/accounts/{encode_segment(name)}")

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    async def list_transactions(self) -> list[Transaction]:
        body = await self.request("GET", "/transactions")
        return self._parse_list(_TRANSACTIONS, body, "/transactions")

    async def save_transaction(self, transaction: TransactionRequest) -> Any:
        """Create (empty id) or replace (existing id) a transaction."""
        return await self.request("POST", "/transactions", transaction.to_wire())

    async def delete_transaction(self, transaction_id: str) -> Any:
        return await self.request("DELETE", f"/transactions/{encode_segment(transaction_id)}")

    # =========================================================================
    # RECURRENCES
    # =========================================================================

    async def list_recurrences(self) -> list[Recurrence]:
        body = await self.request("GET", "/recurrence")
        return self._parse_list(_RECURRENCES, body, "/recurrence")

    async def save_recurrence(self, recurrence: Recurrence) -> Any:
        return await self.request("POST", "/recurrence", recurrence.to_wire())

    async def delete_recurrence(self, recurrence_id: str) -> Any:
        return await self.request("DELETE", f"/recurrence/{encode_segment(recurrence_id)}")

    async def apply_recurrence(self, recurrence_id: str) -> Any:
        return await self.request("POST", f"/recurrence/apply/{encode_segment(recurrence_id)}")

    # =========================================================================
    # NOTES
    # =========================================================================

    async def list_notes(self) -> list[Note]:
        body = await self.request("GET", "/notes")
        return self._parse_list(_NOTES, body, "/notes")

    async def save_note(self, note: Note) -> Any:
        return await self.request("POST", "/notes", note.to_wire())

    async def delete_note(self, note_id: str) -> Any:
        return await self.request("DELETE", f"/notes/{encode_segment(note_id)}")
