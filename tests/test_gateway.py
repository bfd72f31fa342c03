"""Tests for the API gateway, using httpx.MockTransport as the backend."""

import pytest
import httpx

from arthik.config.settings import ApiSettings
from arthik.models.entities import Account, AccountCategory
from arthik.services.api import (
    ApiGateway,
    AuthenticationFailedError,
    RateLimitedError,
    RequestFailedError,
    ResponseFormatError,
    SessionEndedError,
    SessionError,
    TransportFailedError,
    ValidationFailedError,
)
from arthik.services.api.errors import LOGIN_RATE_LIMITED_MESSAGE, RATE_LIMITED_MESSAGE
from arthik.services.storage import MemoryStorage
from arthik.state import SessionStore


SETTINGS = ApiSettings(
    base_url="http://testserver/api",
    retry_attempts=3,
    retry_wait_min=0,
    retry_wait_max=0,
)


class Recorder:
    """MockTransport handler answering every request with `response`."""

    def __init__(self, response=None, responses=None):
        self.requests: list[httpx.Request] = []
        self._responses = list(responses or [])
        self._response = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._responses:
            item = self._responses.pop(0)
        else:
            item = self._response
        if isinstance(item, Exception):
            raise item
        return item


def make_gateway(handler, token="tok", csrf="csrf", on_unauthorized=None):
    session = SessionStore(MemoryStorage())
    if token:
        session.set_token(token)
    if csrf:
        session.set_csrf_token(csrf)
    gateway = ApiGateway(
        session,
        settings=SETTINGS,
        transport=httpx.MockTransport(handler),
        on_unauthorized=on_unauthorized,
    )
    return gateway, session


class TestRequestHeaders:
    """Tests for what the gateway attaches to requests."""

    @pytest.mark.asyncio
    async def test_bearer_and_csrf_headers(self):
        """Test writes carry both the token and the CSRF token."""
        handler = Recorder(httpx.Response(200, json={"success": True}))
        gateway, _ = make_gateway(handler)

        await gateway.request("POST", "/notes", {"heading": "h"})

        sent = handler.requests[0]
        assert sent.headers["Authorization"] == "Bearer tok"
        assert sent.headers["X-CSRF-Token"] == "csrf"
        assert str(sent.url) == "http://testserver/api/notes"

    @pytest.mark.asyncio
    async def test_write_without_csrf_is_not_sent(self):
        """Test a write without a CSRF token fails before any I/O."""
        handler = Recorder(httpx.Response(200, json={}))
        gateway, _ = make_gateway(handler, csrf=None)

        with pytest.raises(SessionError):
            await gateway.request("DELETE", "/notes/n1")
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_get_without_csrf_is_sent(self):
        """Test reads do not need a CSRF token."""
        handler = Recorder(httpx.Response(200, json=[]))
        gateway, _ = make_gateway(handler, csrf=None)

        assert await gateway.list_notes() == []
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_login_is_exempt_from_csrf(self):
        """Test login works with no session at all."""
        handler = Recorder(httpx.Response(200, json={"success": True, "token": "t", "csrfToken": "c"}))
        gateway, session = make_gateway(handler, token=None, csrf=None)

        result = await gateway.login("pw")

        assert result.success
        assert "Authorization" not in handler.requests[0].headers
        assert session.get_csrf_token() == "c"

    @pytest.mark.asyncio
    async def test_path_segments_are_encoded(self):
        """Test account names are URL-encoded, slashes included."""
        handler = Recorder(httpx.Response(200, json={"success": True}))
        gateway, _ = make_gateway(handler)

        await gateway.delete_account("Food & Drinks/Misc")

        assert handler.requests[0].url.raw_path == b"/api/accounts/Food%20%26%20Drinks%2FMisc"


class TestResponseMapping:
    """Tests for status code handling."""

    @pytest.mark.asyncio
    async def test_401_clears_session_and_calls_hook(self):
        """Test 401 tears down the session before raising."""
        calls = []

        async def on_unauthorized(path):
            calls.append(path)

        handler = Recorder(httpx.Response(401))
        gateway, session = make_gateway(handler, on_unauthorized=on_unauthorized)

        with pytest.raises(AuthenticationFailedError):
            await gateway.list_accounts()

        assert not session.is_authenticated()
        assert session.get_csrf_token() is None
        assert calls == ["/accounts"]

    @pytest.mark.asyncio
    async def test_401_on_login_is_not_a_logout(self):
        """Test a 401 answer to login does not trigger the forced logout."""
        calls = []

        async def on_unauthorized(path):
            calls.append(path)

        gateway, _ = make_gateway(Recorder(httpx.Response(401)), token=None,
                                  on_unauthorized=on_unauthorized)

        with pytest.raises(RequestFailedError):
            await gateway.login("pw")
        assert calls == []

    @pytest.mark.asyncio
    async def test_429(self):
        """Test 429 maps to the rate-limit message."""
        gateway, _ = make_gateway(Recorder(httpx.Response(429)))
        with pytest.raises(RateLimitedError) as exc_info:
            await gateway.list_transactions()
        assert exc_info.value.message == RATE_LIMITED_MESSAGE

    @pytest.mark.asyncio
    async def test_429_on_login(self):
        """Test 429 on login gets the login wording."""
        gateway, _ = make_gateway(Recorder(httpx.Response(429)), token=None)
        with pytest.raises(RateLimitedError) as exc_info:
            await gateway.login("pw")
        assert exc_info.value.message == LOGIN_RATE_LIMITED_MESSAGE

    @pytest.mark.asyncio
    async def test_400_uses_backend_error(self):
        """Test 400 carries the backend's `error` text."""
        gateway, _ = make_gateway(Recorder(httpx.Response(400, json={"error": "Account already exists"})))
        with pytest.raises(ValidationFailedError, match="Account already exists"):
            await gateway.add_account(Account(name="Bank", category=AccountCategory.ASSETS))

    @pytest.mark.asyncio
    async def test_400_plain_text(self):
        """Test 400 with a text body uses the text."""
        gateway, _ = make_gateway(Recorder(httpx.Response(400, text="bad day of month")))
        with pytest.raises(ValidationFailedError, match="bad day of month"):
            await gateway.request("POST", "/recurrence", {})

    @pytest.mark.asyncio
    async def test_500(self):
        """Test other failures carry the status."""
        gateway, _ = make_gateway(Recorder(httpx.Response(500)))
        with pytest.raises(RequestFailedError) as exc_info:
            await gateway.get_dashboard()
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_empty_body_is_none(self):
        """Test a 2xx with no body parses as None."""
        gateway, _ = make_gateway(Recorder(httpx.Response(200)))
        assert await gateway.request("DELETE", "/notes/n1") is None

    @pytest.mark.asyncio
    async def test_malformed_json(self):
        """Test a non-JSON 2xx body is a format error."""
        gateway, _ = make_gateway(Recorder(httpx.Response(200, text="<html>")))
        with pytest.raises(ResponseFormatError):
            await gateway.request("GET", "/accounts")

    @pytest.mark.asyncio
    async def test_null_list_is_empty(self):
        """Test a JSON null list parses as empty."""
        gateway, _ = make_gateway(Recorder(httpx.Response(200, json=None)))
        assert await gateway.list_recurrences() == []

    @pytest.mark.asyncio
    async def test_csrf_token_refreshed_from_body(self):
        """Test any JSON body with csrfToken updates the session."""
        gateway, session = make_gateway(Recorder(httpx.Response(200, json={"csrfToken": "fresh"})))
        await gateway.get_dashboard()
        assert session.get_csrf_token() == "fresh"


class TestRetries:
    """Tests for transport retries."""

    @pytest.mark.asyncio
    async def test_get_is_retried(self):
        """Test a GET that fails at the transport level is retried."""
        handler = Recorder(responses=[
            httpx.ConnectError("refused"),
            httpx.Response(200, json=[]),
        ])
        gateway, _ = make_gateway(handler)

        assert await gateway.list_accounts() == []
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_get_gives_up(self):
        """Test retries stop after the configured attempts."""
        handler = Recorder(httpx.ConnectError("refused"))
        gateway, _ = make_gateway(handler)

        with pytest.raises(TransportFailedError):
            await gateway.list_accounts()
        assert len(handler.requests) == SETTINGS.retry_attempts

    @pytest.mark.asyncio
    async def test_write_is_not_retried(self):
        """Test writes are sent once."""
        handler = Recorder(httpx.ConnectError("refused"))
        gateway, _ = make_gateway(handler)

        with pytest.raises(TransportFailedError):
            await gateway.request("POST", "/notes", {})
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_status_errors_are_not_retried(self):
        """Test a 500 is not retried."""
        handler = Recorder(httpx.Response(500))
        gateway, _ = make_gateway(handler)

        with pytest.raises(RequestFailedError):
            await gateway.list_accounts()
        assert len(handler.requests) == 1


class TestEndedSession:
    """Tests for requests made or answered after the session ended."""

    @pytest.mark.asyncio
    async def test_request_without_token_is_not_sent(self):
        """Test a non-login request with no session fails before any I/O."""
        handler = Recorder(httpx.Response(200, json=[]))
        gateway, _ = make_gateway(handler, token=None, csrf=None)

        with pytest.raises(SessionEndedError):
            await gateway.list_accounts()
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_answer_after_logout_is_dropped(self):
        """Test an answer for a cleared session is neither parsed nor used."""
        def handler(request):
            session.clear()
            return httpx.Response(200, json={"csrfToken": "late"})

        gateway, session = make_gateway(handler)

        with pytest.raises(SessionEndedError):
            await gateway.get_dashboard()
        assert session.get_csrf_token() is None

    @pytest.mark.asyncio
    async def test_401_for_an_old_token_keeps_the_new_session(self):
        """Test a 401 sent for a replaced token neither clears nor logs out."""
        calls = []

        async def on_unauthorized(path):
            calls.append(path)

        def handler(request):
            session.set_token("fresh")
            return httpx.Response(401)

        gateway, session = make_gateway(handler, on_unauthorized=on_unauthorized)

        with pytest.raises(SessionEndedError):
            await gateway.list_accounts()
        assert session.get_token() == "fresh"
        assert session.get_csrf_token() == "csrf"
        assert calls == []

    @pytest.mark.asyncio
    async def test_retried_get_still_checks_the_session(self):
        """Test a GET that succeeds on retry is dropped if the session ended meanwhile."""
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("refused")
            session.clear()
            return httpx.Response(200, json=[])

        gateway, session = make_gateway(handler)

        with pytest.raises(SessionEndedError):
            await gateway.list_accounts()
        assert len(attempts) == 2
