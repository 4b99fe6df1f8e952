"""
Authorized backend API client.

Attaches the session bearer token to every request and reacts to 401
answers by clearing the session and redirecting to login.
"""

import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Union

import httpx
from pydantic import ValidationError

from sceau.domain.exceptions import (
    NetworkError,
    UnauthorizedError,
    VerificationRejectedError,
)
from sceau.infrastructure.http.schemas import ErrorResponse
from shared.reporter import SystemReporter
from shared.reporter.emojis import ErrorEmoji

if TYPE_CHECKING:
    from sceau.application.services.session_store import SessionStore

UnauthorizedCallback = Callable[[], Union[None, Awaitable[None]]]


class ApiClient:
    """
    HTTP client for the backend API.

    Handles:
    - JSON headers and base URL
    - Authorization: Bearer <token> from SessionStore
    - 401 -> on_unauthorized() (e.g. HandleUnauthorized: clear + redirect),
      or SessionStore.clear() when no callback is set
    - Mapping of failures to domain exceptions

    Examples:
        async with ApiClient("http://localhost:5000/api", store) as api:
            data = await api.post("/auth/wallet", {"address": "0x1"})
    """

    def __init__(
        self,
        base_url: str,
        session_store: Optional["SessionStore"] = None,
        timeout: float = 15.0,
        on_unauthorized: Optional[UnauthorizedCallback] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: Backend API base URL (e.g., "http://localhost:5000/api")
            session_store: Source of the bearer token (None = anonymous)
            timeout: HTTP request timeout in seconds
            on_unauthorized: Callback invoked on 401; responsible for clearing
            transport: Optional httpx transport (tests use MockTransport)
            reporter: Optional reporter for request logs
        """
        self.base_url = base_url.rstrip("/")
        self.session_store = session_store
        self.timeout = timeout
        self.on_unauthorized = on_unauthorized
        self.reporter = reporter
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """
        Get or create async HTTP client.

        Returns:
            Async HTTP client instance
        """
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                event_hooks={"request": [self._attach_token]},
                transport=self._transport,
            )
        return self._client

    async def _attach_token(self, request: httpx.Request) -> None:
        if self.session_store is None:
            return
        credential = self.session_store.get()
        if credential is not None:
            request.headers["Authorization"] = f"Bearer {credential.token}"

    # ================================================================
    # Requests
    # ================================================================

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, payload: Optional[dict] = None) -> Any:
        return await self.request("POST", path, payload)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def request(
        self, method: str, path: str, payload: Optional[dict] = None
    ) -> Any:
        """
        Send request and return decoded JSON body (None if empty).

        Raises:
            UnauthorizedError: 401 answer (session already cleared)
            VerificationRejectedError: Other 4xx answer
            NetworkError: 5xx answer, timeout or transport failure
        """
        try:
            response = await self.client.request(method, path, json=payload)
        except httpx.TimeoutException as e:
            self._log_warning(f"{ErrorEmoji.TIMEOUT} {method} {path} timed out")
            raise NetworkError(f"Request timed out: {method} {path}") from e
        except httpx.HTTPError as e:
            self._log_warning(f"{ErrorEmoji.NETWORK} {method} {path} failed: {e}")
            raise NetworkError(f"Network error: {e}") from e

        status = response.status_code
        self._log_debug(f"{method} {path} -> {status}")

        if status == 401:
            await self._handle_unauthorized()
            message = self._error_message(response)
            raise UnauthorizedError(message) if message else UnauthorizedError()

        if 400 <= status < 500:
            raise VerificationRejectedError(
                self._error_message(response)
                or f"Request failed with status code {status}",
                status_code=status,
            )

        if status >= 500:
            raise NetworkError(
                self._error_message(response)
                or f"Request failed with status code {status}",
                status_code=status,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise NetworkError("Invalid JSON in backend response") from e

    async def _handle_unauthorized(self) -> None:
        """Run on_unauthorized, or clear the session store when none is set."""
        self._log_warning(f"{ErrorEmoji.REJECTED} 401 received, clearing session")

        if self.on_unauthorized is not None:
            result = self.on_unauthorized()
            if inspect.isawaitable(result):
                await result
        elif self.session_store is not None:
            await self.session_store.clear(cause="unauthorized")

    @staticmethod
    def _error_message(response: httpx.Response) -> Optional[str]:
        """Unwrap {message} from an error body."""
        try:
            body = ErrorResponse.model_validate(response.json())
        except (ValueError, ValidationError):
            return None
        return body.message or body.error

    # ================================================================
    # Lifecycle
    # ================================================================

    async def aclose(self) -> None:
        """Close HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def _log_warning(self, msg: str) -> None:
        if self.reporter:
            self.reporter.warning(msg, context="ApiClient")

    def _log_debug(self, msg: str) -> None:
        if self.reporter:
            self.reporter.debug(msg, context="ApiClient")
