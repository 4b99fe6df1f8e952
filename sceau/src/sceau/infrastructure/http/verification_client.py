"""
HTTP verification client.

Exchanges signed challenges with the backend wallet auth endpoints.
"""

import threading
from collections import OrderedDict
from typing import Any, Optional

from pydantic import ValidationError

from sceau.domain.entities.session_credential import SessionCredential
from sceau.domain.entities.verification_request import VerificationRequest
from sceau.domain.exceptions import (
    NetworkError,
    ReplayDetectedError,
    SceauException,
    VerificationRejectedError,
)
from sceau.domain.services.i_verification_client import IVerificationClient
from sceau.domain.value_objects.wallet_address import truncate_address
from sceau.infrastructure.http.api_client import ApiClient
from sceau.infrastructure.http.schemas import (
    LinkResponse,
    LoginResponse,
    WalletVerificationRequest,
)
from sceau.infrastructure.monitoring.metrics import verification_requests_total
from shared.reporter import SystemReporter
from shared.reporter.emojis import WalletEmoji

DEFAULT_SUBMITTED_LIMIT = 10_000


class HttpVerificationClient(IVerificationClient):
    """
    Backend verification over HTTP.

    Keeps a ledger of submitted nonces so one client never sends the
    same signature twice, even if the backend would accept it.
    The ledger keeps the most recent submitted_limit nonces.
    """

    def __init__(
        self,
        api_client: ApiClient,
        login_endpoint: str = "/auth/wallet",
        link_endpoint: str = "/auth/link-wallet",
        reporter: Optional[SystemReporter] = None,
        metrics_enabled: bool = True,
        submitted_limit: int = DEFAULT_SUBMITTED_LIMIT,
    ):
        """
        Initialize verification client.

        Args:
            api_client: Authorized API client
            login_endpoint: Path exchanging a login signature for a token
            link_endpoint: Path linking a wallet to the current account
            reporter: Optional reporter
            metrics_enabled: Record Prometheus counters
            submitted_limit: Max nonces kept in the submitted ledger
        """
        self.api_client = api_client
        self.login_endpoint = login_endpoint
        self.link_endpoint = link_endpoint
        self.reporter = reporter
        self.metrics_enabled = metrics_enabled

        self._submitted: "OrderedDict[str, None]" = OrderedDict()
        self._submitted_limit = submitted_limit
        self._lock = threading.Lock()

    async def verify_login(self, request: VerificationRequest) -> SessionCredential:
        """
        Exchange a signed login challenge for a session token.

        Raises:
            ReplayDetectedError: Nonce already submitted by this client
            VerificationRejectedError: Backend declined signature/nonce
            NetworkError: Transport failure or server error
        """
        data = await self._submit(self.login_endpoint, request)

        try:
            response = LoginResponse.model_validate(data)
        except ValidationError as e:
            raise VerificationRejectedError(
                "Backend response did not include a session token"
            ) from e

        credential = SessionCredential(response.data.token)
        self._log_info(
            f"{WalletEmoji.TOKEN} Token issued for "
            f"{truncate_address(request.address)}: {credential.masked()}"
        )
        return credential

    async def verify_link(self, request: VerificationRequest) -> None:
        """
        Link the signing wallet to the authenticated account.

        Raises:
            ReplayDetectedError: Nonce already submitted by this client
            VerificationRejectedError: Backend declined signature/nonce
            NetworkError: Transport failure or server error
        """
        data = await self._submit(self.link_endpoint, request)

        if data is not None:
            try:
                response = LinkResponse.model_validate(data)
            except ValidationError as e:
                raise VerificationRejectedError("Unexpected link response") from e
            if not response.success:
                raise VerificationRejectedError(
                    response.message or "Wallet linking failed"
                )

        self._log_info(
            f"{WalletEmoji.LINK} Linked {truncate_address(request.address)}"
        )

    async def _submit(self, endpoint: str, request: VerificationRequest) -> Any:
        self._claim_nonce(request.nonce)

        payload = WalletVerificationRequest(**request.to_payload()).model_dump()
        self._log_info(f"POST {endpoint} (nonce {request.nonce[:12]}...)", verbose_level=2)

        try:
            data = await self.api_client.post(endpoint, payload)
        except NetworkError:
            self._record(endpoint, "network_error")
            raise
        except VerificationRejectedError:
            self._record(endpoint, "rejected")
            raise
        except SceauException:
            self._record(endpoint, "error")
            raise

        self._record(endpoint, "success")
        return data

    def _claim_nonce(self, nonce: str) -> None:
        with self._lock:
            if nonce in self._submitted:
                raise ReplayDetectedError(nonce)
            self._submitted[nonce] = None
            while len(self._submitted) > self._submitted_limit:
                self._submitted.popitem(last=False)

    def _record(self, endpoint: str, status: str) -> None:
        if self.metrics_enabled:
            verification_requests_total.labels(endpoint=endpoint, status=status).inc()

    def _log_info(self, msg: str, verbose_level: int = 1) -> None:
        if self.reporter:
            self.reporter.info(
                msg, context="VerificationClient", verbose_level=verbose_level
            )
