"""
Unit tests for HttpVerificationClient.

Usage:
    python -m tests.unit.infrastructure.test_verification_client
    pytest sceau/tests/unit
"""

import httpx
import pytest

from sceau.domain.entities.session_credential import SessionCredential
from sceau.domain.entities.verification_request import VerificationRequest
from sceau.domain.exceptions import (
    NetworkError,
    ReplayDetectedError,
    VerificationRejectedError,
)
from sceau.infrastructure.http.api_client import ApiClient
from sceau.infrastructure.http.verification_client import HttpVerificationClient
from shared.tests import LaborantTest
from tests.helpers.fake_backend import FakeBackend

BASE_URL = "http://testserver/api"


def make_request(nonce: str = "n1") -> VerificationRequest:
    return VerificationRequest(
        address="0xABC",
        public_key="0xPUB_ABC",
        signature=f"sig-0xABC-{nonce}",
        message=f"APTOS\nmessage: Nonce: {nonce}\nnonce: {nonce}",
        nonce=nonce,
    )


class TestHttpVerificationClient(LaborantTest):
    """Unit tests for HttpVerificationClient."""

    component_name = "sceau"
    test_category = "unit"

    def setup_test(self):
        self.backend = FakeBackend(token="tok123")
        self.api = ApiClient(base_url=BASE_URL, transport=self.backend.transport())
        self.client = HttpVerificationClient(
            api_client=self.api, reporter=self.reporter, metrics_enabled=False
        )

    def with_transport(self, handler) -> HttpVerificationClient:
        api = ApiClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
        return HttpVerificationClient(api_client=api, metrics_enabled=False)

    # ================================================================
    # Login
    # ================================================================

    async def test_login_returns_credential(self):
        """Test signed payload is posted and token unwrapped."""
        self.reporter.info("Testing login verification", context="Test")

        credential = await self.client.verify_login(make_request())

        assert credential == SessionCredential("tok123")
        call = self.backend.calls_to("/auth/wallet")[0]
        assert call.method == "POST"
        assert call.body == {
            "address": "0xABC",
            "publicKey": "0xPUB_ABC",
            "signature": "sig-0xABC-n1",
            "message": "APTOS\nmessage: Nonce: n1\nnonce: n1",
            "nonce": "n1",
        }
        self.reporter.info("Token received", context="Test")

    async def test_same_nonce_never_submitted_twice(self):
        """Test the second submission fails locally before any request."""
        await self.client.verify_login(make_request("n1"))

        with pytest.raises(ReplayDetectedError) as exc_info:
            await self.client.verify_login(make_request("n1"))

        assert isinstance(exc_info.value, VerificationRejectedError)
        assert len(self.backend.requests) == 1

    async def test_nonce_ledger_shared_by_login_and_link(self):
        await self.client.verify_login(make_request("n1"))

        with pytest.raises(ReplayDetectedError):
            await self.client.verify_link(make_request("n1"))

    async def test_nonce_ledger_keeps_newest(self):
        client = HttpVerificationClient(
            api_client=self.api, metrics_enabled=False, submitted_limit=2
        )
        for nonce in ("n1", "n2", "n3"):
            await client.verify_link(make_request(nonce))

        assert list(client._submitted) == ["n2", "n3"]
        with pytest.raises(ReplayDetectedError):
            await client.verify_link(make_request("n3"))
        assert len(self.backend.requests) == 3

    async def test_backend_rejection(self):
        self.backend.fail_status = 400
        self.backend.fail_message = "Invalid signature"

        with pytest.raises(VerificationRejectedError, match="Invalid signature"):
            await self.client.verify_login(make_request())

    async def test_response_without_token(self):
        client = self.with_transport(lambda r: httpx.Response(200, json={"data": {}}))

        with pytest.raises(VerificationRejectedError, match="did not include"):
            await client.verify_login(make_request())

    async def test_server_error(self):
        self.backend.fail_status = 500

        with pytest.raises(NetworkError):
            await self.client.verify_login(make_request())

    # ================================================================
    # Link
    # ================================================================

    async def test_link_success(self):
        await self.client.verify_link(make_request("n2"))

        assert self.backend.linked_addresses == ["0xABC"]

    async def test_link_no_content(self):
        self.backend.link_body = None

        await self.client.verify_link(make_request("n2"))

        assert self.backend.linked_addresses == ["0xABC"]

    async def test_link_declined_in_body(self):
        self.backend.link_body = {"success": False, "message": "Wallet already linked"}

        with pytest.raises(VerificationRejectedError, match="already linked"):
            await self.client.verify_link(make_request("n2"))

    async def test_link_declined_without_message(self):
        self.backend.link_body = {"success": False}

        with pytest.raises(VerificationRejectedError, match="Wallet linking failed"):
            await self.client.verify_link(make_request("n2"))


if __name__ == "__main__":
    TestHttpVerificationClient.run_as_main()
