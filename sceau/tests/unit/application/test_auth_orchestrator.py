"""
Unit tests for AuthOrchestrator.

Tests the connect -> sign -> verify state machine against a fake wallet
provider and a fake backend served through httpx.MockTransport.

Usage:
    python -m tests.unit.application.test_auth_orchestrator
    pytest sceau/tests/unit
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from sceau.application.services.auth_orchestrator import AuthOrchestrator
from sceau.application.services.challenge_builder import ChallengeBuilder
from sceau.application.services.session_store import SessionStore
from sceau.domain.entities.auth_attempt import AttemptKind
from sceau.domain.entities.session_credential import SessionCredential
from sceau.domain.services.i_wallet_provider import WalletAccount
from sceau.domain.value_objects.auth_state import AuthState, AuthStep, FailureReason
from sceau.infrastructure.wallet.wallet_connector import WalletConnector
from shared.tests import LaborantTest
from tests.helpers.fake_backend import FakeBackend
from tests.helpers.fake_provider import FakeWalletProvider

OTHER_ACCOUNT = WalletAccount(address="0xDEF", public_key="0xPUB_DEF")


class TestAuthOrchestrator(LaborantTest):
    """Unit tests for AuthOrchestrator."""

    component_name = "sceau"
    test_category = "unit"

    @pytest.fixture(autouse=True)
    def _wire(
        self,
        orchestrator: AuthOrchestrator,
        provider: FakeWalletProvider,
        backend: FakeBackend,
        connector: WalletConnector,
        session_store: SessionStore,
        challenge_builder: ChallengeBuilder,
        verification_client,
    ):
        self.orchestrator = orchestrator
        self.provider = provider
        self.backend = backend
        self.connector = connector
        self.session_store = session_store
        self.challenge_builder = challenge_builder
        self.verification_client = verification_client

    def build(self, **overrides) -> AuthOrchestrator:
        """Build a second orchestrator sharing the fixtures."""
        params = dict(
            connector=self.connector,
            challenge_builder=self.challenge_builder,
            verification_client=self.verification_client,
            session_store=self.session_store,
            metrics_enabled=False,
        )
        params.update(overrides)
        return AuthOrchestrator(**params)

    # ================================================================
    # Success paths
    # ================================================================

    async def test_authenticate_stores_token(self):
        """Test full login returns the token and stores it."""
        self.reporter.info("Testing successful login", context="Test")

        result = await self.orchestrator.authenticate()

        assert result.to_dict() == {"success": True, "token": "tok123"}
        assert self.session_store.get() == SessionCredential("tok123")
        assert self.orchestrator.state(AttemptKind.LOGIN).step == AuthStep.AUTHENTICATED
        assert self.provider.connect_calls == 1

        body = self.backend.calls_to("/auth/wallet")[0].body
        assert body["address"] == "0xABC"
        assert body["publicKey"] == "0xPUB_ABC"
        assert body["message"].startswith("APTOS\nmessage: Sign this message")
        self.reporter.info("Token stored", context="Test")

    async def test_state_transitions_published(self):
        """Test subscribers see every step in order."""
        seen = []
        self.orchestrator.subscribe_state(lambda kind, state: seen.append((kind, state)))

        await self.orchestrator.authenticate()

        assert seen == [
            (AttemptKind.LOGIN, AuthState(AuthStep.CONNECTING)),
            (AttemptKind.LOGIN, AuthState(AuthStep.AWAITING_SIGNATURE)),
            (AttemptKind.LOGIN, AuthState(AuthStep.VERIFYING)),
            (AttemptKind.LOGIN, AuthState(AuthStep.AUTHENTICATED)),
        ]

    async def test_connected_wallet_skips_connect(self):
        """Test an active session goes straight to AWAITING_SIGNATURE."""
        await self.connector.connect()
        steps = []
        self.orchestrator.subscribe_state(lambda kind, state: steps.append(state.step))

        result = await self.orchestrator.authenticate()

        assert result.success
        assert steps[0] == AuthStep.AWAITING_SIGNATURE
        assert self.provider.connect_calls == 1

    async def test_link_does_not_touch_session(self):
        """Test link succeeds without a token and leaves SessionStore alone."""
        result = await self.orchestrator.link_wallet()

        assert result.to_dict() == {"success": True}
        assert self.session_store.get() is None
        assert self.backend.linked_addresses == ["0xABC"]
        assert "Purpose: link" in self.provider.signed_messages[0]
        assert self.orchestrator.state(AttemptKind.LINK).step == AuthStep.AUTHENTICATED
        assert self.orchestrator.state(AttemptKind.LOGIN).step == AuthStep.IDLE

    async def test_retry_uses_fresh_nonce(self):
        """Test a failed attempt is retried from IDLE with a new nonce."""
        self.backend.fail_status = 400

        first = await self.orchestrator.authenticate()
        self.backend.fail_status = None
        second = await self.orchestrator.authenticate()

        assert not first.success
        assert second.success
        nonces = [r.body["nonce"] for r in self.backend.calls_to("/auth/wallet")]
        assert len(nonces) == 2
        assert nonces[0] != nonces[1]

    # ================================================================
    # Failure classification
    # ================================================================

    async def test_provider_missing_fails_without_connect(self):
        """Test missing provider is reported before any connect."""
        provider = FakeWalletProvider(installed=False)
        connector = WalletConnector(provider=provider)
        orchestrator = self.build(connector=connector)

        result = await orchestrator.authenticate()

        assert result.success is False
        assert result.error.startswith("No wallet connected")
        assert result.reason == FailureReason.PROVIDER_UNAVAILABLE
        assert provider.connect_calls == 0
        assert provider.listener_count == 0
        assert orchestrator.state() == AuthState.failed(
            FailureReason.PROVIDER_UNAVAILABLE
        )
        orchestrator.close()

    async def test_connect_rejected(self):
        self.provider.reject_connect = True

        result = await self.orchestrator.authenticate()

        assert result.reason == FailureReason.CONNECT_FAILED
        assert result.error == "User rejected the connection"

    async def test_connect_timeout(self):
        """Test a provider that never acknowledges times out."""
        self.provider.ack_late = True
        connector = WalletConnector(provider=self.provider, connect_timeout=0.05)
        orchestrator = self.build(connector=connector)

        result = await orchestrator.authenticate()

        assert result.reason == FailureReason.CONNECT_TIMEOUT
        orchestrator.close()
        connector.close()

    async def test_sign_rejected_keeps_session(self):
        """Test user declining the signature leaves the wallet connected."""
        self.provider.reject_sign = True

        result = await self.orchestrator.authenticate()

        assert result.reason == FailureReason.SIGNATURE_REJECTED
        assert result.error == "User rejected the signature"
        assert self.connector.current_session().connected
        assert self.backend.calls_to("/auth/wallet") == []
        assert self.challenge_builder.outstanding_count == 0

    async def test_signature_for_other_nonce_rejected(self):
        self.provider.signature_nonce_override = "someone-elses-nonce"

        result = await self.orchestrator.authenticate()

        assert result.reason == FailureReason.SIGNATURE_REJECTED
        assert self.backend.calls_to("/auth/wallet") == []

    async def test_verification_rejected_unwraps_message(self):
        self.backend.fail_status = 400
        self.backend.fail_message = "Invalid signature"

        result = await self.orchestrator.authenticate()

        assert result.to_dict() == {"success": False, "error": "Invalid signature"}
        assert result.reason == FailureReason.VERIFICATION_REJECTED
        assert self.session_store.get() is None

    async def test_verification_rejected_without_message(self):
        self.backend.fail_status = 422
        self.backend.fail_message = None

        result = await self.orchestrator.authenticate()

        assert result.error == "Request failed with status code 422"

    async def test_server_error_is_network_error(self):
        self.backend.fail_status = 503

        result = await self.orchestrator.authenticate()

        assert result.reason == FailureReason.NETWORK_ERROR

    async def test_transport_error_is_network_error(self):
        self.backend.raise_connect_error = True

        result = await self.orchestrator.authenticate()

        assert result.reason == FailureReason.NETWORK_ERROR

    async def test_unexpected_error_gets_generic_message(self):
        """Test non-domain errors are classified by phase."""
        verifier = AsyncMock()
        verifier.verify_login.side_effect = RuntimeError("boom")
        verifier.verify_link.side_effect = RuntimeError("boom")
        orchestrator = self.build(verification_client=verifier)

        login = await orchestrator.authenticate()
        link = await orchestrator.link_wallet()

        assert login.to_dict() == {
            "success": False,
            "error": "Wallet authentication failed",
        }
        assert login.reason == FailureReason.VERIFICATION_REJECTED
        assert link.error == "Wallet linking failed"
        orchestrator.close()

    # ================================================================
    # Session changes
    # ================================================================

    async def test_account_change_after_sign_aborts_before_verify(self):
        """Test stale address never reaches the backend."""
        self.reporter.info("Testing account change between sign and verify", context="Test")
        self.provider.before_sign_returns = lambda: self.provider.switch_account(
            OTHER_ACCOUNT
        )

        result = await self.orchestrator.authenticate()

        assert result.reason == FailureReason.SESSION_CHANGED
        assert self.backend.calls_to("/auth/wallet") == []
        assert self.orchestrator.state(AttemptKind.LOGIN) == AuthState.idle()
        assert self.connector.current_session().address == "0xDEF"
        self.reporter.info("Attempt aborted before verify", context="Test")

    async def test_network_change_during_sign_aborts(self):
        """Test pending signature is abandoned on network switch."""
        self.provider.sign_delay = 5.0
        task = asyncio.create_task(self.orchestrator.authenticate())
        await asyncio.sleep(0.05)

        self.provider.switch_network("testnet")
        result = await asyncio.wait_for(task, timeout=1.0)

        assert result.reason == FailureReason.SESSION_CHANGED
        assert "network changed" in result.error
        assert self.backend.requests == []

    async def test_disconnect_during_attempt_aborts(self):
        self.provider.sign_delay = 5.0
        task = asyncio.create_task(self.orchestrator.link_wallet())
        await asyncio.sleep(0.05)

        await self.connector.disconnect()
        result = await asyncio.wait_for(task, timeout=1.0)

        assert result.reason == FailureReason.SESSION_CHANGED
        assert self.orchestrator.state(AttemptKind.LINK).step == AuthStep.IDLE

    async def test_account_switch_during_connect_binds_new_account(self):
        """Test the backend sees the account that actually signed."""

        def switch_once():
            self.provider.before_network_returns = None
            self.provider.switch_account(OTHER_ACCOUNT)

        self.provider.before_network_returns = switch_once

        result = await self.orchestrator.authenticate()

        assert result.token == "tok123"
        body = self.backend.calls_to("/auth/wallet")[0].body
        assert body["address"] == "0xDEF"
        assert body["publicKey"] == "0xPUB_DEF"
        assert body["signature"].startswith("sig-0xDEF-")

    async def test_account_change_does_not_clear_credential(self):
        await self.orchestrator.authenticate()

        self.provider.switch_account(OTHER_ACCOUNT)

        assert self.session_store.get() == SessionCredential("tok123")

    # ================================================================
    # Concurrency
    # ================================================================

    async def test_second_call_joins_in_flight_attempt(self):
        """Test join policy shares one attempt between callers."""
        self.provider.sign_delay = 0.05

        first, second = await asyncio.gather(
            self.orchestrator.authenticate(), self.orchestrator.authenticate()
        )

        assert first == second
        assert first.token == "tok123"
        assert self.provider.connect_calls == 1
        assert self.provider.sign_calls == 1
        assert len(self.backend.calls_to("/auth/wallet")) == 1

    async def test_second_call_rejected_with_reject_policy(self):
        self.provider.sign_delay = 0.05
        orchestrator = self.build(policy="reject")

        first, second = await asyncio.gather(
            orchestrator.authenticate(), orchestrator.authenticate()
        )

        assert first.success
        assert second.reason == FailureReason.ATTEMPT_IN_PROGRESS
        assert self.provider.sign_calls == 1
        orchestrator.close()

    async def test_login_and_link_run_together(self):
        """Test different kinds do not block each other; connect is shared."""
        login, link = await asyncio.gather(
            self.orchestrator.authenticate(), self.orchestrator.link_wallet()
        )

        assert login.success and link.success
        assert self.provider.connect_calls == 1
        assert self.provider.sign_calls == 2

    async def test_cancelled_caller_does_not_cancel_attempt(self):
        """Test the attempt survives its first caller being cancelled."""
        self.provider.sign_delay = 0.1
        task = asyncio.create_task(self.orchestrator.authenticate())
        await asyncio.sleep(0.02)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        result = await self.orchestrator.authenticate()
        assert result.token == "tok123"
        assert self.provider.sign_calls == 1

    async def test_close_resolves_in_flight_attempt(self):
        """Test close() mid-signature returns a failure result and frees the nonce."""
        self.provider.sign_delay = 5.0
        task = asyncio.create_task(self.orchestrator.authenticate())
        await asyncio.sleep(0.05)
        assert self.challenge_builder.outstanding_count == 1

        self.orchestrator.close()
        result = await asyncio.wait_for(task, timeout=1.0)

        assert result.success is False
        assert result.error == "Wallet authentication was cancelled"
        assert result.reason == FailureReason.CANCELLED
        assert self.orchestrator.state(AttemptKind.LOGIN) == AuthState.idle()
        assert self.challenge_builder.outstanding_count == 0
        assert self.backend.requests == []

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValueError):
            self.build(policy="queue")


if __name__ == "__main__":
    TestAuthOrchestrator.run_as_main()
