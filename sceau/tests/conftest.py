"""
Test fixtures and configuration.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio

from sceau.application.services.auth_orchestrator import AuthOrchestrator
from sceau.application.services.challenge_builder import ChallengeBuilder
from sceau.application.services.session_store import (
    SessionStore,
    reset_session_store,
)
from sceau.config.settings import Settings, override_settings, reset_settings
from sceau.infrastructure.http.api_client import ApiClient
from sceau.infrastructure.http.verification_client import HttpVerificationClient
from sceau.infrastructure.storage.memory_storage import MemoryCredentialStorage
from sceau.infrastructure.wallet.wallet_connector import WalletConnector
from tests.helpers.fake_backend import FakeBackend
from tests.helpers.fake_provider import FakeWalletProvider

TEST_API_URL = "http://testserver/api"


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Each test starts without global settings or session store."""
    reset_settings()
    reset_session_store()
    yield
    reset_settings()
    reset_session_store()


@pytest.fixture
def settings() -> Settings:
    """Settings for an isolated test environment."""
    test_settings = Settings(
        ENV="test",
        API_BASE_URL=TEST_API_URL,
        SESSION_STORAGE="memory",
        CONNECT_TIMEOUT_SECONDS=2.0,
        HTTP_TIMEOUT_SECONDS=2.0,
        LOG_VERBOSE=0,
        METRICS_ENABLED=False,
        WALLET_NETWORK="testnet",
    )
    override_settings(test_settings)
    return test_settings


@pytest.fixture
def provider() -> FakeWalletProvider:
    return FakeWalletProvider()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(token="tok123")


@pytest.fixture
def storage() -> MemoryCredentialStorage:
    return MemoryCredentialStorage()


@pytest.fixture
def session_store(storage: MemoryCredentialStorage) -> SessionStore:
    return SessionStore(storage=storage, key="token", metrics_enabled=False)


@pytest.fixture
def connector(provider: FakeWalletProvider):
    wallet_connector = WalletConnector(provider=provider, connect_timeout=2.0)
    yield wallet_connector
    wallet_connector.close()


@pytest.fixture
def challenge_builder() -> ChallengeBuilder:
    return ChallengeBuilder(app_name="LifeVault")


@pytest_asyncio.fixture
async def api_client(
    backend: FakeBackend, session_store: SessionStore
) -> AsyncGenerator[ApiClient, None]:
    client = ApiClient(
        base_url=TEST_API_URL,
        session_store=session_store,
        transport=backend.transport(),
    )
    yield client
    await client.aclose()


@pytest.fixture
def verification_client(api_client: ApiClient) -> HttpVerificationClient:
    return HttpVerificationClient(api_client=api_client, metrics_enabled=False)


@pytest.fixture
def orchestrator(
    connector: WalletConnector,
    challenge_builder: ChallengeBuilder,
    verification_client: HttpVerificationClient,
    session_store: SessionStore,
):
    auth = AuthOrchestrator(
        connector=connector,
        challenge_builder=challenge_builder,
        verification_client=verification_client,
        session_store=session_store,
        metrics_enabled=False,
    )
    yield auth
    auth.close()
