"""
Dependency Injection Container for Sceau.

Manages all service instances and their dependencies.
"""

import logging
from typing import Callable, Optional

import httpx

from sceau.application.services.auth_orchestrator import AuthOrchestrator
from sceau.application.services.challenge_builder import ChallengeBuilder
from sceau.application.services.session_store import SessionStore
from sceau.application.use_cases.handle_unauthorized import HandleUnauthorized
from sceau.application.use_cases.logout_user import LogoutUser
from sceau.application.use_cases.restore_session import RestoreSession
from sceau.config.settings import Settings, get_settings
from sceau.domain.services.i_credential_storage import ICredentialStorage
from sceau.domain.services.i_verification_client import IVerificationClient
from sceau.domain.services.i_wallet_provider import IWalletProvider
from sceau.infrastructure.http.api_client import ApiClient
from sceau.infrastructure.http.verification_client import HttpVerificationClient
from sceau.infrastructure.storage import (
    FileCredentialStorage,
    MemoryCredentialStorage,
    RedisCredentialStorage,
)
from sceau.infrastructure.wallet.keypair_provider import KeypairWalletProvider
from sceau.infrastructure.wallet.wallet_connector import WalletConnector
from shared.reporter import SystemReporter
from shared.reporter.emojis import SystemEmoji


class DIContainer:
    """
    Dependency Injection Container.

    Lazily builds one instance of each service from Settings. A wallet
    provider or HTTP transport may be injected (CLI keypair, tests).
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider: Optional[IWalletProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        redirect_to_login: Optional[Callable[[], None]] = None,
    ):
        """
        Initialize container with None instances.

        Args:
            settings: Settings (global settings if None)
            provider: Wallet provider (local keypair if None)
            transport: Optional httpx transport for the API client
            redirect_to_login: Callback invoked after a 401
        """
        self.settings = settings or get_settings()
        self._transport = transport
        self._redirect_to_login = redirect_to_login
        self.login_required = False

        # Infrastructure
        self._reporter: Optional[SystemReporter] = None
        self._provider: Optional[IWalletProvider] = provider
        self._credential_storage: Optional[ICredentialStorage] = None
        self._api_client: Optional[ApiClient] = None
        self._verification_client: Optional[IVerificationClient] = None
        self._connector: Optional[WalletConnector] = None

        # Application services
        self._session_store: Optional[SessionStore] = None
        self._challenge_builder: Optional[ChallengeBuilder] = None
        self._orchestrator: Optional[AuthOrchestrator] = None

    async def initialize(self) -> None:
        """Restore persisted session and connected wallet."""
        self.reporter.info(
            f"{SystemEmoji.STARTUP} {self.settings.APP_NAME} wallet auth "
            f"({self.settings.ENV})",
            context="DIContainer",
            verbose_level=2,
        )
        await self.restore_session.execute()

    async def shutdown(self) -> None:
        """Cleanup resources and close connections."""
        if self._orchestrator:
            self._orchestrator.close()

        if self._connector:
            self._connector.close()

        if self._api_client:
            await self._api_client.aclose()

        if isinstance(self._credential_storage, RedisCredentialStorage):
            await self._credential_storage.disconnect()

        self.reporter.info(
            f"{SystemEmoji.SHUTDOWN} Shutdown complete",
            context="DIContainer",
            verbose_level=2,
        )

    # ================================================================
    # Infrastructure Getters
    # ================================================================

    @property
    def reporter(self) -> SystemReporter:
        """Get reporter instance."""
        if self._reporter is None:
            self._reporter = SystemReporter(
                name="sceau",
                log_dir=self.settings.LOG_DIR,
                level=getattr(logging, self.settings.LOG_LEVEL),
                verbose=self.settings.LOG_VERBOSE,
            )
        return self._reporter

    @property
    def provider(self) -> IWalletProvider:
        """Get wallet provider instance."""
        if self._provider is None:
            self._provider = KeypairWalletProvider(
                network=self.settings.WALLET_NETWORK
            )
        return self._provider

    @property
    def credential_storage(self) -> ICredentialStorage:
        """Get credential storage for the configured backend."""
        if self._credential_storage is None:
            backend = self.settings.SESSION_STORAGE
            if backend == "redis":
                self._credential_storage = RedisCredentialStorage(
                    host=self.settings.REDIS_HOST,
                    port=self.settings.REDIS_PORT,
                    db=self.settings.REDIS_DB,
                    password=self.settings.REDIS_PASSWORD,
                )
            elif backend == "file":
                self._credential_storage = FileCredentialStorage(
                    self.settings.SESSION_FILE
                )
            else:
                self._credential_storage = MemoryCredentialStorage()
        return self._credential_storage

    @property
    def api_client(self) -> ApiClient:
        """Get authorized API client instance."""
        if self._api_client is None:
            self._api_client = ApiClient(
                base_url=self.settings.API_BASE_URL,
                session_store=self.session_store,
                timeout=self.settings.HTTP_TIMEOUT_SECONDS,
                on_unauthorized=self.handle_unauthorized.execute,
                transport=self._transport,
                reporter=self.reporter,
            )
        return self._api_client

    @property
    def verification_client(self) -> IVerificationClient:
        """Get verification client instance."""
        if self._verification_client is None:
            self._verification_client = HttpVerificationClient(
                api_client=self.api_client,
                login_endpoint=self.settings.LOGIN_ENDPOINT,
                link_endpoint=self.settings.LINK_ENDPOINT,
                reporter=self.reporter,
                metrics_enabled=self.settings.METRICS_ENABLED,
            )
        return self._verification_client

    @property
    def connector(self) -> WalletConnector:
        """Get wallet connector instance."""
        if self._connector is None:
            self._connector = WalletConnector(
                provider=self.provider,
                connect_timeout=self.settings.CONNECT_TIMEOUT_SECONDS,
                reporter=self.reporter,
            )
        return self._connector

    # ================================================================
    # Application Getters
    # ================================================================

    @property
    def session_store(self) -> SessionStore:
        """Get session store instance."""
        if self._session_store is None:
            self._session_store = SessionStore(
                storage=self.credential_storage,
                key=self.settings.SESSION_KEY,
                reporter=self.reporter,
                metrics_enabled=self.settings.METRICS_ENABLED,
            )
        return self._session_store

    @property
    def challenge_builder(self) -> ChallengeBuilder:
        """Get challenge builder instance."""
        if self._challenge_builder is None:
            self._challenge_builder = ChallengeBuilder(
                app_name=self.settings.APP_NAME,
                reporter=self.reporter,
            )
        return self._challenge_builder

    @property
    def orchestrator(self) -> AuthOrchestrator:
        """Get auth orchestrator instance."""
        if self._orchestrator is None:
            self._orchestrator = AuthOrchestrator(
                connector=self.connector,
                challenge_builder=self.challenge_builder,
                verification_client=self.verification_client,
                session_store=self.session_store,
                policy=self.settings.CONCURRENT_ATTEMPT_POLICY,
                reporter=self.reporter,
                metrics_enabled=self.settings.METRICS_ENABLED,
            )
        return self._orchestrator

    # ================================================================
    # Use Cases
    # ================================================================

    @property
    def restore_session(self) -> RestoreSession:
        return RestoreSession(self.session_store, self.connector, self.reporter)

    @property
    def logout_user(self) -> LogoutUser:
        return LogoutUser(self.session_store, self.connector)

    @property
    def handle_unauthorized(self) -> HandleUnauthorized:
        return HandleUnauthorized(self.session_store, self._on_login_required)

    def _on_login_required(self) -> None:
        self.login_required = True
        self.reporter.warning(
            "Session expired. Please sign in again", context="DIContainer"
        )
        if self._redirect_to_login is not None:
            self._redirect_to_login()


_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """Get or create global container instance."""
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


def reset_container() -> None:
    """Drop global container (for testing)."""
    global _container
    _container = None
