"""
Restore Session use case.
"""

from dataclasses import dataclass
from typing import Optional

from sceau.application.services.session_store import SessionStore
from sceau.domain.entities.session_credential import SessionCredential
from sceau.domain.entities.wallet_session import WalletSession
from sceau.domain.exceptions import SceauException
from sceau.infrastructure.wallet.wallet_connector import WalletConnector
from shared.reporter import SystemReporter


@dataclass(frozen=True)
class RestoredState:
    """What was found at process start."""

    credential: Optional[SessionCredential]
    wallet: Optional[WalletSession]

    @property
    def is_authenticated(self) -> bool:
        return self.credential is not None


class RestoreSession:
    """
    Rehydrate client state at startup.

    Business rules:
    - Stored token is reloaded into the SessionStore
    - A wallet the provider already has connected is picked up
      without prompting
    - A provider failure never prevents token restore
    """

    def __init__(
        self,
        session_store: SessionStore,
        connector: WalletConnector,
        reporter: Optional[SystemReporter] = None,
    ):
        self.session_store = session_store
        self.connector = connector
        self.reporter = reporter

    async def execute(self) -> RestoredState:
        """
        Restore credential and wallet session.

        Returns:
            RestoredState with whatever could be restored
        """
        credential = await self.session_store.restore()

        wallet: Optional[WalletSession] = None
        try:
            wallet = await self.connector.restore()
        except SceauException as e:
            if self.reporter:
                self.reporter.warning(
                    f"Wallet check failed: {e.message}", context="RestoreSession"
                )

        return RestoredState(credential=credential, wallet=wallet)
