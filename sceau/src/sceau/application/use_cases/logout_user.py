"""
Logout User use case.
"""

from sceau.application.services.session_store import SessionStore
from sceau.infrastructure.wallet.wallet_connector import WalletConnector


class LogoutUser:
    """
    End the user's session.

    Business rules:
    - Session token is always cleared
    - Wallet is disconnected only when asked to
    """

    def __init__(self, session_store: SessionStore, connector: WalletConnector):
        """
        Initialize use case with dependencies.

        Args:
            session_store: Session credential holder
            connector: Wallet connector
        """
        self.session_store = session_store
        self.connector = connector

    async def execute(self, disconnect_wallet: bool = False) -> None:
        """
        Execute logout.

        Args:
            disconnect_wallet: Also disconnect the wallet provider
        """
        await self.session_store.clear(cause="logout")

        if disconnect_wallet:
            await self.connector.disconnect()
