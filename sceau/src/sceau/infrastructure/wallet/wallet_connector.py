"""
Wallet connector.

Thin adapter over an IWalletProvider: caches the connected WalletSession,
serializes connect attempts and turns provider events into
(previous, current) session change notifications.
"""

import asyncio
import threading
from typing import Callable, List, Optional

from sceau.domain.entities.challenge import Challenge
from sceau.domain.entities.signature_proof import SignatureProof
from sceau.domain.entities.wallet_session import WalletSession
from sceau.domain.exceptions import (
    ConnectFailedError,
    ConnectTimeoutError,
    NotConnectedError,
    ProviderUnavailableError,
    SceauException,
    SignatureRejectedError,
)
from sceau.domain.services.i_wallet_provider import IWalletProvider, WalletAccount
from sceau.domain.value_objects.wallet_address import truncate_address
from sceau.infrastructure.wallet.event_channel import EventChannel, Subscription
from shared.reporter import SystemReporter
from shared.reporter.emojis import WalletEmoji

SessionChangeHandler = Callable[
    [Optional[WalletSession], Optional[WalletSession]], None
]


class WalletConnector:
    """
    Connection lifecycle for a single wallet provider.

    Guarantees:
    - At most one provider connect in flight (asyncio.Lock)
    - Session snapshots swapped under a threading.Lock
    - disconnect() is idempotent and never raises
    - Account/network events are delivered as (previous, current)
    """

    def __init__(
        self,
        provider: IWalletProvider,
        connect_timeout: float = 60.0,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize connector.

        Args:
            provider: Wallet provider capability
            connect_timeout: Max seconds to wait for connect acknowledgement
            reporter: Optional reporter for lifecycle logs
        """
        self.provider = provider
        self.connect_timeout = connect_timeout
        self.reporter = reporter

        self._session: Optional[WalletSession] = None
        self._session_lock = threading.Lock()
        self._connect_lock = asyncio.Lock()
        self._installed: Optional[bool] = None
        self._account_ack: Optional[asyncio.Event] = None
        self._account_generation = 0

        self._account_events: EventChannel[SessionChangeHandler] = EventChannel(
            "account_change", reporter
        )
        self._network_events: EventChannel[SessionChangeHandler] = EventChannel(
            "network_change", reporter
        )
        self._provider_unsubscribes: List[Callable[[], None]] = []

    # ================================================================
    # Capability & state
    # ================================================================

    def is_provider_installed(self) -> bool:
        """Detect provider once and cache the answer."""
        if self._installed is None:
            self._installed = bool(self.provider.is_installed())
            if not self._installed:
                self._log_warning(
                    f"{WalletEmoji.NOT_INSTALLED} {self.provider.name} "
                    f"provider is not installed"
                )
        return self._installed

    def current_session(self) -> Optional[WalletSession]:
        """Cached session; no provider round-trip."""
        with self._session_lock:
            return self._session

    @property
    def is_connected(self) -> bool:
        session = self.current_session()
        return session is not None and session.connected

    # ================================================================
    # Subscriptions
    # ================================================================

    def subscribe_account_change(self, handler: SessionChangeHandler) -> Subscription:
        """Register handler for account switches and disconnects."""
        self._listen_to_provider()
        return self._account_events.subscribe(handler)

    def subscribe_network_change(self, handler: SessionChangeHandler) -> Subscription:
        """Register handler for network switches."""
        self._listen_to_provider()
        return self._network_events.subscribe(handler)

    def _listen_to_provider(self) -> None:
        if self._provider_unsubscribes or not self.is_provider_installed():
            return
        self._provider_unsubscribes = [
            self.provider.on_account_change(self._handle_account_change),
            self.provider.on_network_change(self._handle_network_change),
        ]

    # ================================================================
    # Connect / disconnect
    # ================================================================

    async def connect(
        self, preferred_provider_id: Optional[str] = None
    ) -> WalletSession:
        """
        Connect wallet, prompting the user if needed.

        Args:
            preferred_provider_id: Provider hint (e.g. "Petra")

        Returns:
            Connected WalletSession

        Raises:
            ProviderUnavailableError: Provider not installed
            UserRejectedError: User declined the prompt
            ConnectTimeoutError: No acknowledgement within connect_timeout
            ConnectFailedError: Any other provider failure
        """
        if not self.is_provider_installed():
            raise ProviderUnavailableError(self.provider.name)

        self._listen_to_provider()

        async with self._connect_lock:
            session = self.current_session()
            if session is not None and session.connected:
                return session

            self._log_info(f"{WalletEmoji.WALLET} Requesting wallet connection")

            try:
                session = await asyncio.wait_for(
                    self._connect_once(preferred_provider_id),
                    timeout=self.connect_timeout,
                )
            except asyncio.TimeoutError:
                raise ConnectTimeoutError(self.connect_timeout)
            except SceauException:
                raise
            except Exception as e:
                raise ConnectFailedError(f"Failed to connect wallet: {e}") from e

            self._log_info(
                f"{WalletEmoji.CONNECTED} Connected "
                f"{truncate_address(session.address)} "
                f"on {session.network or 'unknown network'}"
            )
            return session

    async def _connect_once(self, preferred_provider_id: Optional[str]) -> WalletSession:
        """Connect and wait for the provider's explicit account acknowledgement."""
        ack = asyncio.Event()
        self._account_ack = ack
        generation = self._account_generation
        try:
            account = await self.provider.connect(preferred_provider_id)
            if account is None:
                account = await self.provider.account()
            while account is None:
                await ack.wait()
                ack.clear()
                account = await self.provider.account()
        finally:
            self._account_ack = None

        network = await self.provider.network()
        with self._session_lock:
            if self._account_generation == generation:
                self._session = self._session_from(account, network)
            elif self._session is not None and self._session.network is None:
                # Account events since connect began outrank the snapshot
                self._session = self._session.with_network(network)
            session = self._session

        if session is None:
            raise ConnectFailedError("Wallet disconnected while connecting")
        return session

    async def restore(self) -> Optional[WalletSession]:
        """
        Pick up an account the provider already has connected.

        Returns:
            Restored session, or None if the provider has no account

        Raises:
            ConnectFailedError: Provider query failed
        """
        if not self.is_provider_installed():
            return None

        self._listen_to_provider()

        try:
            account = await self.provider.account()
            if account is None:
                return None
            network = await self.provider.network()
        except SceauException:
            raise
        except Exception as e:
            raise ConnectFailedError(f"Failed to query wallet account: {e}") from e

        session = self._session_from(account, network)
        with self._session_lock:
            self._session = session

        self._log_info(
            f"{WalletEmoji.RESTORED} Wallet already connected: "
            f"{truncate_address(session.address)}"
        )
        return session

    async def disconnect(self) -> None:
        """Disconnect wallet; no-op when already disconnected."""
        with self._session_lock:
            previous, self._session = self._session, None

        if previous is None:
            self._log_debug("Disconnect requested while already disconnected")
            return

        try:
            await self.provider.disconnect()
        except Exception as e:
            self._log_warning(f"Provider disconnect failed: {e}")

        self._log_info(f"{WalletEmoji.DISCONNECTED} Wallet disconnected")
        self._account_events.emit(previous, None)

    # ================================================================
    # Signing
    # ================================================================

    async def sign(self, challenge: Challenge) -> SignatureProof:
        """
        Ask the wallet to sign a challenge.

        Raises:
            NotConnectedError: No connected session
            UserRejectedError: User declined the signature prompt
            SignatureRejectedError: Provider failed or signed something else
        """
        session = self.current_session()
        if session is None or not session.connected:
            raise NotConnectedError()

        self._log_info(
            f"{WalletEmoji.SIGNATURE} Requesting signature "
            f"({challenge.purpose.value})",
            verbose_level=2,
        )

        try:
            proof = await self.provider.sign_message(challenge.message, challenge.nonce)
        except SceauException:
            raise
        except Exception as e:
            raise SignatureRejectedError(f"Failed to sign message: {e}") from e

        if not proof.matches(challenge):
            raise SignatureRejectedError(
                "Wallet signed a different message than requested"
            )
        return proof

    # ================================================================
    # Provider events
    # ================================================================

    def _handle_account_change(self, account: Optional[WalletAccount]) -> None:
        with self._session_lock:
            previous = self._session
            if account is None:
                current = None
            elif (
                previous is not None
                and previous.address == account.address
                and previous.public_key == account.public_key
            ):
                current = previous
            else:
                network = previous.network if previous else None
                current = self._session_from(account, network)
            self._session = current
            self._account_generation += 1

        if account is not None and self._account_ack is not None:
            self._account_ack.set()

        if current is previous:
            return

        if current is None:
            self._log_info(f"{WalletEmoji.DISCONNECTED} Provider reported no account")
        else:
            self._log_info(
                f"{WalletEmoji.ACCOUNT_CHANGED} Account changed to "
                f"{truncate_address(current.address)}"
            )
        self._account_events.emit(previous, current)

    def _handle_network_change(self, network: Optional[str]) -> None:
        with self._session_lock:
            previous = self._session
            if previous is None or previous.network == network:
                return
            current = previous.with_network(network)
            self._session = current

        self._log_info(
            f"{WalletEmoji.NETWORK_CHANGED} Network changed: "
            f"{previous.network} -> {network}"
        )
        self._network_events.emit(previous, current)

    @staticmethod
    def _session_from(account: WalletAccount, network: Optional[str]) -> WalletSession:
        return WalletSession(
            address=account.address,
            public_key=account.public_key,
            connected=True,
            network=network,
        )

    # ================================================================
    # Lifecycle
    # ================================================================

    def close(self) -> None:
        """Drop provider subscriptions and local handlers."""
        for unsubscribe in self._provider_unsubscribes:
            unsubscribe()
        self._provider_unsubscribes = []
        self._account_events.clear()
        self._network_events.clear()

    def _log_info(self, msg: str, verbose_level: int = 1) -> None:
        if self.reporter:
            self.reporter.info(msg, context="WalletConnector", verbose_level=verbose_level)

    def _log_warning(self, msg: str) -> None:
        if self.reporter:
            self.reporter.warning(msg, context="WalletConnector")

    def _log_debug(self, msg: str) -> None:
        if self.reporter:
            self.reporter.debug(msg, context="WalletConnector")
