"""
Wallet provider capability interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from sceau.domain.entities.signature_proof import SignatureProof

Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class WalletAccount:
    """Account as reported by the provider."""

    address: str
    public_key: str


class IWalletProvider(ABC):
    """
    Abstract capability exposed by wallet software (e.g. Petra).

    Implementations raise domain exceptions for user-visible outcomes:
    - UserRejectedError when the user declines a prompt
    - ProviderUnavailableError when the extension is missing

    Event handlers may be invoked at any time, including while a
    connect or sign call is pending.
    """

    name: str = "wallet"

    @abstractmethod
    def is_installed(self) -> bool:
        """Return True if the provider is available in this host."""

    @abstractmethod
    async def connect(
        self, provider_id: Optional[str] = None
    ) -> Optional[WalletAccount]:
        """
        Request connection (may show a provider prompt).

        Returns:
            Connected account, or None if the provider reports the
            account later through on_account_change
        """

    @abstractmethod
    async def disconnect(self) -> None:
        """Disconnect the current account."""

    @abstractmethod
    async def sign_message(self, message: str, nonce: str) -> SignatureProof:
        """
        Sign message with the connected account's key.

        Args:
            message: Challenge message
            nonce: Challenge nonce (embedded in the signed envelope)

        Returns:
            SignatureProof with the provider's full signed message
        """

    @abstractmethod
    async def account(self) -> Optional[WalletAccount]:
        """Return the connected account, if any."""

    @abstractmethod
    async def network(self) -> Optional[str]:
        """Return the current network name, if any."""

    @abstractmethod
    def on_account_change(
        self, handler: Callable[[Optional[WalletAccount]], None]
    ) -> Unsubscribe:
        """Register account change handler; returns unsubscribe callable."""

    @abstractmethod
    def on_network_change(
        self, handler: Callable[[Optional[str]], None]
    ) -> Unsubscribe:
        """Register network change handler; returns unsubscribe callable."""
