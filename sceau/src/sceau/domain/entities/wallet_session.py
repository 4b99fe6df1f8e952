"""
WalletSession entity - Client record of a connected wallet.
"""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class WalletSession:
    """
    Snapshot of the connected wallet account.

    Created on successful connect, replaced on account/network change
    events and dropped on disconnect. Frozen so callers only ever hold a
    read-only view; the connector swaps whole snapshots.
    """

    address: str
    public_key: str
    connected: bool = True
    network: Optional[str] = None

    def __post_init__(self):
        """Validate session data after initialization."""
        if not self.address:
            raise ValueError("Wallet address is required")
        if not self.public_key:
            raise ValueError("Public key is required")

    def with_network(self, network: Optional[str]) -> "WalletSession":
        """Return a copy bound to another network."""
        return replace(self, network=network)

    def same_account(self, other: Optional["WalletSession"]) -> bool:
        """True when other refers to the same address on the same network."""
        if other is None:
            return False
        return (
            self.address.lower() == other.address.lower()
            and self.network == other.network
        )

    def to_dict(self) -> dict:
        """Convert entity to dictionary representation."""
        return {
            "address": self.address,
            "public_key": self.public_key,
            "connected": self.connected,
            "network": self.network,
        }
