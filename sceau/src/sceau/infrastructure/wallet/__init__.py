"""
Wallet infrastructure.
"""

from sceau.infrastructure.wallet.event_channel import EventChannel, Subscription
from sceau.infrastructure.wallet.keypair_provider import (
    KeypairWalletProvider,
    derive_address,
    load_keypair,
    signed_envelope,
)
from sceau.infrastructure.wallet.wallet_connector import WalletConnector

__all__ = [
    "EventChannel",
    "KeypairWalletProvider",
    "Subscription",
    "WalletConnector",
    "derive_address",
    "load_keypair",
    "signed_envelope",
]
