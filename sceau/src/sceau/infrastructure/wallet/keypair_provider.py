"""
Local keypair wallet provider.

Implements IWalletProvider with an ed25519 key so wallet flows can run
headless (CLI, tests). Reproduces the Petra signMessage envelope and the
Aptos address derivation.
"""

import hashlib
import json
from pathlib import Path
from typing import Callable, Dict, List, Optional

from nacl.signing import SigningKey

from sceau.domain.entities.signature_proof import SignatureProof
from sceau.domain.exceptions import (
    NotConnectedError,
    ProviderUnavailableError,
    UserRejectedError,
)
from sceau.domain.services.i_wallet_provider import (
    IWalletProvider,
    Unsubscribe,
    WalletAccount,
)

# Aptos single-key ed25519 authentication scheme
ED25519_SCHEME = b"\x00"

ApprovalCallback = Callable[[str, str], bool]


def derive_address(verify_key_bytes: bytes) -> str:
    """
    Derive Aptos account address from an ed25519 public key.

    Args:
        verify_key_bytes: 32-byte public key

    Returns:
        0x-prefixed 64 hex digit address
    """
    digest = hashlib.sha3_256(verify_key_bytes + ED25519_SCHEME).hexdigest()
    return f"0x{digest}"


def signed_envelope(message: str, nonce: str) -> str:
    """Build the full message a Petra-style wallet signs."""
    return f"APTOS\nmessage: {message}\nnonce: {nonce}"


def load_keypair(path: str) -> SigningKey:
    """
    Load ed25519 signing key from file.

    Accepts either a hex seed (optionally 0x-prefixed) or a JSON array of
    bytes whose first 32 entries are the seed.

    Args:
        path: Path to key file

    Returns:
        SigningKey instance for signing operations

    Raises:
        ValueError: If the file holds no usable key
    """
    raw = Path(path).expanduser().read_text().strip()

    if raw.startswith("["):
        key_bytes = bytes(json.loads(raw)[:32])
    else:
        hex_seed = raw[2:] if raw.startswith("0x") else raw
        key_bytes = bytes.fromhex(hex_seed)[:32]

    if len(key_bytes) != 32:
        raise ValueError(f"Keypair file must hold a 32-byte seed: {path}")

    return SigningKey(key_bytes)


class KeypairWalletProvider(IWalletProvider):
    """
    Wallet provider backed by in-process ed25519 keys.

    An optional approval callback stands in for the wallet prompt:
    it receives (action, detail) and returns False to decline.
    """

    name = "keypair"

    def __init__(
        self,
        signing_key: Optional[SigningKey] = None,
        network: Optional[str] = "mainnet",
        approve: Optional[ApprovalCallback] = None,
        installed: bool = True,
    ):
        """
        Initialize provider.

        Args:
            signing_key: Key to sign with (generated if None)
            network: Network name reported to the connector
            approve: Optional prompt callback (action, detail) -> bool
            installed: Report provider as installed
        """
        self._signing_key = signing_key or SigningKey.generate()
        self._network = network
        self._approve = approve
        self._installed = installed
        self._connected = False

        self._account_handlers: List[Callable[[Optional[WalletAccount]], None]] = []
        self._network_handlers: List[Callable[[Optional[str]], None]] = []

    # ================================================================
    # Identity
    # ================================================================

    @property
    def public_key(self) -> str:
        return "0x" + bytes(self._signing_key.verify_key).hex()

    @property
    def address(self) -> str:
        return derive_address(bytes(self._signing_key.verify_key))

    def _wallet_account(self) -> WalletAccount:
        return WalletAccount(address=self.address, public_key=self.public_key)

    def _ask(self, action: str, detail: str) -> None:
        if self._approve is not None and not self._approve(action, detail):
            raise UserRejectedError(action)

    # ================================================================
    # IWalletProvider
    # ================================================================

    def is_installed(self) -> bool:
        return self._installed

    async def connect(
        self, provider_id: Optional[str] = None
    ) -> Optional[WalletAccount]:
        if not self._installed:
            raise ProviderUnavailableError(self.name)

        if not self._connected:
            self._ask("connection", self.address)
            self._connected = True
        return self._wallet_account()

    async def disconnect(self) -> None:
        self._connected = False

    async def sign_message(self, message: str, nonce: str) -> SignatureProof:
        if not self._connected:
            raise NotConnectedError()

        self._ask("signature", message)

        full_message = signed_envelope(message, nonce)
        signed = self._signing_key.sign(full_message.encode("utf-8"))
        return SignatureProof(
            signature="0x" + signed.signature.hex(),
            full_message=full_message,
            nonce=nonce,
        )

    async def account(self) -> Optional[WalletAccount]:
        if not self._connected:
            return None
        return self._wallet_account()

    async def network(self) -> Optional[str]:
        return self._network

    def on_account_change(
        self, handler: Callable[[Optional[WalletAccount]], None]
    ) -> Unsubscribe:
        self._account_handlers.append(handler)
        return lambda: self._remove(self._account_handlers, handler)

    def on_network_change(
        self, handler: Callable[[Optional[str]], None]
    ) -> Unsubscribe:
        self._network_handlers.append(handler)
        return lambda: self._remove(self._network_handlers, handler)

    @staticmethod
    def _remove(handlers: List, handler) -> None:
        if handler in handlers:
            handlers.remove(handler)

    # ================================================================
    # Switching (what the extension UI would do)
    # ================================================================

    def switch_account(self, signing_key: Optional[SigningKey] = None) -> WalletAccount:
        """
        Replace the active key and notify account listeners.

        Args:
            signing_key: New key (generated if None)

        Returns:
            The new account
        """
        self._signing_key = signing_key or SigningKey.generate()
        account = self._wallet_account()
        if self._connected:
            for handler in list(self._account_handlers):
                handler(account)
        return account

    def switch_network(self, network: str) -> None:
        """Change network and notify network listeners."""
        self._network = network
        for handler in list(self._network_handlers):
            handler(network)

    def keypair_info(self) -> Dict[str, str]:
        """Return public identity of the active key."""
        return {"address": self.address, "public_key": self.public_key}
