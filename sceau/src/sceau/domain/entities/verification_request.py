"""
VerificationRequest entity - Payload exchanged with the backend.
"""

from dataclasses import dataclass
from typing import Dict

from sceau.domain.entities.signature_proof import SignatureProof
from sceau.domain.entities.wallet_session import WalletSession


@dataclass(frozen=True)
class VerificationRequest:
    """
    Signed proof bound to the wallet that produced it.

    Serialized as {address, publicKey, signature, message, nonce}.
    """

    address: str
    public_key: str
    signature: str
    message: str
    nonce: str

    @classmethod
    def from_proof(
        cls, session: WalletSession, proof: SignatureProof
    ) -> "VerificationRequest":
        """Build request from connected session and its signature."""
        return cls(
            address=session.address,
            public_key=session.public_key,
            signature=proof.signature,
            message=proof.full_message,
            nonce=proof.nonce,
        )

    def to_payload(self) -> Dict[str, str]:
        """Convert to the JSON body expected by the backend."""
        return {
            "address": self.address,
            "publicKey": self.public_key,
            "signature": self.signature,
            "message": self.message,
            "nonce": self.nonce,
        }
