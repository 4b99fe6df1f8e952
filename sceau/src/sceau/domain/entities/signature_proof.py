"""
SignatureProof entity - Wallet signature over a challenge.
"""

from dataclasses import dataclass

from sceau.domain.entities.challenge import Challenge


@dataclass(frozen=True)
class SignatureProof:
    """
    Signature returned by the wallet provider.

    full_message is the exact byte string the wallet signed (providers wrap
    the challenge in their own envelope). Consumed exactly once by the
    verification client and never persisted.
    """

    signature: str
    full_message: str
    nonce: str

    def __post_init__(self):
        if not self.signature:
            raise ValueError("Signature is required")
        if not self.full_message:
            raise ValueError("Signed message is required")

    def matches(self, challenge: Challenge) -> bool:
        """True when the proof was produced for this challenge."""
        return self.nonce == challenge.nonce and challenge.message in self.full_message
