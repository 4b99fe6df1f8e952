"""
Challenge entity - One-time message a wallet must sign.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ChallengePurpose(str, Enum):
    """What a signed challenge authorizes."""

    LOGIN = "login"
    LINK = "link"


@dataclass(frozen=True)
class Challenge:
    """
    Challenge issued for exactly one authentication attempt.

    Business rules:
    - Nonce is unique per attempt
    - Immutable once created
    - Single-use: redeemed once, then discarded
    """

    message: str
    nonce: str
    address: str
    purpose: ChallengePurpose = ChallengePurpose.LOGIN
    issued_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def __post_init__(self):
        if not self.message:
            raise ValueError("Challenge message is required")
        if not self.nonce:
            raise ValueError("Challenge nonce is required")
        if self.nonce not in self.message:
            raise ValueError("Challenge message must embed its nonce")
