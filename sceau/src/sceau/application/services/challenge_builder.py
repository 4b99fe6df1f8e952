"""
Challenge builder.

Builds versioned, human-readable challenge messages and tracks their
nonces from issue to redemption.

Message format (version 1):

    Sign this message to authenticate with LifeVault.

    Purpose: login
    Wallet: 0x1234...
    Nonce: 18f3a2b4c5d-1-9f0e...
    Issued At: 2026-01-01T00:00:00.000Z
    Version: 1
"""

import itertools
import secrets
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from sceau.domain.entities.challenge import Challenge, ChallengePurpose
from sceau.domain.entities.signature_proof import SignatureProof
from sceau.domain.exceptions import ReplayDetectedError
from shared.reporter import SystemReporter
from shared.reporter.emojis import WalletEmoji

MESSAGE_VERSION = 1

DEFAULT_REDEEMED_LIMIT = 10_000

PREAMBLES = {
    ChallengePurpose.LOGIN: "Sign this message to authenticate with {app}.",
    ChallengePurpose.LINK: "Link this wallet to your {app} account.",
}

_FIELDS = ("Purpose", "Wallet", "Nonce", "Issued At", "Version")


@dataclass(frozen=True)
class ParsedChallenge:
    """Fields recovered from a challenge message."""

    preamble: str
    purpose: ChallengePurpose
    address: str
    nonce: str
    issued_at: datetime
    version: int


def _format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with milliseconds and Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_challenge(message: str) -> ParsedChallenge:
    """
    Parse a version 1 challenge message.

    Args:
        message: Message produced by ChallengeBuilder

    Returns:
        ParsedChallenge with every field

    Raises:
        ValueError: If the message does not follow the format
    """
    lines = message.split("\n")
    if len(lines) != 2 + len(_FIELDS):
        raise ValueError(f"Expected {2 + len(_FIELDS)} lines, got {len(lines)}")

    preamble, blank = lines[0], lines[1]
    if not preamble or blank != "":
        raise ValueError("Challenge must start with a preamble and a blank line")

    values: Dict[str, str] = {}
    for expected, line in zip(_FIELDS, lines[2:]):
        label, sep, value = line.partition(": ")
        if not sep or label != expected or not value:
            raise ValueError(f"Expected '{expected}: <value>', got '{line}'")
        values[label] = value

    try:
        version = int(values["Version"])
    except ValueError:
        raise ValueError(f"Invalid version: {values['Version']}")
    if version != MESSAGE_VERSION:
        raise ValueError(f"Unsupported challenge version: {version}")

    try:
        purpose = ChallengePurpose(values["Purpose"])
    except ValueError:
        raise ValueError(f"Unknown purpose: {values['Purpose']}")

    try:
        issued_at = datetime.fromisoformat(values["Issued At"].replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"Invalid timestamp: {values['Issued At']}")

    return ParsedChallenge(
        preamble=preamble,
        purpose=purpose,
        address=values["Wallet"],
        nonce=values["Nonce"],
        issued_at=issued_at,
        version=version,
    )


class ChallengeBuilder:
    """
    Issues single-use challenges.

    Nonce layout: <time-ms hex>-<counter hex>-<128 random bits hex>.
    The counter keeps nonces unique within a millisecond; the random
    part keeps them unguessable.
    Redeemed nonces are remembered up to redeemed_limit, oldest evicted
    first; an evicted nonce is still refused by redeem() because it is
    no longer outstanding.
    """

    def __init__(
        self,
        app_name: str = "LifeVault",
        nonce_factory: Optional[Callable[[], str]] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        reporter: Optional[SystemReporter] = None,
        redeemed_limit: int = DEFAULT_REDEEMED_LIMIT,
    ):
        """
        Initialize challenge builder.

        Args:
            app_name: Application name used in preambles
            nonce_factory: Override nonce generation (tests)
            clock: UTC clock
            reporter: Optional reporter
            redeemed_limit: Max redeemed nonces kept for duplicate checks
        """
        self.app_name = app_name
        self.clock = clock
        self.reporter = reporter
        self._nonce_factory = nonce_factory or self._generate_nonce
        self._counter = itertools.count(1)
        self._outstanding: Dict[str, Challenge] = {}
        self._redeemed: "OrderedDict[str, None]" = OrderedDict()
        self._redeemed_limit = redeemed_limit
        self._lock = threading.Lock()

    def _generate_nonce(self) -> str:
        millis = time.time_ns() // 1_000_000
        return f"{millis:x}-{next(self._counter):x}-{secrets.token_hex(16)}"

    # ================================================================
    # Building
    # ================================================================

    def build_login_challenge(self, address: str) -> Challenge:
        """Build challenge proving control of address for login."""
        return self._build(address, ChallengePurpose.LOGIN)

    def build_link_challenge(self, address: str) -> Challenge:
        """Build challenge linking address to the current account."""
        return self._build(address, ChallengePurpose.LINK)

    def build(self, address: str, purpose: ChallengePurpose) -> Challenge:
        return self._build(address, purpose)

    def _build(self, address: str, purpose: ChallengePurpose) -> Challenge:
        if not address:
            raise ValueError("Wallet address is required")

        issued_at = self.clock()

        with self._lock:
            nonce = self._nonce_factory()
            if nonce in self._outstanding or nonce in self._redeemed:
                raise ReplayDetectedError(nonce)

            message = "\n".join(
                [
                    PREAMBLES[purpose].format(app=self.app_name),
                    "",
                    f"Purpose: {purpose.value}",
                    f"Wallet: {address}",
                    f"Nonce: {nonce}",
                    f"Issued At: {_format_timestamp(issued_at)}",
                    f"Version: {MESSAGE_VERSION}",
                ]
            )
            challenge = Challenge(
                message=message,
                nonce=nonce,
                address=address,
                purpose=purpose,
                issued_at=issued_at,
            )
            self._outstanding[nonce] = challenge

        if self.reporter:
            self.reporter.debug(
                f"{WalletEmoji.CHALLENGE} Issued {purpose.value} challenge "
                f"(nonce {nonce[:12]}...)",
                context="ChallengeBuilder",
            )
        return challenge

    # ================================================================
    # Nonce lifecycle
    # ================================================================

    def redeem(self, proof: SignatureProof) -> Challenge:
        """
        Consume the challenge a proof was produced for.

        Raises:
            ReplayDetectedError: Nonce unknown or already redeemed
        """
        with self._lock:
            challenge = self._outstanding.pop(proof.nonce, None)
            if challenge is None:
                raise ReplayDetectedError(proof.nonce)
            self._mark_redeemed(proof.nonce)
        return challenge

    def discard(self, nonce: str) -> None:
        """Drop an outstanding challenge after a failed attempt."""
        with self._lock:
            if self._outstanding.pop(nonce, None) is not None:
                self._mark_redeemed(nonce)

    def _mark_redeemed(self, nonce: str) -> None:
        self._redeemed[nonce] = None
        while len(self._redeemed) > self._redeemed_limit:
            self._redeemed.popitem(last=False)

    def is_outstanding(self, nonce: str) -> bool:
        with self._lock:
            return nonce in self._outstanding

    @property
    def outstanding_count(self) -> int:
        return len(self._outstanding)

    @property
    def redeemed_count(self) -> int:
        return len(self._redeemed)
