"""
AuthState value object - Closed tagged variant for the auth state machine.

State Machine:
    IDLE -> CONNECTING -> AWAITING_SIGNATURE -> VERIFYING -> AUTHENTICATED
      |         |                |                  |
      +---------+----------------+------------------+--> FAILED(reason)

    Any step may fall back to IDLE when the wallet session changes.
    AUTHENTICATED and FAILED are terminal per attempt; retry re-enters IDLE.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional


class AuthStep(str, Enum):
    """Steps of one authenticate-or-link attempt."""

    IDLE = "idle"
    CONNECTING = "connecting"
    AWAITING_SIGNATURE = "awaiting_signature"
    VERIFYING = "verifying"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class FailureReason(str, Enum):
    """Classified cause of a FAILED attempt."""

    PROVIDER_UNAVAILABLE = "provider_unavailable"
    CONNECT_FAILED = "connect_failed"
    CONNECT_TIMEOUT = "connect_timeout"
    SIGNATURE_REJECTED = "signature_rejected"
    VERIFICATION_REJECTED = "verification_rejected"
    NETWORK_ERROR = "network_error"
    SESSION_CHANGED = "session_changed"
    ATTEMPT_IN_PROGRESS = "attempt_in_progress"
    CANCELLED = "cancelled"


TRANSITIONS: Dict[AuthStep, FrozenSet[AuthStep]] = {
    AuthStep.IDLE: frozenset(
        {AuthStep.CONNECTING, AuthStep.AWAITING_SIGNATURE, AuthStep.FAILED}
    ),
    AuthStep.CONNECTING: frozenset(
        {AuthStep.AWAITING_SIGNATURE, AuthStep.FAILED, AuthStep.IDLE}
    ),
    AuthStep.AWAITING_SIGNATURE: frozenset(
        {AuthStep.VERIFYING, AuthStep.FAILED, AuthStep.IDLE}
    ),
    AuthStep.VERIFYING: frozenset(
        {AuthStep.AUTHENTICATED, AuthStep.FAILED, AuthStep.IDLE}
    ),
    AuthStep.AUTHENTICATED: frozenset({AuthStep.IDLE}),
    AuthStep.FAILED: frozenset({AuthStep.IDLE}),
}


@dataclass(frozen=True)
class AuthState:
    """
    Immutable state of the authentication state machine.

    Business rules:
    - reason is set if and only if step is FAILED
    - transitions follow TRANSITIONS exactly
    """

    step: AuthStep = AuthStep.IDLE
    reason: Optional[FailureReason] = None

    def __post_init__(self):
        """Validate the step/reason pairing."""
        if self.step == AuthStep.FAILED and self.reason is None:
            raise ValueError("FAILED state requires a failure reason")
        if self.step != AuthStep.FAILED and self.reason is not None:
            raise ValueError(f"{self.step.value} state cannot carry a reason")

    @classmethod
    def idle(cls) -> "AuthState":
        return cls(AuthStep.IDLE)

    @classmethod
    def failed(cls, reason: FailureReason) -> "AuthState":
        return cls(AuthStep.FAILED, reason)

    @property
    def is_terminal(self) -> bool:
        """True for AUTHENTICATED and FAILED."""
        return self.step in (AuthStep.AUTHENTICATED, AuthStep.FAILED)

    @property
    def is_in_flight(self) -> bool:
        """True while connect, sign or verify is pending."""
        return self.step in (
            AuthStep.CONNECTING,
            AuthStep.AWAITING_SIGNATURE,
            AuthStep.VERIFYING,
        )

    def can_transition_to(self, step: AuthStep) -> bool:
        """Check target step against the transition table."""
        return step in TRANSITIONS[self.step]

    def __str__(self) -> str:
        if self.reason is not None:
            return f"{self.step.value}({self.reason.value})"
        return self.step.value
