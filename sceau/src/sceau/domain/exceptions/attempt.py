"""
Attempt lifecycle exceptions.
"""

from sceau.domain.exceptions.base import SceauException
from sceau.domain.value_objects.auth_state import AuthStep, FailureReason


class SessionChangedError(SceauException):
    """Raised when an account or network change invalidates an attempt."""

    reason = FailureReason.SESSION_CHANGED

    def __init__(self, cause: str = "account"):
        super().__init__(
            f"Wallet {cause} changed during authentication. Please try again",
            code="SESSION_CHANGED",
        )
        self.cause = cause


class AttemptInProgressError(SceauException):
    """Raised when an attempt of the same kind is already running."""

    reason = FailureReason.ATTEMPT_IN_PROGRESS

    def __init__(self, kind: str):
        super().__init__(
            f"A wallet {kind} attempt is already in progress",
            code="ATTEMPT_IN_PROGRESS",
        )
        self.kind = kind


class InvalidTransitionError(SceauException):
    """Raised on a state change not allowed by the transition table."""

    def __init__(self, current: AuthStep, target: AuthStep):
        super().__init__(
            f"Invalid auth transition: {current.value} -> {target.value}",
            code="INVALID_TRANSITION",
        )
        self.current = current
        self.target = target


class AttemptCancelledError(SceauException):
    """Raised into an attempt when the orchestrator shuts down under it."""

    reason = FailureReason.CANCELLED

    def __init__(self):
        super().__init__(
            "Wallet authentication was cancelled",
            code="CANCELLED",
        )
