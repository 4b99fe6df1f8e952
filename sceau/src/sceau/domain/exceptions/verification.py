"""
Backend verification exceptions.
"""

from typing import Optional

from sceau.domain.exceptions.base import SceauException
from sceau.domain.value_objects.auth_state import FailureReason


class VerificationRejectedError(SceauException):
    """Raised when the backend declines the signature or nonce."""

    reason = FailureReason.VERIFICATION_REJECTED

    def __init__(self, message: str, status_code: Optional[int] = None):
        """
        Initialize verification rejected error.

        Args:
            message: Error message (unwrapped from backend payload)
            status_code: HTTP status code from backend
        """
        super().__init__(message, code="VERIFICATION_REJECTED")
        self.status_code = status_code


class UnauthorizedError(VerificationRejectedError):
    """Raised when a downstream call answers 401."""

    def __init__(self, message: str = "Session expired. Please sign in again"):
        super().__init__(message, status_code=401)
        self.code = "UNAUTHORIZED"


class ReplayDetectedError(VerificationRejectedError):
    """Raised when a nonce is redeemed or submitted more than once."""

    def __init__(self, nonce: str):
        super().__init__(f"Signature nonce already used: {nonce}")
        self.code = "REPLAY_DETECTED"
        self.nonce = nonce


class NetworkError(SceauException):
    """Raised on transport failures, timeouts and 5xx answers."""

    reason = FailureReason.NETWORK_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, code="NETWORK_ERROR")
        self.status_code = status_code
