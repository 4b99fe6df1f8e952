"""
Domain exceptions package.
"""

# Attempt exceptions
from sceau.domain.exceptions.attempt import (
    AttemptCancelledError,
    AttemptInProgressError,
    InvalidTransitionError,
    SessionChangedError,
)

# Base exceptions
from sceau.domain.exceptions.base import SceauException

# Verification exceptions
from sceau.domain.exceptions.verification import (
    NetworkError,
    ReplayDetectedError,
    UnauthorizedError,
    VerificationRejectedError,
)

# Wallet exceptions
from sceau.domain.exceptions.wallet import (
    ConnectFailedError,
    ConnectTimeoutError,
    NotConnectedError,
    ProviderUnavailableError,
    SignatureRejectedError,
    UserRejectedError,
    WalletError,
)

__all__ = [
    # Base
    "SceauException",
    # Wallet
    "WalletError",
    "ProviderUnavailableError",
    "UserRejectedError",
    "ConnectFailedError",
    "ConnectTimeoutError",
    "NotConnectedError",
    "SignatureRejectedError",
    # Verification
    "VerificationRejectedError",
    "UnauthorizedError",
    "ReplayDetectedError",
    "NetworkError",
    # Attempt
    "SessionChangedError",
    "AttemptInProgressError",
    "AttemptCancelledError",
    "InvalidTransitionError",
]
