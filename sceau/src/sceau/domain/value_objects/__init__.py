"""
Domain value objects.
"""

from sceau.domain.value_objects.auth_result import AuthResult
from sceau.domain.value_objects.auth_state import (
    TRANSITIONS,
    AuthState,
    AuthStep,
    FailureReason,
)
from sceau.domain.value_objects.wallet_address import WalletAddress, truncate_address

__all__ = [
    "AuthResult",
    "AuthState",
    "AuthStep",
    "FailureReason",
    "TRANSITIONS",
    "WalletAddress",
    "truncate_address",
]
