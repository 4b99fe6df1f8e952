"""
Wallet provider exceptions.

Raised by wallet providers and the WalletConnector during connect and sign.
"""

from sceau.domain.exceptions.base import SceauException
from sceau.domain.value_objects.auth_state import FailureReason


class WalletError(SceauException):
    """Base exception for wallet provider operations."""


class ProviderUnavailableError(WalletError):
    """Raised when no wallet provider is installed."""

    reason = FailureReason.PROVIDER_UNAVAILABLE

    def __init__(self, provider_name: str = "wallet"):
        super().__init__(
            f"No wallet connected: {provider_name} provider is not installed",
            code="PROVIDER_UNAVAILABLE",
        )
        self.provider_name = provider_name


class UserRejectedError(WalletError):
    """
    Raised when the user declines a connect or sign prompt.

    Carries no FailureReason of its own: the orchestrator reports it as
    CONNECT_FAILED or SIGNATURE_REJECTED depending on the phase.
    """

    def __init__(self, action: str = "request"):
        super().__init__(
            f"User rejected the {action}",
            code="USER_REJECTED",
        )
        self.action = action


class ConnectFailedError(WalletError):
    """Raised when the provider fails to connect for any other reason."""

    reason = FailureReason.CONNECT_FAILED

    def __init__(self, message: str = "Failed to connect wallet"):
        super().__init__(message, code="CONNECT_FAILED")


class ConnectTimeoutError(WalletError):
    """Raised when the provider does not acknowledge connect in time."""

    reason = FailureReason.CONNECT_TIMEOUT

    def __init__(self, timeout: float):
        super().__init__(
            f"Wallet did not connect within {timeout:g} seconds",
            code="CONNECT_TIMEOUT",
        )
        self.timeout = timeout


class NotConnectedError(WalletError):
    """Raised when signing is requested without a connected wallet."""

    reason = FailureReason.SIGNATURE_REJECTED

    def __init__(self):
        super().__init__("No wallet connected", code="NOT_CONNECTED")


class SignatureRejectedError(WalletError):
    """Raised when the provider fails to produce a usable signature."""

    reason = FailureReason.SIGNATURE_REJECTED

    def __init__(self, message: str = "Failed to sign message"):
        super().__init__(message, code="SIGNATURE_REJECTED")
