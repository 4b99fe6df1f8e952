"""
AuthResult value object - Stable result contract returned to callers.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from sceau.domain.value_objects.auth_state import FailureReason


@dataclass(frozen=True)
class AuthResult:
    """
    Outcome of one authenticate or link call.

    Shapes:
        login success -> {"success": True, "token": "..."}
        link success  -> {"success": True}
        failure       -> {"success": False, "error": "..."}
    """

    success: bool
    token: Optional[str] = None
    error: Optional[str] = None
    reason: Optional[FailureReason] = None

    def __post_init__(self):
        if self.success and self.error is not None:
            raise ValueError("Successful result cannot carry an error")
        if not self.success and not self.error:
            raise ValueError("Failed result requires an error message")

    @classmethod
    def ok(cls, token: Optional[str] = None) -> "AuthResult":
        return cls(success=True, token=token)

    @classmethod
    def fail(cls, error: str, reason: FailureReason) -> "AuthResult":
        return cls(success=False, error=error, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the caller-facing dictionary shape."""
        if not self.success:
            return {"success": False, "error": self.error}
        if self.token is not None:
            return {"success": True, "token": self.token}
        return {"success": True}
