"""
SessionCredential entity - Backend-issued session token.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionCredential:
    """Token proving a completed wallet authentication."""

    token: str

    def __post_init__(self):
        if not self.token:
            raise ValueError("Session token cannot be empty")

    def masked(self) -> str:
        """Return token safe for logs (e.g., 'eyJh...9f2c')."""
        if len(self.token) <= 8:
            return "***"
        return f"{self.token[:4]}...{self.token[-4:]}"

    def to_dict(self) -> dict:
        return {"token": self.token}
