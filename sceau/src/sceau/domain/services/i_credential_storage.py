"""
Credential storage interface.
"""

from abc import ABC, abstractmethod
from typing import Optional


class ICredentialStorage(ABC):
    """
    Durable key-value slot for the session token.

    Mirrors a browser localStorage slot: one opaque string per key.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return stored value or None."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store value under key."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove key; return True if something was removed."""
