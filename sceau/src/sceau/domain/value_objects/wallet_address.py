"""
WalletAddress value object - Immutable account address.
"""

from dataclasses import dataclass

HEX_DIGITS = "0123456789abcdefABCDEF"
MAX_HEX_LENGTH = 64


@dataclass(frozen=True)
class WalletAddress:
    """
    Value object representing a validated account address.

    Business rules:
    - Must start with 0x
    - 1 to 64 hex digits after the prefix (short form allowed)
    - Immutable once created
    """

    address: str

    def __post_init__(self):
        """Validate wallet address on creation."""
        if not self.address:
            raise ValueError("Wallet address cannot be empty")

        if not self.address.startswith("0x"):
            raise ValueError("Wallet address must start with 0x")

        digits = self.address[2:]
        if not digits or len(digits) > MAX_HEX_LENGTH:
            raise ValueError(f"Invalid wallet address length: {len(digits)}")

        if not all(c in HEX_DIGITS for c in digits):
            raise ValueError("Wallet address contains invalid characters")

    def normalized(self) -> str:
        """Return lowercase, zero-padded 64-digit form."""
        return "0x" + self.address[2:].lower().rjust(MAX_HEX_LENGTH, "0")

    def truncated(self) -> str:
        """Return truncated address for display (e.g., '0x1234ab...cdef12')."""
        if len(self.address) <= 16:
            return self.address
        return f"{self.address[:8]}...{self.address[-6:]}"

    def __str__(self) -> str:
        """String representation returns full address."""
        return self.address

    def __eq__(self, other) -> bool:
        """Compare addresses by normalized value."""
        if not isinstance(other, WalletAddress):
            return False
        return self.normalized() == other.normalized()

    def __hash__(self) -> int:
        return hash(self.normalized())


def truncate_address(address: str) -> str:
    """Shorten any address string for logs without validating it."""
    if len(address) <= 16:
        return address
    return f"{address[:8]}...{address[-6:]}"
