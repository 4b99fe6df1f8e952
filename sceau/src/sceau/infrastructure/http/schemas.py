"""
Backend wallet auth schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field


class WalletVerificationRequest(BaseModel):
    """Body sent to /auth/wallet and /auth/link-wallet."""

    address: str = Field(..., description="Wallet address (0x hex)")
    publicKey: str = Field(..., description="Wallet public key (0x hex)")
    signature: str = Field(..., description="Signature over message (0x hex)")
    message: str = Field(..., description="Full message signed by the wallet")
    nonce: str = Field(..., description="Challenge nonce")


class TokenData(BaseModel):
    """Session token issued after verification."""

    token: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Successful login verification: {data: {token}}."""

    data: TokenData


class LinkResponse(BaseModel):
    """Link confirmation: {success: true}."""

    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error payload; only message is surfaced to callers."""

    message: Optional[str] = None
    error: Optional[str] = None
