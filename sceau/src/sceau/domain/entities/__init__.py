"""
Domain entities.
"""

from sceau.domain.entities.auth_attempt import AttemptKind, AuthAttempt
from sceau.domain.entities.challenge import Challenge, ChallengePurpose
from sceau.domain.entities.session_credential import SessionCredential
from sceau.domain.entities.signature_proof import SignatureProof
from sceau.domain.entities.verification_request import VerificationRequest
from sceau.domain.entities.wallet_session import WalletSession

__all__ = [
    "AttemptKind",
    "AuthAttempt",
    "Challenge",
    "ChallengePurpose",
    "SessionCredential",
    "SignatureProof",
    "VerificationRequest",
    "WalletSession",
]
