"""
Verification client interface.
"""

from abc import ABC, abstractmethod

from sceau.domain.entities.session_credential import SessionCredential
from sceau.domain.entities.verification_request import VerificationRequest


class IVerificationClient(ABC):
    """
    Abstract client for the backend signature verification endpoints.

    The backend checks the signature and nonce; this side only carries
    the proof and maps answers to domain results.
    """

    @abstractmethod
    async def verify_login(self, request: VerificationRequest) -> SessionCredential:
        """
        Exchange a signed login challenge for a session token.

        Raises:
            VerificationRejectedError: Backend declined signature/nonce
            NetworkError: Transport failure or server error
        """

    @abstractmethod
    async def verify_link(self, request: VerificationRequest) -> None:
        """
        Link the signing wallet to the authenticated account.

        Raises:
            VerificationRejectedError: Backend declined signature/nonce
            NetworkError: Transport failure or server error
        """
