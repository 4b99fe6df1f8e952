"""
HTTP infrastructure.
"""

from sceau.infrastructure.http.api_client import ApiClient
from sceau.infrastructure.http.verification_client import HttpVerificationClient

__all__ = [
    "ApiClient",
    "HttpVerificationClient",
]
