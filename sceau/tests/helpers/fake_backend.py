"""
Fake wallet auth backend served through httpx.MockTransport.

Implements POST /auth/wallet, POST /auth/link-wallet and GET /me with
the same answers as the real API. Nonces are single-use; signatures
are checked with PyNaCl when verify_signatures is enabled.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

import httpx
from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey


@dataclass
class RecordedRequest:
    method: str
    path: str
    body: Dict
    headers: Dict[str, str] = field(default_factory=dict)


class FakeBackend:
    """Scriptable backend; set the failure switches before a call."""

    def __init__(self, token: str = "tok123", verify_signatures: bool = False):
        self.token = token
        self.verify_signatures = verify_signatures

        self.fail_status: Optional[int] = None
        self.fail_message: Optional[str] = "Invalid signature"
        self.raise_connect_error = False
        self.link_body: Optional[Dict] = {"success": True}

        self.requests: List[RecordedRequest] = []
        self.used_nonces: Set[str] = set()
        self.issued_tokens: Set[str] = set()
        self.linked_addresses: List[str] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls_to(self, suffix: str) -> List[RecordedRequest]:
        return [r for r in self.requests if r.path.endswith(suffix)]

    # ================================================================
    # Routing
    # ================================================================

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else {}
        path = request.url.path
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=path,
                body=body,
                headers=dict(request.headers),
            )
        )

        if self.raise_connect_error:
            raise httpx.ConnectError("Connection refused", request=request)

        if self.fail_status is not None:
            payload = {"message": self.fail_message} if self.fail_message else {}
            return httpx.Response(self.fail_status, json=payload)

        if path.endswith("/auth/wallet"):
            return self._login(body)
        if path.endswith("/auth/link-wallet"):
            return self._link(body)
        if path.endswith("/me"):
            return self._me(request)
        return httpx.Response(404, json={"message": "Not found"})

    def _login(self, body: Dict) -> httpx.Response:
        rejected = self._check_proof(body)
        if rejected is not None:
            return rejected
        self.issued_tokens.add(self.token)
        return httpx.Response(200, json={"data": {"token": self.token}})

    def _link(self, body: Dict) -> httpx.Response:
        rejected = self._check_proof(body)
        if rejected is not None:
            return rejected
        self.linked_addresses.append(body["address"])
        if self.link_body is None:
            return httpx.Response(204)
        return httpx.Response(200, json=self.link_body)

    def _me(self, request: httpx.Request) -> httpx.Response:
        auth = request.headers.get("Authorization", "")
        token = auth[len("Bearer "):] if auth.startswith("Bearer ") else None
        if token is None or token not in self.issued_tokens:
            return httpx.Response(401, json={"message": "Invalid or expired token"})
        return httpx.Response(200, json={"data": {"token": token}})

    # ================================================================
    # Checks
    # ================================================================

    def _check_proof(self, body: Dict) -> Optional[httpx.Response]:
        required = ("address", "publicKey", "signature", "message", "nonce")
        missing = [key for key in required if not body.get(key)]
        if missing:
            return httpx.Response(
                400, json={"message": f"Missing fields: {', '.join(missing)}"}
            )

        if body["nonce"] in self.used_nonces:
            return httpx.Response(400, json={"message": "Nonce already used"})

        if self.verify_signatures and not self._signature_valid(body):
            return httpx.Response(400, json={"message": "Invalid signature"})

        self.used_nonces.add(body["nonce"])
        return None

    @staticmethod
    def _signature_valid(body: Dict) -> bool:
        try:
            verify_key = VerifyKey(bytes.fromhex(body["publicKey"][2:]))
            verify_key.verify(
                body["message"].encode("utf-8"),
                bytes.fromhex(body["signature"][2:]),
            )
        except (BadSignatureError, ValueError):
            return False
        return True
