"""Application services."""

from sceau.application.services.auth_orchestrator import AuthOrchestrator
from sceau.application.services.challenge_builder import (
    ChallengeBuilder,
    ParsedChallenge,
    parse_challenge,
)
from sceau.application.services.session_store import (
    SessionStore,
    get_session_store,
    override_session_store,
    reset_session_store,
)

__all__ = [
    "AuthOrchestrator",
    "ChallengeBuilder",
    "ParsedChallenge",
    "SessionStore",
    "get_session_store",
    "override_session_store",
    "parse_challenge",
    "reset_session_store",
]
