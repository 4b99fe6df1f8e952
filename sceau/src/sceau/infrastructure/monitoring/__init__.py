"""
Monitoring infrastructure.
"""

from sceau.infrastructure.monitoring.metrics import (
    auth_attempt_duration_seconds,
    auth_attempts_in_flight,
    auth_attempts_total,
    session_invalidations_total,
    verification_requests_total,
)

__all__ = [
    "auth_attempt_duration_seconds",
    "auth_attempts_in_flight",
    "auth_attempts_total",
    "session_invalidations_total",
    "verification_requests_total",
]
