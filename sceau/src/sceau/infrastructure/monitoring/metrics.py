"""
Prometheus metrics collection.
"""

from prometheus_client import Counter, Gauge, Histogram

# ============================================================
# Attempt Metrics
# ============================================================

auth_attempts_total = Counter(
    "sceau_auth_attempts_total",
    "Total wallet auth attempts by outcome",
    ["kind", "outcome"],
)

auth_attempt_duration_seconds = Histogram(
    "sceau_auth_attempt_duration_seconds",
    "Wallet auth attempt duration in seconds",
    ["kind"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

auth_attempts_in_flight = Gauge(
    "sceau_auth_attempts_in_flight",
    "Wallet auth attempts currently in flight",
    ["kind"],
)

# ============================================================
# Session Metrics
# ============================================================

session_invalidations_total = Counter(
    "sceau_session_invalidations_total",
    "Total session invalidations",
    ["cause"],
)

# ============================================================
# Verification Metrics
# ============================================================

verification_requests_total = Counter(
    "sceau_verification_requests_total",
    "Total backend verification requests",
    ["endpoint", "status"],
)
