"""
Authentication state machine emoji definitions.

Covers all AuthOrchestrator steps and transitions.

Usage:
    >>> from shared.reporter.emojis import StateEmoji
    >>> print(f"{StateEmoji.TRANSITION} connecting -> awaiting_signature")
    🔀 connecting -> awaiting_signature
"""

from shared.reporter.emojis.base_emojis import ComponentEmoji


class StateEmoji(ComponentEmoji):
    """
    Authentication steps and transitions.

    Categories:
        - Steps: one per state machine step
        - Transitions: requested, applied, aborted
    """

    # ============================================================
    # Steps
    # ============================================================

    IDLE = "⚪"  # Nothing in flight
    CONNECTING = "🔌"  # Waiting for wallet connect prompt
    AWAITING_SIGNATURE = "✍️"  # Waiting for wallet signature
    VERIFYING = "🔎"  # Backend verification in flight
    AUTHENTICATED = "✅"  # Terminal success
    FAILED = "❌"  # Terminal failure (retryable)

    # ============================================================
    # Transitions
    # ============================================================

    TRANSITION = "🔀"  # State transition
    ABORTED = "⛔"  # Attempt aborted by external event
    JOINED = "🔗"  # Caller joined an in-flight attempt
