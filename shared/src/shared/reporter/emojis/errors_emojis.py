"""
Error and warning level emoji definitions.

Usage:
    >>> from shared.reporter.emojis import ErrorEmoji
    >>> print(f"{ErrorEmoji.ERROR} Verification rejected")
    ❌ Verification rejected
"""

from shared.reporter.emojis.base_emojis import ComponentEmoji


class ErrorEmoji(ComponentEmoji):
    """
    Error levels and recovery indicators.

    Categories:
        - Severity: Critical, error, warning, debug
        - Recovery: Timeout, rejection
    """

    # ============================================================
    # Severity Levels
    # ============================================================

    CRITICAL = "🔴"  # Critical error
    ERROR = "❌"  # Error (operation failed)
    WARNING = "⚠️"  # Warning (potential issue)
    INFO = "ℹ️"  # Information
    DEBUG = "🐛"  # Debug information

    # ============================================================
    # Recovery
    # ============================================================

    TIMEOUT = "⏱️"  # Operation timed out
    REJECTED = "🚫"  # Rejected by user or backend
    NETWORK = "📡"  # Transport failure
