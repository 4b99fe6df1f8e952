"""
System-level operations and lifecycle emoji definitions.
"""

from shared.reporter.emojis.base_emojis import ComponentEmoji


class SystemEmoji(ComponentEmoji):
    """System-level operations and lifecycle events."""

    # ============================================================
    # Lifecycle Operations
    # ============================================================
    STARTUP = "🚀"  # Component initialization
    SHUTDOWN = "🛑"  # Component shutdown
    READY = "✅"  # Component initialized successfully
    INIT = "🆕"  # Initialization state

    # ============================================================
    # Configuration
    # ============================================================
    CONFIG = "⚙️"  # Configuration operation
    CONFIG_LOAD = "📋"  # Configuration loading
    CONFIG_ERROR = "❌"  # Configuration error

    # ============================================================
    # Maintenance & Cleanup
    # ============================================================
    CLEANUP = "🧹"  # Resource cleanup
    RESET = "♻️"  # Reset to initial state
