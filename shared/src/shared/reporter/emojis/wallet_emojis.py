"""
Wallet and session emoji definitions.

Usage:
    >>> from shared.reporter.emojis import WalletEmoji
    >>> print(f"{WalletEmoji.CONNECTED} 0x1234ab...cdef12")
    🟢 0x1234ab...cdef12
"""

from shared.reporter.emojis.base_emojis import ComponentEmoji


class WalletEmoji(ComponentEmoji):
    """
    Wallet connection, signing and session events.

    Categories:
        - Connection: connect, disconnect, account/network change
        - Signing: challenge, signature
        - Session: token stored, cleared, restored
    """

    # ============================================================
    # Connection
    # ============================================================

    WALLET = "👛"  # Wallet provider
    CONNECTED = "🟢"  # Wallet connected
    DISCONNECTED = "🔴"  # Wallet disconnected
    ACCOUNT_CHANGED = "🔁"  # Provider switched account
    NETWORK_CHANGED = "🌐"  # Provider switched network
    NOT_INSTALLED = "🧩"  # Provider extension missing

    # ============================================================
    # Signing
    # ============================================================

    CHALLENGE = "📜"  # Challenge issued
    SIGNATURE = "✍️"  # Message signed
    LINK = "🔗"  # Wallet link flow

    # ============================================================
    # Session
    # ============================================================

    TOKEN = "🔑"  # Credential stored
    LOGOUT = "🚪"  # Credential cleared
    RESTORED = "♻️"  # Session rehydrated at startup
