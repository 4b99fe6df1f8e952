"""Emoji definitions for system reporting."""

from shared.reporter.emojis.base_emojis import ComponentEmoji
from shared.reporter.emojis.errors_emojis import ErrorEmoji
from shared.reporter.emojis.state_emojis import StateEmoji
from shared.reporter.emojis.system_emojis import SystemEmoji
from shared.reporter.emojis.wallet_emojis import WalletEmoji

__all__ = [
    "ComponentEmoji",
    "ErrorEmoji",
    "StateEmoji",
    "SystemEmoji",
    "WalletEmoji",
]
