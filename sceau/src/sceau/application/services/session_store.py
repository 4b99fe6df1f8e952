"""
Session store.

Process-wide holder of the session credential, persisted in a single
credential storage slot.
"""

import threading
from typing import Callable, Optional

from sceau.domain.entities.session_credential import SessionCredential
from sceau.domain.services.i_credential_storage import ICredentialStorage
from sceau.infrastructure.monitoring.metrics import session_invalidations_total
from sceau.infrastructure.storage.memory_storage import MemoryCredentialStorage
from sceau.infrastructure.wallet.event_channel import EventChannel, Subscription
from shared.reporter import SystemReporter
from shared.reporter.emojis import WalletEmoji

CredentialHandler = Callable[[Optional[SessionCredential]], None]


class SessionStore:
    """
    Holds the current SessionCredential.

    get() is a synchronous cached read; set(), clear() and restore()
    also write through to storage under a fixed key.
    """

    def __init__(
        self,
        storage: Optional[ICredentialStorage] = None,
        key: str = "token",
        reporter: Optional[SystemReporter] = None,
        metrics_enabled: bool = True,
    ):
        """
        Initialize session store.

        Args:
            storage: Durable slot (in-memory if None)
            key: Storage key for the token
            reporter: Optional reporter
            metrics_enabled: Record invalidation counters
        """
        self.storage = storage or MemoryCredentialStorage()
        self.key = key
        self.reporter = reporter
        self.metrics_enabled = metrics_enabled

        self._credential: Optional[SessionCredential] = None
        self._lock = threading.Lock()
        self._changes: EventChannel[CredentialHandler] = EventChannel(
            "credential_change", reporter
        )

    def get(self) -> Optional[SessionCredential]:
        """Current credential, or None when logged out."""
        with self._lock:
            return self._credential

    @property
    def is_authenticated(self) -> bool:
        return self.get() is not None

    async def set(self, credential: SessionCredential) -> None:
        """Store credential and persist it."""
        await self.storage.set(self.key, credential.token)
        with self._lock:
            self._credential = credential

        if self.reporter:
            self.reporter.info(
                f"{WalletEmoji.TOKEN} Session stored: {credential.masked()}",
                context="SessionStore",
            )
        self._changes.emit(credential)

    async def clear(self, cause: str = "logout") -> None:
        """
        Drop credential from memory and storage.

        Args:
            cause: Why the session ended (logout, unauthorized)
        """
        with self._lock:
            previous, self._credential = self._credential, None

        await self.storage.delete(self.key)

        if previous is None:
            return

        if self.metrics_enabled:
            session_invalidations_total.labels(cause=cause).inc()
        if self.reporter:
            self.reporter.info(
                f"{WalletEmoji.LOGOUT} Session cleared ({cause})",
                context="SessionStore",
            )
        self._changes.emit(None)

    async def restore(self) -> Optional[SessionCredential]:
        """Reload credential from storage at process start."""
        token = await self.storage.get(self.key)
        if not token:
            return None

        credential = SessionCredential(token)
        with self._lock:
            self._credential = credential

        if self.reporter:
            self.reporter.info(
                f"{WalletEmoji.RESTORED} Session restored: {credential.masked()}",
                context="SessionStore",
            )
        self._changes.emit(credential)
        return credential

    def subscribe(self, handler: CredentialHandler) -> Subscription:
        """Register handler receiving the new credential (None on clear)."""
        return self._changes.subscribe(handler)


_session_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    """Get or initialize global session store singleton."""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store


def override_session_store(store: SessionStore) -> None:
    """Override global session store (for testing)."""
    global _session_store
    _session_store = store


def reset_session_store() -> None:
    """Reset session store to force re-initialization (for testing)."""
    global _session_store
    _session_store = None
