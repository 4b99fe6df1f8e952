"""
Cancellable event subscriptions.

Handlers registered on an EventChannel receive every emitted event until
their Subscription is cancelled.
"""

import logging
import threading
from typing import Any, Callable, Generic, List, Optional, TypeVar

from shared.reporter import SystemReporter

logger = logging.getLogger(__name__)

H = TypeVar("H", bound=Callable[..., Any])


class Subscription:
    """Handle returned by subscribe(); unsubscribe() is idempotent."""

    def __init__(self, cancel: Callable[[], None]):
        self._cancel: Optional[Callable[[], None]] = cancel

    @property
    def active(self) -> bool:
        return self._cancel is not None

    def unsubscribe(self) -> None:
        """Stop receiving events."""
        cancel, self._cancel = self._cancel, None
        if cancel is not None:
            cancel()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.unsubscribe()
        return False


class EventChannel(Generic[H]):
    """
    Synchronous fan-out of events to registered handlers.

    A failing handler is logged and does not prevent delivery to the
    remaining handlers.
    """

    def __init__(self, name: str, reporter: Optional[SystemReporter] = None):
        self.name = name
        self.reporter = reporter
        self._handlers: List[H] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: H) -> Subscription:
        """Register handler and return its cancellable handle."""
        with self._lock:
            self._handlers.append(handler)

        def cancel() -> None:
            with self._lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return Subscription(cancel)

    def emit(self, *args: Any) -> None:
        """Invoke every handler with args."""
        with self._lock:
            handlers = list(self._handlers)

        for handler in handlers:
            try:
                handler(*args)
            except Exception as e:
                if self.reporter:
                    self.reporter.error(
                        f"Handler failed on '{self.name}': {e}",
                        context="EventChannel",
                    )
                else:
                    logger.exception(f"Handler failed on '{self.name}'")

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()

    def __len__(self) -> int:
        return len(self._handlers)
