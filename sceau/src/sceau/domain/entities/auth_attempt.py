"""
AuthAttempt entity - Correlates one authenticate-or-link call.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional
from uuid import UUID, uuid4

from sceau.domain.entities.challenge import Challenge, ChallengePurpose
from sceau.domain.entities.wallet_session import WalletSession
from sceau.domain.exceptions.attempt import InvalidTransitionError
from sceau.domain.value_objects.auth_state import (
    AuthState,
    AuthStep,
    FailureReason,
)


class AttemptKind(str, Enum):
    """Kinds of attempt; at most one of each may be in flight."""

    LOGIN = "login"
    LINK = "link"

    @property
    def purpose(self) -> ChallengePurpose:
        return ChallengePurpose(self.value)


@dataclass
class AuthAttempt:
    """
    Ephemeral attempt tracked through connect, sign and verify.

    Business rules:
    - Starts IDLE, follows the AuthState transition table
    - Bound to exactly one WalletSession once connected
    - An abort (session change) wins over any later step
    """

    kind: AttemptKind
    id: UUID = field(default_factory=uuid4)
    state: AuthState = field(default_factory=AuthState.idle)
    session: Optional[WalletSession] = None
    challenge: Optional[Challenge] = None
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None
    abort_cause: Optional[str] = None
    history: List[AuthState] = field(default_factory=list)
    _abort: asyncio.Event = field(default_factory=asyncio.Event, repr=False)
    _listeners: List[Callable[["AuthAttempt"], None]] = field(
        default_factory=list, repr=False
    )

    def on_transition(self, listener: Callable[["AuthAttempt"], None]) -> None:
        """Register a listener invoked after every applied transition."""
        self._listeners.append(listener)

    def transition(
        self, step: AuthStep, reason: Optional[FailureReason] = None
    ) -> AuthState:
        """
        Move to another step.

        Raises:
            InvalidTransitionError: If the transition table forbids it
        """
        if not self.state.can_transition_to(step):
            raise InvalidTransitionError(self.state.step, step)

        self.history.append(self.state)
        self.state = AuthState(step, reason)
        if self.state.is_terminal:
            self.finished_at = datetime.now()

        for listener in list(self._listeners):
            listener(self)
        return self.state

    def fail(self, reason: FailureReason) -> AuthState:
        """Move to FAILED unless already terminal."""
        if self.state.is_terminal:
            return self.state
        return self.transition(AuthStep.FAILED, reason)

    def bind(self, session: WalletSession) -> None:
        """Bind attempt to the wallet session it signs with."""
        self.session = session

    def abort(self, cause: str) -> None:
        """Signal that the bound session is no longer valid."""
        if self.abort_cause is None:
            self.abort_cause = cause
        self._abort.set()

    @property
    def aborted(self) -> bool:
        return self._abort.is_set()

    async def wait_aborted(self) -> None:
        """Suspend until abort() is called."""
        await self._abort.wait()

    @property
    def duration_seconds(self) -> float:
        end = self.finished_at or datetime.now()
        return (end - self.started_at).total_seconds()
