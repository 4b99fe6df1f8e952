"""
Auth orchestrator - Wallet authentication state machine.

Drives one attempt through connect -> sign -> verify and converts every
outcome into an AuthResult. At most one attempt per kind (login, link)
runs at a time; account or network changes abort in-flight attempts.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from sceau.application.services.challenge_builder import ChallengeBuilder
from sceau.application.services.session_store import SessionStore
from sceau.domain.entities.auth_attempt import AttemptKind, AuthAttempt
from sceau.domain.entities.verification_request import VerificationRequest
from sceau.domain.entities.wallet_session import WalletSession
from sceau.domain.exceptions import (
    AttemptCancelledError,
    AttemptInProgressError,
    ConnectTimeoutError,
    NetworkError,
    ProviderUnavailableError,
    SceauException,
    SessionChangedError,
)
from sceau.domain.services.i_verification_client import IVerificationClient
from sceau.domain.value_objects.auth_result import AuthResult
from sceau.domain.value_objects.auth_state import AuthState, AuthStep, FailureReason
from sceau.infrastructure.monitoring.metrics import (
    auth_attempt_duration_seconds,
    auth_attempts_in_flight,
    auth_attempts_total,
)
from sceau.infrastructure.wallet.event_channel import EventChannel, Subscription
from sceau.infrastructure.wallet.wallet_connector import WalletConnector
from shared.reporter import SystemReporter
from shared.reporter.emojis import ErrorEmoji, StateEmoji

StateHandler = Callable[[AttemptKind, AuthState], None]

POLICY_JOIN = "join"
POLICY_REJECT = "reject"

GENERIC_ERRORS = {
    AttemptKind.LOGIN: "Wallet authentication failed",
    AttemptKind.LINK: "Wallet linking failed",
}

PHASE_CONNECT = "connect"
PHASE_SIGN = "sign"
PHASE_VERIFY = "verify"


class AuthOrchestrator:
    """
    State machine coordinating WalletConnector, ChallengeBuilder,
    VerificationClient and SessionStore.

    Result contract:
        authenticate() -> {"success": True, "token": ...} or
                          {"success": False, "error": ...}
        link_wallet()  -> {"success": True} or {"success": False, "error": ...}

    Nothing raises out of authenticate()/link_wallet() except cancellation
    of the calling task. close() resolves in-flight attempts as
    {"success": False, "error": "Wallet authentication was cancelled"}.
    """

    def __init__(
        self,
        connector: WalletConnector,
        challenge_builder: ChallengeBuilder,
        verification_client: IVerificationClient,
        session_store: SessionStore,
        policy: str = POLICY_JOIN,
        reporter: Optional[SystemReporter] = None,
        metrics_enabled: bool = True,
    ):
        """
        Initialize orchestrator.

        Args:
            connector: Wallet connector
            challenge_builder: Challenge issuer
            verification_client: Backend verification client
            session_store: Session credential holder (login only)
            policy: Second call while in flight: "join" or "reject"
            reporter: Optional reporter
            metrics_enabled: Record Prometheus metrics
        """
        if policy not in (POLICY_JOIN, POLICY_REJECT):
            raise ValueError(f"Unknown concurrent attempt policy: {policy}")

        self.connector = connector
        self.challenge_builder = challenge_builder
        self.verification_client = verification_client
        self.session_store = session_store
        self.policy = policy
        self.reporter = reporter
        self.metrics_enabled = metrics_enabled

        self._states: Dict[AttemptKind, AuthState] = {
            kind: AuthState.idle() for kind in AttemptKind
        }
        self._attempts: Dict[AttemptKind, AuthAttempt] = {}
        self._in_flight: Dict[AttemptKind, "asyncio.Task[AuthResult]"] = {}
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._state_events: EventChannel[StateHandler] = EventChannel(
            "auth_state", reporter
        )
        self._subscriptions: List[Subscription] = [
            connector.subscribe_account_change(self._on_account_change),
            connector.subscribe_network_change(self._on_network_change),
        ]

    # ================================================================
    # Public API
    # ================================================================

    async def authenticate(self) -> AuthResult:
        """Prove wallet ownership and exchange it for a session token."""
        return await self._run(AttemptKind.LOGIN)

    async def link_wallet(self) -> AuthResult:
        """Link the connected wallet to the current account."""
        return await self._run(AttemptKind.LINK)

    def state(self, kind: AttemptKind = AttemptKind.LOGIN) -> AuthState:
        """Visible state for an attempt kind."""
        return self._states[kind]

    def current_session(self) -> Optional[WalletSession]:
        return self.connector.current_session()

    def subscribe_state(self, handler: StateHandler) -> Subscription:
        """Register handler receiving (kind, state) on every transition."""
        return self._state_events.subscribe(handler)

    def close(self) -> None:
        """Cancel in-flight attempts and drop connector subscriptions."""
        for task in list(self._in_flight.values()):
            task.cancel()
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []
        self._state_events.clear()

    # ================================================================
    # Attempt scheduling
    # ================================================================

    async def _run(self, kind: AttemptKind) -> AuthResult:
        self._loop = asyncio.get_running_loop()

        running = self._in_flight.get(kind)
        if running is not None and not running.done():
            if self.policy == POLICY_REJECT:
                error = AttemptInProgressError(kind.value)
                self._log_warning(f"{StateEmoji.FAILED} [{kind.value}] {error.message}")
                self._record_outcome(kind, error.reason.value)
                return AuthResult.fail(error.message, error.reason)

            self._log_info(
                f"{StateEmoji.JOINED} [{kind.value}] Joining in-flight attempt",
                verbose_level=2,
            )
            return await self._await_attempt(running)

        attempt = AuthAttempt(kind)
        attempt.on_transition(self._publish)
        task = asyncio.ensure_future(self._execute(attempt))
        self._attempts[kind] = attempt
        self._in_flight[kind] = task
        task.add_done_callback(lambda t: self._finish(kind, t))
        return await self._await_attempt(task)

    async def _await_attempt(self, task: "asyncio.Task[AuthResult]") -> AuthResult:
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            # Cancelled before its first step ran
            error = AttemptCancelledError()
            return AuthResult.fail(error.message, error.reason)

    def _finish(self, kind: AttemptKind, task: "asyncio.Task[AuthResult]") -> None:
        if self._in_flight.get(kind) is task:
            del self._in_flight[kind]

    async def _execute(self, attempt: AuthAttempt) -> AuthResult:
        kind = attempt.kind
        phase = PHASE_CONNECT
        result: Optional[AuthResult] = None

        if self.metrics_enabled:
            auth_attempts_in_flight.labels(kind=kind.value).inc()

        try:
            if not self.connector.is_provider_installed():
                raise ProviderUnavailableError(self.connector.provider.name)

            session = self.connector.current_session()
            if session is None or not session.connected:
                attempt.transition(AuthStep.CONNECTING)
                await self._guard(attempt, self.connector.connect())
                # Events may land between connect returning and this resume
                session = self.connector.current_session()
                if session is None:
                    raise SessionChangedError("account")

            attempt.bind(session)
            attempt.transition(AuthStep.AWAITING_SIGNATURE)

            phase = PHASE_SIGN
            challenge = self.challenge_builder.build(session.address, kind.purpose)
            attempt.challenge = challenge
            proof = await self._guard(attempt, self.connector.sign(challenge))
            self._check_abort(attempt)

            phase = PHASE_VERIFY
            self.challenge_builder.redeem(proof)
            attempt.transition(AuthStep.VERIFYING)
            request = VerificationRequest.from_proof(session, proof)

            token: Optional[str] = None
            if kind is AttemptKind.LOGIN:
                credential = await self._guard(
                    attempt, self.verification_client.verify_login(request)
                )
                self._check_abort(attempt)
                await self.session_store.set(credential)
                token = credential.token
            else:
                await self._guard(attempt, self.verification_client.verify_link(request))
                self._check_abort(attempt)

            attempt.transition(AuthStep.AUTHENTICATED)
            result = AuthResult.ok(token)
            return result

        except asyncio.CancelledError:
            result = self._fail(attempt, phase, AttemptCancelledError())
            return result

        except Exception as e:
            result = self._fail(attempt, phase, e)
            return result

        finally:
            if self.metrics_enabled:
                auth_attempts_in_flight.labels(kind=kind.value).dec()
                if result is not None:
                    outcome = "success" if result.success else result.reason.value
                    self._record_outcome(kind, outcome)
                    auth_attempt_duration_seconds.labels(kind=kind.value).observe(
                        attempt.duration_seconds
                    )

    # ================================================================
    # Abort handling
    # ================================================================

    async def _guard(self, attempt: AuthAttempt, call: Awaitable[Any]) -> Any:
        """Await call unless the attempt is aborted first."""
        if attempt.aborted:
            if asyncio.iscoroutine(call):
                call.close()
            raise SessionChangedError(attempt.abort_cause or "account")

        work = asyncio.ensure_future(call)
        abort = asyncio.ensure_future(attempt.wait_aborted())
        try:
            done, _ = await asyncio.wait(
                {work, abort}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            work.cancel()
            abort.cancel()
            raise

        if work in done:
            abort.cancel()
            return work.result()

        work.cancel()
        work.add_done_callback(_consume_result)
        raise SessionChangedError(attempt.abort_cause or "account")

    @staticmethod
    def _check_abort(attempt: AuthAttempt) -> None:
        if attempt.aborted:
            raise SessionChangedError(attempt.abort_cause or "account")

    def _on_account_change(
        self, previous: Optional[WalletSession], current: Optional[WalletSession]
    ) -> None:
        for attempt in self._live_attempts():
            if attempt.session is None:
                continue
            if (
                current is not None
                and attempt.session.address == current.address
                and attempt.session.public_key == current.public_key
            ):
                continue
            self._abort(attempt, "account")

    def _on_network_change(
        self, previous: Optional[WalletSession], current: Optional[WalletSession]
    ) -> None:
        for attempt in self._live_attempts():
            if attempt.session is not None:
                self._abort(attempt, "network")

    def _live_attempts(self) -> List[AuthAttempt]:
        return [
            attempt
            for kind, attempt in list(self._attempts.items())
            if kind in self._in_flight and not attempt.state.is_terminal
        ]

    def _abort(self, attempt: AuthAttempt, cause: str) -> None:
        self._log_warning(
            f"{StateEmoji.ABORTED} [{attempt.kind.value}] Wallet {cause} changed, "
            f"aborting attempt {attempt.id}"
        )
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if self._loop is not None and running is not self._loop:
            self._loop.call_soon_threadsafe(attempt.abort, cause)
        else:
            attempt.abort(cause)

    # ================================================================
    # Failure classification
    # ================================================================

    def _fail(self, attempt: AuthAttempt, phase: str, error: Exception) -> AuthResult:
        reason, message = self._classify(attempt, phase, error)

        if attempt.challenge is not None:
            self.challenge_builder.discard(attempt.challenge.nonce)

        attempt.fail(reason)
        if reason in (FailureReason.SESSION_CHANGED, FailureReason.CANCELLED):
            attempt.transition(AuthStep.IDLE)

        if isinstance(error, SceauException):
            self._log_warning(
                f"{StateEmoji.FAILED} [{attempt.kind.value}] {reason.value}: {message}"
            )
        else:
            self._log_error(
                f"{ErrorEmoji.ERROR} [{attempt.kind.value}] Unexpected error "
                f"during {phase}: {error!r}"
            )
        return AuthResult.fail(message, reason)

    def _classify(
        self, attempt: AuthAttempt, phase: str, error: Exception
    ) -> Tuple[FailureReason, str]:
        generic = GENERIC_ERRORS[attempt.kind]

        if isinstance(error, AttemptCancelledError):
            return FailureReason.CANCELLED, error.message

        if attempt.aborted or isinstance(error, SessionChangedError):
            changed = SessionChangedError(attempt.abort_cause or "account")
            return FailureReason.SESSION_CHANGED, changed.message

        message = error.message if isinstance(error, SceauException) else generic
        message = message or generic

        if isinstance(error, ProviderUnavailableError):
            return FailureReason.PROVIDER_UNAVAILABLE, message

        if phase == PHASE_CONNECT:
            if isinstance(error, ConnectTimeoutError):
                return FailureReason.CONNECT_TIMEOUT, message
            return FailureReason.CONNECT_FAILED, message

        if phase == PHASE_SIGN:
            return FailureReason.SIGNATURE_REJECTED, message

        if isinstance(error, NetworkError):
            return FailureReason.NETWORK_ERROR, message
        return FailureReason.VERIFICATION_REJECTED, message

    # ================================================================
    # Observation
    # ================================================================

    def _publish(self, attempt: AuthAttempt) -> None:
        previous = attempt.history[-1] if attempt.history else AuthState.idle()
        self._states[attempt.kind] = attempt.state
        self._log_info(
            f"{StateEmoji.TRANSITION} [{attempt.kind.value}] "
            f"{previous} -> {attempt.state}",
            verbose_level=2,
        )
        self._state_events.emit(attempt.kind, attempt.state)

    def _record_outcome(self, kind: AttemptKind, outcome: str) -> None:
        if self.metrics_enabled:
            auth_attempts_total.labels(kind=kind.value, outcome=outcome).inc()

    def _log_info(self, msg: str, verbose_level: int = 1) -> None:
        if self.reporter:
            self.reporter.info(msg, context="AuthOrchestrator", verbose_level=verbose_level)

    def _log_warning(self, msg: str) -> None:
        if self.reporter:
            self.reporter.warning(msg, context="AuthOrchestrator")

    def _log_error(self, msg: str) -> None:
        if self.reporter:
            self.reporter.error(msg, context="AuthOrchestrator")


def _consume_result(task: "asyncio.Future[Any]") -> None:
    """Retrieve a discarded call's outcome so it is not reported as lost."""
    if not task.cancelled():
        task.exception()
