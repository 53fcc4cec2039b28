"""
Authorization gate.

One gate guards one mounted route. It starts in LOADING, reads the session,
resolves the role and settles in one of the terminal states. Every
session-change event restarts it at LOADING; the newest evaluation always
wins, and nothing is applied after unmount.
"""

import asyncio
import logging
from typing import Callable, Iterable, Optional, Union

from modules.identity.interfaces import IExternalIdentityProvider
from modules.roles.exceptions import IdentityConflictError
from modules.roles.interfaces import IRoleResolver
from modules.roles.models import RiderStatus, Role, RoleResolution

from .interfaces import ISessionSource
from .models import (
    AuthState,
    GateAction,
    GateDecision,
    GateStatus,
    GateUser,
)
from .paths import RoutePaths

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("haazir.security.audit")

BLOCKED_REASON = "Your account has been blocked. Please contact support."
REJECTED_REASON = "Your rider application has been rejected."
REGISTRATION_REASON = "Please complete your rider registration."


def authorization_role(role: Role) -> Role:
    """Business accounts are admin-managed and browse as customers."""
    return Role.CUSTOMER if role is Role.BUSINESS else role


class AuthorizationGate:
    """
    Route guard state machine.

    Usage:
        gate = AuthorizationGate(sessions, resolver, ["rider"], "/rider-dashboard")
        await gate.mount()
        decision = gate.decide()
        ...
        gate.unmount()
    """

    def __init__(
        self,
        sessions: ISessionSource,
        resolver: IRoleResolver,
        allowed_roles: Iterable[Union[Role, str]],
        requested_path: str,
        paths: Optional[RoutePaths] = None,
        redirect_to: Optional[str] = None,
        external: Optional[IExternalIdentityProvider] = None,
        on_state_change: Optional[Callable[[AuthState], None]] = None,
    ):
        self._sessions = sessions
        self._resolver = resolver
        self._allowed = frozenset(Role(role) for role in allowed_roles)
        self._requested_path = requested_path
        self._paths = paths or RoutePaths.from_settings()
        self._redirect_to = redirect_to
        self._external = external
        self._on_state_change = on_state_change

        self._state = AuthState.initial()
        self._generation = 0
        self._mounted = False
        self._task: Optional[asyncio.Task] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def mounted(self) -> bool:
        return self._mounted

    async def mount(self) -> AuthState:
        """Subscribe to session changes and run the first evaluation."""
        self._mounted = True
        self._unsubscribe = self._sessions.on_session_change(self._on_session_change)
        self.restart()
        return await self.settled()

    async def settled(self) -> AuthState:
        """Wait until the latest evaluation has been applied (or dropped)."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self._state

    def unmount(self) -> None:
        """Stop listening and drop any in-flight evaluation."""
        self._mounted = False
        self._generation += 1
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def restart(self) -> "asyncio.Task[None]":
        """
        Restart the machine at LOADING and evaluate in the background.

        Any evaluation still in flight is cancelled, so a stale result can
        neither land nor keep sleeping through retry backoff.
        """
        self._generation += 1
        generation = self._generation
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._apply(AuthState.initial(), generation)
        self._task = asyncio.get_running_loop().create_task(self._run(generation))
        return self._task

    def _on_session_change(self, event: str) -> None:
        if not self._mounted:
            return
        logger.debug(f"Session change ({event}) on {self._requested_path}, re-checking access")
        self.restart()

    async def _run(self, generation: int) -> None:
        state = await self.evaluate()
        self._apply(state, generation)

    def _apply(self, state: AuthState, generation: int) -> None:
        if not self._mounted or generation != self._generation:
            logger.debug(f"Dropping stale gate state {state.status.value} for {self._requested_path}")
            return
        self._state = state
        if self._on_state_change is not None:
            self._on_state_change(state)

    async def evaluate(self) -> AuthState:
        """
        Run one pass of the transition algorithm and return the terminal state.

        Does not touch the gate's own state; any failure fails closed to
        UNAUTHENTICATED.
        """
        try:
            session = await self._sessions.get_session()
            if session is None:
                return AuthState.unauthenticated()
            resolution = await self._resolver.resolve(session.user_id, session.identifier_hint)
        except IdentityConflictError as e:
            logger.warning(f"Identity conflict while guarding {self._requested_path}, signing out")
            await self._sign_out_everywhere()
            return AuthState.unauthenticated(error=e.message)
        except Exception as e:
            logger.exception(f"Access check for {self._requested_path} failed")
            return AuthState.unauthenticated(error=str(e) or "Authentication failed")

        return self._authorize(session.user_id, resolution)

    async def _sign_out_everywhere(self) -> None:
        """Each sign-out is attempted; a failed one never keeps the gate loading."""
        try:
            await self._sessions.sign_out()
        except Exception:
            logger.exception("Backend sign-out failed after identity conflict")
        if self._external is None:
            return
        try:
            await self._external.sign_out()
        except Exception:
            logger.exception("External sign-out failed after identity conflict")

    def _authorize(self, user_id: str, resolution: RoleResolution) -> AuthState:
        user = GateUser(
            id=user_id,
            role=resolution.role,
            is_blocked=resolution.is_blocked,
            rider_status=resolution.rider_status,
        )
        is_rider = resolution.role is Role.RIDER

        if resolution.is_blocked or (is_rider and resolution.rider_status is RiderStatus.REJECTED):
            rejected = is_rider and resolution.rider_status is RiderStatus.REJECTED
            return AuthState(
                status=GateStatus.BLOCKED,
                authenticated=True,
                user=user,
                error=REJECTED_REASON if rejected else BLOCKED_REASON,
            )

        if is_rider and (
            resolution.needs_registration or resolution.rider_status is RiderStatus.NONE
        ):
            return AuthState(
                status=GateStatus.NEEDS_REGISTRATION,
                authenticated=True,
                user=user,
                error=REGISTRATION_REASON,
            )

        role = authorization_role(resolution.role)
        if role in self._allowed:
            return AuthState(
                status=GateStatus.AUTHORIZED,
                authenticated=True,
                authorized=True,
                user=user,
            )

        audit_logger.warning(
            f"Unauthorized access attempt: user {user_id} with role "
            f"'{resolution.role.value}' tried to access {self._requested_path} "
            f"(allowed: {', '.join(sorted(r.value for r in self._allowed))})"
        )
        return AuthState(
            status=GateStatus.UNAUTHORIZED,
            authenticated=True,
            user=user,
            error="Insufficient permissions",
        )

    def decide(self, state: Optional[AuthState] = None) -> GateDecision:
        """Map a state to the render/redirect decision."""
        state = state or self._state

        if state.status is GateStatus.LOADING:
            return GateDecision(action=GateAction.SHOW_LOADING)
        if state.status is GateStatus.AUTHORIZED:
            return GateDecision(action=GateAction.RENDER)
        if state.status is GateStatus.UNAUTHENTICATED:
            return GateDecision(
                action=GateAction.REDIRECT,
                location=self._paths.login,
                reason=state.error,
                return_to=self._requested_path,
            )
        if state.status in (GateStatus.BLOCKED, GateStatus.NEEDS_REGISTRATION):
            return GateDecision(
                action=GateAction.REDIRECT,
                location=self._paths.account_status,
                reason=state.error,
            )

        # UNAUTHORIZED: send them to the dashboard for the role they actually have.
        if self._redirect_to:
            location = self._redirect_to
        elif state.user is not None:
            location = self._paths.home_for(state.user.role)
        else:
            location = self._paths.login
        return GateDecision(action=GateAction.REDIRECT, location=location, reason=state.error)
