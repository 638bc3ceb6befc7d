"""
Session service - who is signed in, and keeping that knowledge fresh.

One instance per process.  It listens to auth events, keeps the current user
and profile, re-validates the session periodically, and recovers the
backend connection when the client comes back to the foreground.
"""

from typing import Any, Callable, Dict, Optional
import logging

import anyio

from adapters.auth_client import AuthClient
from adapters.backend_client import BackendClientProvider
from app.exceptions import BackendError
from domain.enums import AuthEvent, SessionState
from domain.schemas.profile_schemas import (
    AuthSession,
    AuthUser,
    Profile,
    ProfileUpdate,
    SessionStatus,
)
from domain.schemas.results import ServiceResult
from services.profile_service import ProfileService

logger = logging.getLogger("cooksmart.session")


class SessionService:
    def __init__(
        self,
        auth: AuthClient,
        profiles: ProfileService,
        provider: BackendClientProvider,
        check_interval: float = 600.0,
        probe_timeout: float = 3.0,
        oauth_provider: str = "google",
        oauth_redirect_url: str = "",
    ):
        self.auth = auth
        self.profiles = profiles
        self.provider = provider
        self.check_interval = check_interval
        self.probe_timeout = probe_timeout
        self.oauth_provider = oauth_provider
        self.oauth_redirect_url = oauth_redirect_url

        self.state = SessionState.UNINITIALIZED
        self.current_user: Optional[AuthUser] = None
        self.current_profile: Optional[Profile] = None
        self._ready = False
        self._ready_event: Optional[anyio.Event] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED and self.current_user is not None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and bool(self.current_profile and self.current_profile.is_admin)

    @property
    def current_user_id(self) -> Optional[str]:
        return self.current_user.id if self.is_authenticated else None

    def status(self) -> SessionStatus:
        return SessionStatus(
            state=self.state,
            user=self.current_user,
            profile=self.current_profile,
            is_authenticated=self.is_authenticated,
            is_admin=self.is_admin,
        )

    def _mark_ready(self) -> None:
        self._ready = True
        if self._ready_event is not None:
            self._ready_event.set()

    async def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the initial session check has finished."""
        if self._ready:
            return True
        if self._ready_event is None:
            self._ready_event = anyio.Event()
        with anyio.move_on_after(timeout):
            await self._ready_event.wait()
        return self._ready

    async def _set_user(self, user: AuthUser) -> None:
        """Become authenticated as ``user``.

        A profile fetch failure leaves the user signed in without a profile.
        """
        same_user = self.current_user is not None and self.current_user.id == user.id
        self.current_user = user
        self.state = SessionState.AUTHENTICATED
        if not same_user or self.current_profile is None:
            self.current_profile = await self.profiles.get_profile(user.id)

    def _clear_user(self) -> None:
        self.current_user = None
        self.current_profile = None
        self.state = SessionState.ANONYMOUS

    async def _handle_auth_event(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        if event in (AuthEvent.SIGNED_IN, AuthEvent.TOKEN_REFRESHED) and session is not None:
            await self._set_user(session.user)
        elif event == AuthEvent.SIGNED_OUT:
            self._clear_user()
        elif event == AuthEvent.USER_UPDATED and self.current_user is not None:
            self.current_profile = await self.profiles.get_profile(self.current_user.id)

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------
    async def initialize(self) -> None:
        """Restore a stored session and subscribe to auth events.

        Raises ``BackendError`` when the backend cannot be reached so the
        caller can retry; ``mark_anonymous`` gives up on restoring.
        """
        if self._unsubscribe is None:
            self._unsubscribe = self.auth.on_auth_state_change(self._handle_auth_event)
        self.state = SessionState.LOADING

        user = await self._restore_user()
        if user is not None:
            await self._set_user(user)
            logger.info(f"session_restored user_id={user.id}")
        else:
            self._clear_user()
        self._mark_ready()

    async def _restore_user(self) -> Optional[AuthUser]:
        if self.auth.get_session() is None:
            return None
        result = await self.auth.get_user()
        if result.ok:
            return result.data
        if result.error.is_transient:
            raise result.error

        refreshed = await self.auth.refresh_session()
        if refreshed.ok:
            return refreshed.data.user
        if refreshed.error.is_transient:
            raise refreshed.error
        logger.info("Stored session is no longer valid, discarding it")
        self.auth.store.clear()
        return None

    def mark_anonymous(self) -> None:
        """Finish startup without a user after restoring failed."""
        self._clear_user()
        self._mark_ready()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # ------------------------------------------------------------------
    # Sign in / out
    # ------------------------------------------------------------------
    async def sign_in(self, email: str, password: str) -> ServiceResult:
        result = await self.auth.sign_in_with_password(email, password)
        if not result.ok:
            logger.warning(f"sign_in_failed email={email}: {result.error}")
            return ServiceResult.from_error(result.error)
        return ServiceResult.ok(self.status())

    async def sign_up(self, email: str, password: str, display_name: str) -> ServiceResult:
        result = await self.auth.sign_up(email, password, display_name)
        if not result.ok:
            return ServiceResult.from_error(result.error)
        confirmation_required = not isinstance(result.data, AuthSession)
        return ServiceResult.ok(
            {"confirmation_required": confirmation_required, "session": self.status()}
        )

    async def sign_out(self) -> ServiceResult:
        result = await self.auth.sign_out()
        if not result.ok:
            # Already cleared locally; the remote token just outlives us
            return ServiceResult.ok({"remote_sign_out": False})
        return ServiceResult.ok({"remote_sign_out": True})

    def oauth_url(self, provider: Optional[str] = None, redirect_to: Optional[str] = None) -> str:
        return self.auth.oauth_sign_in_url(
            provider or self.oauth_provider, redirect_to or self.oauth_redirect_url
        )

    async def update_profile(self, updates: ProfileUpdate) -> ServiceResult:
        if not self.is_authenticated:
            return ServiceResult.fail("No user logged in", code="NOT_AUTHENTICATED", http_status=401)
        result = await self.profiles.update_profile(self.current_user.id, updates)
        if result.success:
            self.current_profile = result.data
        return result

    async def upload_avatar(
        self, filename: str, content: bytes, content_type: Optional[str] = None
    ) -> ServiceResult:
        if not self.is_authenticated:
            return ServiceResult.fail("No user logged in", code="NOT_AUTHENTICATED", http_status=401)
        result = await self.profiles.upload_avatar(
            self.current_user.id, filename, content, content_type
        )
        if result.success:
            self.current_profile = result.data
        return result

    # ------------------------------------------------------------------
    # Keeping the session fresh
    # ------------------------------------------------------------------
    async def validate_session(self) -> bool:
        """Check the stored token with the backend.

        Tries one refresh when the token is rejected, and signs out locally
        when that fails too.  Network trouble during either call is not
        treated as invalid.
        """
        if self.auth.get_session() is None:
            if self.is_authenticated:
                self._clear_user()
            return False

        result = await self.auth.get_user()
        if result.ok:
            await self._set_user(result.data)
            return True
        if result.error.is_transient:
            logger.warning(f"Session check inconclusive: {result.error}")
            return self.is_authenticated

        refreshed = await self.auth.refresh_session()
        if refreshed.ok:
            return True
        if refreshed.error.is_transient:
            logger.warning(f"Session refresh inconclusive: {refreshed.error}")
            return self.is_authenticated

        logger.info("Session invalid, signing out locally")
        await self.auth.clear_local_session()
        return False

    async def run_monitor(self) -> None:
        """Re-validate the session every ``check_interval`` seconds until cancelled."""
        logger.info(f"Session monitor started (interval={self.check_interval}s)")
        while True:
            await anyio.sleep(self.check_interval)
            if not self.is_authenticated:
                continue
            try:
                await self.validate_session()
            except Exception:
                logger.exception("Periodic session check failed")

    async def handle_visibility_change(self, visible: bool) -> Dict[str, Any]:
        """Probe the connection when the client returns to the foreground.

        A probe that times out or cannot connect means the connection went
        stale while hidden: the backend client is recreated before the
        session is re-validated.
        """
        outcome: Dict[str, Any] = {"probed": False, "reconnected": False, "session_valid": None}
        if not visible:
            return outcome

        outcome["probed"] = True
        try:
            await self.profiles.probe(self.probe_timeout)
        except BackendError as exc:
            if not exc.is_transient:
                # The backend answered, so the connection itself is alive
                logger.warning(f"Foreground probe failed: {exc}")
            else:
                logger.warning(f"Connection lost after returning to foreground: {exc}")
                await self.provider.reinitialize()
                outcome["reconnected"] = True

        if self.is_authenticated:
            outcome["session_valid"] = await self.validate_session()
        return outcome
