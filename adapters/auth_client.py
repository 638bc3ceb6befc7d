"""
Auth adapter for the hosted backend (``/auth/v1``).

Holds the signed-in session in a ``SessionStore`` (optionally persisted to a
JSON file, the way the browser SDK keeps it in local storage) and notifies
subscribers of sign-in, sign-out and token refresh.
"""

from pathlib import Path
from typing import Awaitable, Callable, List, Optional
from urllib.parse import urlencode
import logging

from pydantic import ValidationError

from adapters.backend_client import BackendClientProvider, BackendResult, to_result
from adapters.resilience import RetryPolicy, resilient_call
from app.exceptions import BackendError
from domain.enums import AuthEvent
from domain.schemas.profile_schemas import AuthSession, AuthUser

logger = logging.getLogger("cooksmart.auth")

AuthListener = Callable[[AuthEvent, Optional[AuthSession]], Awaitable[None]]


class SessionStore:
    """The current session, kept in memory and mirrored to ``path`` if set."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        self._session: Optional[AuthSession] = None
        self._loaded = False

    def load(self) -> Optional[AuthSession]:
        if self._loaded:
            return self._session
        self._loaded = True
        if self.path is None or not self.path.exists():
            return None
        try:
            self._session = AuthSession.model_validate_json(self.path.read_text("utf-8"))
        except (OSError, ValidationError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            self._session = None
        return self._session

    @property
    def session(self) -> Optional[AuthSession]:
        return self.load()

    def save(self, session: AuthSession) -> None:
        self._session = session
        self._loaded = True
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(session.model_dump_json(), "utf-8")

    def clear(self) -> None:
        self._session = None
        self._loaded = True
        if self.path is not None and self.path.exists():
            self.path.unlink()

    def access_token(self) -> Optional[str]:
        session = self.session
        return session.access_token if session else None


class AuthClient:
    def __init__(
        self,
        provider: BackendClientProvider,
        store: SessionStore,
        policy: RetryPolicy = RetryPolicy(),
    ):
        self.provider = provider
        self.store = store
        self.policy = policy
        self._listeners: List[AuthListener] = []

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """Subscribe to auth events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _emit(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        logger.info("Auth event %s", event.value)
        for listener in list(self._listeners):
            try:
                await listener(event, session)
            except Exception:
                logger.exception("Auth listener failed on %s", event.value)

    # ------------------------------------------------------------------
    # Remote calls
    # ------------------------------------------------------------------
    async def _call(self, name: str, method: str, path: str, **kwargs) -> BackendResult:
        async def operation():
            response = await self.provider.current.send(method, f"/auth/v1{path}", **kwargs)
            return to_result(response)

        return await resilient_call(
            operation, self.policy, self.provider.reinitialize, name=f"auth.{name}"
        )

    async def _session_result(self, result: BackendResult, event: AuthEvent) -> BackendResult:
        if not result.ok:
            return result
        try:
            session = AuthSession.model_validate(result.data)
        except ValidationError as exc:
            return BackendResult(error=BackendError(f"Malformed session response: {exc}"))
        self.store.save(session)
        await self._emit(event, session)
        return BackendResult(data=session)

    async def sign_in_with_password(self, email: str, password: str) -> BackendResult:
        result = await self._call(
            "sign_in",
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return await self._session_result(result, AuthEvent.SIGNED_IN)

    async def sign_up(self, email: str, password: str, display_name: str) -> BackendResult:
        """Register; ``data`` is the session when the backend confirms at once, else the user."""
        result = await self._call(
            "sign_up",
            "POST",
            "/signup",
            json={
                "email": email,
                "password": password,
                "data": {"display_name": display_name},
            },
        )
        if not result.ok:
            return result
        body = result.data or {}
        if isinstance(body, dict) and body.get("access_token"):
            return await self._session_result(result, AuthEvent.SIGNED_IN)
        user_body = body.get("user", body) if isinstance(body, dict) else body
        try:
            return BackendResult(data=AuthUser.model_validate(user_body))
        except ValidationError as exc:
            return BackendResult(error=BackendError(f"Malformed sign-up response: {exc}"))

    async def sign_out(self) -> BackendResult:
        """Revoke the session remotely and always clear it locally."""
        token = self.store.access_token()
        result = BackendResult()
        if token:
            result = await self._call("sign_out", "POST", "/logout", access_token=token)
            if not result.ok:
                logger.warning("Remote sign-out failed: %s", result.error)
        self.store.clear()
        await self._emit(AuthEvent.SIGNED_OUT, None)
        return result

    async def clear_local_session(self) -> None:
        self.store.clear()
        await self._emit(AuthEvent.SIGNED_OUT, None)

    def get_session(self) -> Optional[AuthSession]:
        return self.store.session

    async def get_user(self, access_token: Optional[str] = None) -> BackendResult:
        """Ask the backend who the token belongs to; fails for revoked or expired tokens."""
        token = access_token or self.store.access_token()
        if not token:
            return BackendResult(
                error=BackendError("No session", code="no_session", status=401)
            )
        result = await self._call("get_user", "GET", "/user", access_token=token)
        if not result.ok:
            return result
        try:
            return BackendResult(data=AuthUser.model_validate(result.data))
        except ValidationError as exc:
            return BackendResult(error=BackendError(f"Malformed user response: {exc}"))

    async def refresh_session(self) -> BackendResult:
        session = self.store.session
        if session is None or not session.refresh_token:
            return BackendResult(
                error=BackendError("No refresh token", code="no_session", status=401)
            )
        result = await self._call(
            "refresh",
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": session.refresh_token},
        )
        return await self._session_result(result, AuthEvent.TOKEN_REFRESHED)

    def oauth_sign_in_url(self, provider: str, redirect_to: str) -> str:
        """URL the browser is sent to for redirect-based OAuth sign-in."""
        query = urlencode({"provider": provider, "redirect_to": redirect_to})
        return f"{self.provider.current.base_url}/auth/v1/authorize?{query}"

    async def notify_user_updated(self) -> None:
        await self._emit(AuthEvent.USER_UPDATED, self.store.session)
