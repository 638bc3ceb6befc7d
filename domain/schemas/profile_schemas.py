from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from datetime import datetime, timezone

from domain.enums import Language, SessionState, UserRole


class Profile(BaseModel):
    """A row of the ``profiles`` table; ``id`` is the auth user id."""

    model_config = {"from_attributes": True, "extra": "ignore"}

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: UserRole = UserRole.USER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = None


class AuthUser(BaseModel):
    model_config = {"extra": "ignore"}

    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None


class AuthSession(BaseModel):
    """Tokens issued by the auth endpoints."""

    model_config = {"extra": "ignore"}

    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    expires_at: Optional[int] = None
    user: AuthUser

    def model_post_init(self, __context):
        if self.expires_at is None and self.expires_in is not None:
            now = int(datetime.now(timezone.utc).timestamp())
            self.expires_at = now + self.expires_in

    def is_expired(self, now: Optional[float] = None, leeway: int = 10) -> bool:
        if self.expires_at is None:
            return False
        if now is None:
            now = datetime.now(timezone.utc).timestamp()
        return now >= self.expires_at - leeway


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6)


class SignUpRequest(SignInRequest):
    display_name: str = Field(..., min_length=1, max_length=100)


class SessionStatus(BaseModel):
    """What the UI needs to render the signed-in state."""

    state: SessionState
    user: Optional[AuthUser] = None
    profile: Optional[Profile] = None
    is_authenticated: bool = False
    is_admin: bool = False


class VisibilityChange(BaseModel):
    visible: bool


class LanguagePreference(BaseModel):
    language: Language
