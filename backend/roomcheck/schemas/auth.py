"""Auth schemas."""

from pydantic import EmailStr, Field

from roomcheck.schemas.base import BaseSchema


class SignUpRequest(BaseSchema):
    """Create an owner account with email and password."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class SignInRequest(BaseSchema):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class AuthSessionResponse(BaseSchema):
    """Firebase session returned after sign-up or sign-in."""

    uid: str
    email: str
    id_token: str
    refresh_token: str
    expires_in: int


class CurrentUserResponse(BaseSchema):
    """Current authenticated user info."""

    uid: str
    email: str | None = None
    email_verified: bool = False
