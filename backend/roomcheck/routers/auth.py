"""Auth router - owner sign-up, sign-in and sign-out."""

import logging

from fastapi import APIRouter, Depends, status
from firebase_admin import exceptions as firebase_exceptions

from roomcheck.core.exceptions import AuthFailed
from roomcheck.core.security import AuthenticatedUser, get_current_user
from roomcheck.schemas.auth import (
    AuthSessionResponse,
    CurrentUserResponse,
    SignInRequest,
    SignUpRequest,
)
from roomcheck.schemas.base import MessageResponse
from roomcheck.services.identity import FirebaseIdentityClient, get_identity_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-up", response_model=AuthSessionResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    data: SignUpRequest,
    identity: FirebaseIdentityClient = Depends(get_identity_client),
):
    """Create an owner account and return its session."""
    session = await identity.sign_up(data.email, data.password)
    return AuthSessionResponse.model_validate(session)


@router.post("/sign-in", response_model=AuthSessionResponse)
async def sign_in(
    data: SignInRequest,
    identity: FirebaseIdentityClient = Depends(get_identity_client),
):
    session = await identity.sign_in(data.email, data.password)
    return AuthSessionResponse.model_validate(session)


@router.post("/sign-out", response_model=MessageResponse)
async def sign_out(
    current_user: AuthenticatedUser = Depends(get_current_user),
    identity: FirebaseIdentityClient = Depends(get_identity_client),
):
    """Revoke the owner's refresh tokens. Existing ID tokens stop verifying."""
    try:
        await identity.sign_out(current_user.uid)
    except firebase_exceptions.FirebaseError as e:
        logger.error(f"[AUTH] Sign-out failed for {current_user.uid}: {e}")
        raise AuthFailed("Sign-out failed.") from e
    return MessageResponse(message="Signed out")


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Get current user info."""
    return CurrentUserResponse(
        uid=current_user.uid,
        email=current_user.email,
        email_verified=current_user.email_verified,
    )
