"""Identity provider client (Firebase Authentication).

Sign-up and sign-in go through the Firebase Auth REST API with the project's
web API key. Sign-out revokes the user's refresh tokens through the Admin SDK,
so ID tokens issued before it stop verifying.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from firebase_admin import auth

from roomcheck.core.config import get_settings
from roomcheck.core.exceptions import AuthFailed, ConfigError
from roomcheck.core.firebase import get_firebase_app

logger = logging.getLogger(__name__)

# Firebase error codes mapped to messages safe to show the user
AUTH_ERROR_MESSAGES = {
    "EMAIL_EXISTS": "An account with this email already exists.",
    "EMAIL_NOT_FOUND": "Invalid email or password.",
    "INVALID_PASSWORD": "Invalid email or password.",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password.",
    "USER_DISABLED": "This account has been disabled.",
    "WEAK_PASSWORD": "Password should be at least 6 characters.",
    "INVALID_EMAIL": "Email address is not valid.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Try again later.",
}


@dataclass
class AuthSession:
    uid: str
    email: str
    id_token: str
    refresh_token: str
    expires_in: int


class FirebaseIdentityClient:
    """Wraps sign-up, sign-in and sign-out against Firebase Auth."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://identitytoolkit.googleapis.com/v1",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def sign_up(self, email: str, password: str) -> AuthSession:
        return await self._password_call("accounts:signUp", email, password)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        return await self._password_call("accounts:signInWithPassword", email, password)

    async def sign_out(self, uid: str) -> None:
        # Admin SDK calls block on the network
        await asyncio.to_thread(auth.revoke_refresh_tokens, uid, app=get_firebase_app())
        logger.info(f"[AUTH] Revoked refresh tokens for {uid}")

    async def _password_call(self, method: str, email: str, password: str) -> AuthSession:
        if not self.api_key:
            raise ConfigError("Firebase web API key is missing.")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/{method}",
                    params={"key": self.api_key},
                    json={"email": email, "password": password, "returnSecureToken": True},
                )
        except httpx.HTTPError as e:
            logger.error(f"[AUTH] {method} request error: {e}")
            raise AuthFailed(f"Authentication service unavailable: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.is_success:
            error = data.get("error")
            code = error.get("message", "") if isinstance(error, dict) else ""
            # Firebase appends details after " : ", e.g. "WEAK_PASSWORD : ..."
            code = str(code).split(" ")[0]
            logger.info(f"[AUTH] {method} rejected for {email}: {code}")
            raise AuthFailed(AUTH_ERROR_MESSAGES.get(code, "Authentication failed."))

        try:
            return AuthSession(
                uid=data["localId"],
                email=data.get("email", email),
                id_token=data["idToken"],
                refresh_token=data["refreshToken"],
                expires_in=int(data.get("expiresIn", 3600)),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"[AUTH] {method} returned an unexpected body: {e}")
            raise AuthFailed("Authentication failed.") from e


def get_identity_client() -> FirebaseIdentityClient:
    settings = get_settings()
    return FirebaseIdentityClient(
        api_key=settings.firebase_web_api_key,
        base_url=settings.firebase_auth_url,
        timeout=settings.http_timeout_seconds,
    )
