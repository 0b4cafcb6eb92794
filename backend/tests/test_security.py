import threading

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from firebase_admin import auth

from roomcheck.core import security
from roomcheck.services import identity
from roomcheck.services.identity import FirebaseIdentityClient


@pytest.fixture
def no_firebase_app(monkeypatch):
    monkeypatch.setattr(security, "get_firebase_app", lambda: None)
    monkeypatch.setattr(identity, "get_firebase_app", lambda: None)


def bearer(token: str = "id-token") -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.mark.asyncio
async def test_token_is_verified_off_the_event_loop(monkeypatch, no_firebase_app):
    calls = []

    def verify_id_token(token, app=None, check_revoked=False):
        calls.append((token, check_revoked, threading.current_thread()))
        return {"uid": "owner-1", "email": "owner@example.com", "email_verified": True}

    monkeypatch.setattr(auth, "verify_id_token", verify_id_token)

    user = await security.verify_firebase_token(bearer())

    assert user.uid == "owner-1"
    assert user.email_verified
    [(token, check_revoked, thread)] = calls
    assert (token, check_revoked) == ("id-token", True)
    assert thread is not threading.main_thread()


@pytest.mark.asyncio
async def test_revoked_token_is_rejected(monkeypatch, no_firebase_app):
    def verify_id_token(token, app=None, check_revoked=False):
        raise auth.RevokedIdTokenError("revoked")

    monkeypatch.setattr(auth, "verify_id_token", verify_id_token)

    with pytest.raises(HTTPException) as exc_info:
        await security.verify_firebase_token(bearer())
    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Token has been revoked"


@pytest.mark.asyncio
async def test_sign_out_revokes_off_the_event_loop(monkeypatch, no_firebase_app):
    calls = []

    def revoke_refresh_tokens(uid, app=None):
        calls.append((uid, threading.current_thread()))

    monkeypatch.setattr(auth, "revoke_refresh_tokens", revoke_refresh_tokens)

    await FirebaseIdentityClient("web-key").sign_out("owner-1")

    [(uid, thread)] = calls
    assert uid == "owner-1"
    assert thread is not threading.main_thread()
