"""Password sign-in and token validation.

When a password is configured, task routes require a ``token`` cookie
holding a JWT issued by ``POST /api/signin``. The token carries a salted
hash of the password it was issued for, so changing the password revokes
every token issued before.
"""

import base64
import hashlib
import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import Settings
from .dependencies import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

JWT_ALGORITHM = "HS256"
TOKEN_COOKIE = "token"


class SigninRequest(BaseModel):
    password: str = ""


def make_password_hash(password: str, salt: str) -> str:
    """URL-safe base64 (unpadded) SHA-256 of password + salt."""
    digest = hashlib.sha256((password + salt).encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def make_token(password: str, settings: Settings) -> str:
    """Issue a signed token for the given password."""
    if not password:
        raise ValueError("Cannot issue a token for an empty password")

    now = datetime.now(timezone.utc)
    payload = {
        "pwdhash": make_password_hash(password, settings.password_salt),
        "iat": now,
        "exp": now + timedelta(hours=settings.token_ttl_hours)
    }
    return jwt.encode(payload, settings.token_secret, algorithm=JWT_ALGORITHM)


def validate_token(token: str, password: str, settings: Settings) -> bool:
    """Check signature, expiry and that the token was issued for the current password."""
    try:
        payload = jwt.decode(token, settings.token_secret, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected token: {e}")
        return False

    return payload.get("pwdhash") == make_password_hash(password, settings.password_salt)


def require_auth(request: Request, settings: Settings = Depends(get_settings)):
    """Dependency guarding task routes; a no-op while no password is configured."""
    if not settings.password:
        return

    token = request.cookies.get(TOKEN_COOKIE)
    if not token or not validate_token(token, settings.password, settings):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )


@router.post("/signin")
async def signin(credentials: SigninRequest, settings: Settings = Depends(get_settings)):
    """
    Exchange the configured password for a token.

    **Responses:**
    - 200: `{"token": ...}`, or `{"error": ...}` when no password is configured
    - 400: Malformed JSON body
    - 401: Wrong password
    """
    if not settings.password:
        return JSONResponse({"error": "Password is not set (TODO_PASSWORD is empty)"})

    if credentials.password != settings.password:
        logger.warning("Sign-in attempt with a wrong password")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Wrong password")

    return {"token": make_token(settings.password, settings)}
