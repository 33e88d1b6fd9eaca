# app/core/security.py
import uuid
from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import jwt, JWTError

from app.core.config import settings

ADMIN_TOKEN = "admin"
ADMIN_REFRESH_TOKEN = "admin_refresh"
USER_TOKEN = "user"
PASSWORD_RESET_TOKEN = "password_reset"


class TokenError(Exception):
    """Raised when a token cannot be decoded or has the wrong type."""


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Constant-time comparison of a password against a stored bcrypt hash."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def get_expiry_date(
    minutes: Optional[int] = None, days: Optional[int] = None
) -> datetime:
    """
    Calculate an expiry date from now.
    """
    return datetime.now(timezone.utc) + timedelta(minutes=minutes or 0, days=days or 0)


def _encode(claims: Dict[str, Any], secret: str, expires_at: datetime) -> str:
    payload = {
        **claims,
        "iat": datetime.now(timezone.utc),
        "exp": expires_at,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, expected_type: str, secret: Optional[str] = None) -> Dict[str, Any]:
    """
    Decode and validate a signed token.
    Raises TokenError on a bad signature, expiry, issuer/audience mismatch or type mismatch.
    """
    try:
        payload = jwt.decode(
            token,
            secret or settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError as e:
        raise TokenError(str(e)) from e

    if payload.get("type") != expected_type:
        raise TokenError(f"Expected a {expected_type} token")
    if "sub" not in payload:
        raise TokenError("Token has no subject")
    return payload


def create_admin_tokens(admin) -> Dict[str, str]:
    """Issue the short-lived access token and the long-lived refresh token for an admin."""
    access_token = _encode(
        {
            "sub": str(admin.id),
            "email": admin.email,
            "username": admin.username,
            "type": ADMIN_TOKEN,
        },
        settings.JWT_SECRET,
        get_expiry_date(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    refresh_token = _encode(
        {"sub": str(admin.id), "type": ADMIN_REFRESH_TOKEN},
        settings.JWT_REFRESH_SECRET,
        get_expiry_date(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )
    return {"accessToken": access_token, "refreshToken": refresh_token}


def create_user_token(user) -> str:
    return _encode(
        {"sub": str(user.id), "email": user.email, "type": USER_TOKEN},
        settings.JWT_SECRET,
        get_expiry_date(days=settings.USER_TOKEN_EXPIRE_DAYS),
    )


def create_password_reset_token(account_id: int, scope: str) -> str:
    """
    Reset tokens embed the account id and the account kind ("user" or "admin")
    so a user token can never complete an admin reset.
    """
    return _encode(
        {"sub": str(account_id), "scope": scope, "type": PASSWORD_RESET_TOKEN},
        settings.JWT_SECRET,
        get_expiry_date(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES),
    )
