# app/middleware/auth.py
from typing import Optional

from fastapi import Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.admin import AdminUser
from app.models.user import User
from app.core.logging import logger
from app.core.responses import ApiError
from app.core.security import ADMIN_TOKEN, USER_TOKEN, TokenError, decode_token

BEARER = HTTPBearer(auto_error=False)


def unauthorized(detail: str = "Authentication required") -> ApiError:
    return ApiError(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        error="UNAUTHORIZED",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _subject(credentials: Optional[HTTPAuthorizationCredentials], token_type: str) -> int:
    """
    Validate the bearer token and return the account id it was issued for
    """
    if credentials is None or not credentials.credentials:
        logger.warning("Bearer token missing from request")
        raise unauthorized()

    try:
        payload = decode_token(credentials.credentials, token_type)
        return int(payload["sub"])
    except (TokenError, ValueError) as e:
        logger.warning(f"Rejected {token_type} token: {e}")
        raise unauthorized("Invalid or expired token")


def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(BEARER),
    db: Session = Depends(get_db),
) -> AdminUser:
    """
    Resolve the admin behind an access token
    """
    admin_id = _subject(credentials, ADMIN_TOKEN)
    admin = db.query(AdminUser).filter(AdminUser.id == admin_id).first()

    if not admin or not admin.is_active:
        logger.warning(f"Token presented for missing or inactive admin: {admin_id}")
        raise unauthorized("Admin account not found or inactive")

    return admin


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(BEARER),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the storefront user behind a user token
    """
    user_id = _subject(credentials, USER_TOKEN)
    user = db.query(User).filter(User.id == user_id).first()

    if not user or not user.is_active:
        logger.warning(f"Token presented for missing or inactive user: {user_id}")
        raise unauthorized("User not found or inactive")

    return user
