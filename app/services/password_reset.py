# app/services/password_reset.py
import hashlib
import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional, Type

from fastapi import status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.logging import logger
from app.core.responses import ApiError
from app.core.security import (
    PASSWORD_RESET_TOKEN, TokenError, create_password_reset_token, decode_token, hash_password,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def invalid_reset_token() -> ApiError:
    return ApiError(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Invalid or expired reset token",
        error="INVALID_RESET_TOKEN",
    )


def initiate_reset(db: Session, model: Type, email: str, scope: str) -> Optional[str]:
    """
    Issue a reset token for the account with `email` and persist its digest.

    Returns None for unknown or inactive accounts; callers answer the same way
    in both cases so the endpoint cannot be used to probe for accounts.
    """
    account = db.query(model).filter(func.lower(model.email) == email.lower()).first()
    if not account or not account.is_active:
        logger.info(f"Password reset requested for unknown {scope} account")
        return None

    token = create_password_reset_token(account.id, scope)
    account.reset_token = _digest(token)
    # Naive UTC, matching the other DateTime columns
    account.reset_token_expires = utc_now() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
    db.commit()

    logger.info(f"Password reset initiated for {scope} {account.id}")
    return token


def complete_reset(db: Session, model: Type, token: str, new_password: str, scope: str):
    """
    Set a new password when `token` is a live reset token matching the one
    stored for its account. The stored token is cleared so it works once.
    """
    try:
        payload = decode_token(token, PASSWORD_RESET_TOKEN)
        account_id = int(payload["sub"])
    except (TokenError, ValueError) as e:
        logger.warning(f"Rejected {scope} reset token: {e}")
        raise invalid_reset_token()

    if payload.get("scope") != scope:
        raise invalid_reset_token()

    account = db.query(model).filter(model.id == account_id).first()
    if (
        not account
        or not account.reset_token
        or not hmac.compare_digest(account.reset_token, _digest(token))
        or account.reset_token_expires is None
        or account.reset_token_expires < utc_now()
    ):
        raise invalid_reset_token()

    account.password_hash = hash_password(new_password)
    account.reset_token = None
    account.reset_token_expires = None
    db.commit()

    logger.info(f"Password reset completed for {scope} {account.id}")
    return account
