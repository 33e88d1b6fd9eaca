# app/api/endpoints/auth.py
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.middleware.auth import get_current_user
from app.middleware.rate_limit import auth_rate_limit
from app.models.user import User
from app.core.config import settings
from app.core.responses import ApiError, format_response
from app.core.security import create_user_token, hash_password, verify_password
from app.schemas.admin import PasswordResetComplete, PasswordResetInitiate
from app.schemas.user import User as UserSchema, UserLogin, UserRegister
from app.services.password_reset import complete_reset, initiate_reset, utc_now

router = APIRouter()
logger = logging.getLogger(__name__)

RESET_SCOPE = "user"


@router.post("/register", status_code=status.HTTP_201_CREATED, dependencies=[Depends(auth_rate_limit)])
def register(body: UserRegister, db: Session = Depends(get_db)):
    """
    Create a storefront account and sign it in
    """
    email = body.email.lower()
    if db.query(User).filter(func.lower(User.email) == email).first():
        raise ApiError(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists",
            error="EMAIL_EXISTS",
        )

    user = User(
        email=email,
        password_hash=hash_password(body.password),
        first_name=body.first_name.strip(),
        last_name=body.last_name.strip(),
        phone=body.phone,
        date_of_birth=body.date_of_birth,
        is_active=True,
        is_email_verified=False,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"User registered: {user.email}")
    data = {"user": UserSchema.model_validate(user).to_dict(), "token": create_user_token(user)}
    return format_response(True, data, "User registered successfully")


@router.post("/login", dependencies=[Depends(auth_rate_limit)])
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(func.lower(User.email) == credentials.email.lower()).first()
    if not user or not user.is_active or not verify_password(credentials.password, user.password_hash):
        logger.warning(f"Failed user login for {credentials.email}")
        raise ApiError(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            error="INVALID_CREDENTIALS",
        )

    user.last_login = utc_now()
    db.commit()
    db.refresh(user)

    data = {"user": UserSchema.model_validate(user).to_dict(), "token": create_user_token(user)}
    return format_response(True, data, "Login successful")


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return format_response(True, {"user": UserSchema.model_validate(current_user).to_dict()}, "User retrieved successfully")


@router.post("/password-reset/initiate", dependencies=[Depends(auth_rate_limit)])
def initiate_password_reset(body: PasswordResetInitiate, db: Session = Depends(get_db)):
    """
    Always answers 200. There is no mail service, so outside production the
    token comes back in the response.
    """
    token = initiate_reset(db, User, body.email, RESET_SCOPE)
    data = {"resetToken": token} if token and not settings.is_production else None
    return format_response(True, data, "If the account exists, a password reset has been initiated")


@router.post("/password-reset/complete", dependencies=[Depends(auth_rate_limit)])
def complete_password_reset(body: PasswordResetComplete, db: Session = Depends(get_db)):
    complete_reset(db, User, body.token, body.new_password, RESET_SCOPE)
    return format_response(True, message="Password has been reset successfully")
