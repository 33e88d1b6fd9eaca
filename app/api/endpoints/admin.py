# app/api/endpoints/admin.py
from fastapi import APIRouter, Depends, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.middleware.auth import get_current_admin, unauthorized
from app.middleware.rate_limit import auth_rate_limit
from app.models.admin import AdminUser
from app.models.artwork import Artwork
from app.models.category import Category
from app.models.inquiry import Inquiry
from app.models.user import User
from app.core.config import settings
from app.core.logging import logger
from app.core.responses import ApiError, format_response
from app.core.security import (
    ADMIN_REFRESH_TOKEN, TokenError, create_admin_tokens, decode_token, hash_password, verify_password,
)
from app.schemas.admin import (
    Admin as AdminSchema, AdminLogin, AdminRegister, PasswordChange, PasswordResetComplete,
    PasswordResetInitiate, RefreshTokenRequest,
)
from app.services.password_reset import complete_reset, initiate_reset, utc_now

router = APIRouter()

RESET_SCOPE = "admin"


def invalid_credentials() -> ApiError:
    return ApiError(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        error="INVALID_CREDENTIALS",
    )


@router.post("/login", dependencies=[Depends(auth_rate_limit)])
def login(credentials: AdminLogin, db: Session = Depends(get_db)):
    """
    Exchange admin credentials for an access and refresh token pair
    """
    admin = db.query(AdminUser).filter(func.lower(AdminUser.email) == credentials.email.lower()).first()

    # Same answer for unknown, inactive and wrong password
    if not admin or not admin.is_active or not verify_password(credentials.password, admin.password_hash):
        logger.warning(f"Failed admin login for {credentials.email}")
        raise invalid_credentials()

    admin.last_login = utc_now()
    db.commit()
    db.refresh(admin)

    logger.info(f"Admin logged in: {admin.email}")
    data = {
        "admin": AdminSchema.model_validate(admin).to_dict(),
        "tokens": create_admin_tokens(admin),
        "expiresIn": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    }
    return format_response(True, data, "Login successful")


@router.post("/refresh-token", dependencies=[Depends(auth_rate_limit)])
def refresh_token(body: RefreshTokenRequest, db: Session = Depends(get_db)):
    """
    Exchange a refresh token for a fresh token pair
    """
    try:
        payload = decode_token(body.refresh_token, ADMIN_REFRESH_TOKEN, secret=settings.JWT_REFRESH_SECRET)
        admin_id = int(payload["sub"])
    except (TokenError, ValueError) as e:
        logger.warning(f"Rejected refresh token: {e}")
        raise unauthorized("Invalid or expired refresh token")

    admin = db.query(AdminUser).filter(AdminUser.id == admin_id).first()
    if not admin or not admin.is_active:
        raise unauthorized("Admin account not found or inactive")

    return format_response(True, {"tokens": create_admin_tokens(admin)}, "Token refreshed successfully")


@router.get("/profile")
def profile(current_admin: AdminUser = Depends(get_current_admin)):
    return format_response(
        True, {"admin": AdminSchema.model_validate(current_admin).to_dict()}, "Profile retrieved successfully"
    )


@router.post("/logout")
def logout(current_admin: AdminUser = Depends(get_current_admin)):
    """
    Tokens are stateless; the client drops them. Logged for the audit trail.
    """
    logger.info(f"Admin logged out: {current_admin.email}")
    return format_response(True, message="Logout successful")


@router.post("/password/change")
def change_password(
    body: PasswordChange,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    if not verify_password(body.current_password, current_admin.password_hash):
        raise ApiError(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
            error="INVALID_PASSWORD",
        )

    current_admin.password_hash = hash_password(body.new_password)
    db.commit()

    logger.info(f"Admin password changed: {current_admin.email}")
    return format_response(True, message="Password changed successfully")


@router.get("/exists")
def admin_exists(db: Session = Depends(get_db)):
    """
    Whether any admin account has been created
    """
    exists = db.query(AdminUser.id).first() is not None
    return format_response(True, {"exists": exists}, "Admin existence checked")


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register_admin(
    body: AdminRegister,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """
    Create another admin account (admin only)
    """
    taken = (
        db.query(AdminUser)
        .filter(
            or_(
                func.lower(AdminUser.email) == body.email.lower(),
                func.lower(AdminUser.username) == body.username.lower(),
            )
        )
        .first()
    )
    if taken:
        raise ApiError(
            status_code=status.HTTP_409_CONFLICT,
            detail="An admin with this email or username already exists",
            error="ADMIN_EXISTS",
        )

    admin = AdminUser(
        username=body.username,
        email=body.email.lower(),
        password_hash=hash_password(body.password),
        is_active=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)

    logger.info(f"Admin {admin.email} registered by {current_admin.email}")
    return format_response(True, {"admin": AdminSchema.model_validate(admin).to_dict()}, "Admin created successfully")


@router.get("/dashboard/stats")
def dashboard_stats(
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    active_artworks = db.query(Artwork).filter(Artwork.is_active.is_(True))
    stats = {
        "totalArtworks": active_artworks.count(),
        "availableArtworks": active_artworks.filter(Artwork.status == "AVAILABLE").count(),
        "soldArtworks": active_artworks.filter(Artwork.status == "SOLD").count(),
        "featuredArtworks": active_artworks.filter(Artwork.is_featured.is_(True)).count(),
        "totalViews": db.query(func.coalesce(func.sum(Artwork.view_count), 0))
        .filter(Artwork.is_active.is_(True))
        .scalar(),
        "totalCategories": db.query(Category).filter(Category.is_active.is_(True)).count(),
        "totalUsers": db.query(User).count(),
        "newInquiries": db.query(Inquiry).filter(Inquiry.status == "NEW").count(),
    }
    return format_response(True, {"stats": stats}, "Dashboard statistics retrieved successfully")


@router.post("/password-reset/initiate", dependencies=[Depends(auth_rate_limit)])
def initiate_password_reset(body: PasswordResetInitiate, db: Session = Depends(get_db)):
    token = initiate_reset(db, AdminUser, body.email, RESET_SCOPE)
    data = {"resetToken": token} if token and not settings.is_production else None
    return format_response(True, data, "If the account exists, a password reset has been initiated")


@router.post("/password-reset/complete", dependencies=[Depends(auth_rate_limit)])
def complete_password_reset(body: PasswordResetComplete, db: Session = Depends(get_db)):
    complete_reset(db, AdminUser, body.token, body.new_password, RESET_SCOPE)
    return format_response(True, message="Password has been reset successfully")
