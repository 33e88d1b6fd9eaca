# Import schemas in dependency order: artwork before category
from app.schemas.base import BaseSchema, TimestampMixin
from app.schemas.artwork import ArtworkCreate, ArtworkUpdate, Artwork, ArtworkImage, Pagination
from app.schemas.category import CategoryCreate, CategoryUpdate, Category, CategoryWithArtworks
from app.schemas.admin import (
    AdminLogin, AdminRegister, Admin, PasswordChange, RefreshTokenRequest,
    PasswordResetInitiate, PasswordResetComplete,
)
from app.schemas.user import UserRegister, UserLogin, User
from app.schemas.inquiry import InquiryCreate, InquiryUpdate, Inquiry
