# app/db/base.py
from app.db.session import Base

# Import all models so they are registered on Base.metadata
from app.models.category import Category
from app.models.artwork import Artwork, ArtworkImage
from app.models.admin import AdminUser
from app.models.user import User
from app.models.inquiry import Inquiry
