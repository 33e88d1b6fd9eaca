# Import models here so they can be imported from app.models
from app.models.category import Category
from app.models.artwork import Artwork, ArtworkImage
from app.models.admin import AdminUser
from app.models.user import User
from app.models.inquiry import Inquiry
