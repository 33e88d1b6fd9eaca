# app/db/init_db.py
import logging
from sqlalchemy.orm import Session

from app.models.admin import AdminUser
from app.models.artwork import Artwork, ArtworkImage
from app.models.category import Category
from app.core.config import settings
from app.core.security import hash_password

logger = logging.getLogger(__name__)

SAMPLE_CATEGORIES = [
    ("Paintings", "Oil and acrylic paintings of landscapes and culture", "#FF6B6B"),
    ("Sculptures", "Three-dimensional art pieces", "#4ECDC4"),
    ("Digital Art", "Modern digital creations blending traditional and contemporary styles", "#45B7D1"),
    ("Photography", "Captured moments in time", "#96CEB4"),
    ("Calligraphy", "Traditional Arabic and Tifinagh calligraphy artwork", "#FFEAA7"),
]

SAMPLE_ARTWORKS = [
    {
        "name": "Sunset Dreams",
        "description": "A painting capturing the essence of a Mediterranean sunset",
        "price": 1200.00,
        "original_price": 1500.00,
        "medium": "Oil on Canvas",
        "dimensions": "60x80cm",
        "year": 2023,
        "is_featured": True,
        "category": "Paintings",
        "image": "/uploads/placeholder-artwork-1.jpg",
    },
    {
        "name": "Modern Harmony",
        "description": "Contemporary sculpture representing balance and movement",
        "price": 2500.00,
        "medium": "Bronze",
        "dimensions": "45x30x25cm",
        "year": 2023,
        "is_featured": False,
        "category": "Sculptures",
        "image": "/uploads/placeholder-artwork-2.jpg",
    },
]


def ensure_admin(db: Session) -> AdminUser:
    """
    Create the bootstrap admin from configured credentials when no admin exists.
    Safe to run on every start.
    """
    existing_admin = db.query(AdminUser).first()
    if existing_admin:
        logger.info("Admin account present, skipping bootstrap")
        return existing_admin

    admin = AdminUser(
        username=settings.ADMIN_USERNAME,
        email=settings.ADMIN_EMAIL.lower(),
        password_hash=hash_password(settings.ADMIN_PASSWORD),
        is_active=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Created bootstrap admin: {admin.email}")
    return admin


def seed_sample_data(db: Session) -> None:
    """Insert demo categories and artworks into an empty catalog"""
    if db.query(Category).first():
        logger.info("Catalog already contains data, skipping sample data")
        return

    logger.info("Creating sample catalog data")
    categories = {}
    for sort_order, (name, description, color) in enumerate(SAMPLE_CATEGORIES, start=1):
        category = Category(name=name, description=description, color=color, sort_order=sort_order)
        db.add(category)
        categories[name] = category
    db.flush()  # Flush to get category IDs

    for data in SAMPLE_ARTWORKS:
        data = dict(data)
        category = categories[data.pop("category")]
        image_url = data.pop("image")
        artwork = Artwork(**data, category_id=category.id)
        db.add(artwork)
        db.flush()
        db.add(ArtworkImage(
            artwork_id=artwork.id,
            filename=image_url.rsplit("/", 1)[-1],
            original_name=image_url.rsplit("/", 1)[-1],
            mime_type="image/jpeg",
            url=image_url,
            is_primary=True,
        ))

    db.commit()
    logger.info(f"Created {len(SAMPLE_CATEGORIES)} categories and {len(SAMPLE_ARTWORKS)} artworks")


def init_db(db: Session) -> None:
    """Initialize the database with the bootstrap admin and optional sample data"""
    ensure_admin(db)
    if settings.SEED_SAMPLE_DATA:
        seed_sample_data(db)
