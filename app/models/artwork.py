from sqlalchemy import (
    Column, Integer, String, Text, ForeignKey, DateTime, Boolean, Numeric, Index, CheckConstraint, func, text
)
from sqlalchemy.orm import relationship

from app.db.session import Base

ARTWORK_STATUSES = ("AVAILABLE", "SOLD", "RESERVED")


class Artwork(Base):
    __tablename__ = "artworks"
    __table_args__ = (
        CheckConstraint("status IN ('AVAILABLE', 'SOLD', 'RESERVED')", name="ck_artworks_status"),
        CheckConstraint("price >= 0", name="ck_artworks_price"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    original_price = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    medium = Column(String(255), nullable=True)
    dimensions = Column(String(255), nullable=True)
    year = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default="AVAILABLE", index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    is_featured = Column(Boolean, nullable=False, default=False, index=True)
    view_count = Column(Integer, nullable=False, default=0)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    category = relationship("Category", back_populates="artworks")
    images = relationship(
        "ArtworkImage",
        back_populates="artwork",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ArtworkImage.id",
    )

    @property
    def category_name(self):
        return self.category.name if self.category else None

    @property
    def category_color(self):
        return self.category.color if self.category else None

    @property
    def primary_image(self):
        for image in self.images:
            if image.is_primary:
                return image.url
        return self.images[0].url if self.images else None


class ArtworkImage(Base):
    __tablename__ = "artwork_images"
    __table_args__ = (
        # At most one primary image per artwork
        Index(
            "uq_artwork_images_primary",
            "artwork_id",
            unique=True,
            postgresql_where=text("is_primary"),
            sqlite_where=text("is_primary"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    artwork_id = Column(Integer, ForeignKey("artworks.id", ondelete="CASCADE"), nullable=True, index=True)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=True)
    mime_type = Column(String(100), nullable=True)
    size = Column(Integer, nullable=True)
    url = Column(Text, nullable=False)
    is_primary = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    artwork = relationship("Artwork", back_populates="images")
