from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, func
from sqlalchemy.orm import relationship

from app.db.session import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    # Uniqueness is checked case-insensitively among active rows by the API
    name = Column(String(100), index=True, nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(7), nullable=False, default="#6366f1")
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    sort_order = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    artworks = relationship("Artwork", back_populates="category")
