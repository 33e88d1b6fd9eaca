from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship

from app.db.session import Base

INQUIRY_STATUSES = ("NEW", "READ", "REPLIED", "CLOSED")


class Inquiry(Base):
    __tablename__ = "inquiries"
    __table_args__ = (
        CheckConstraint("status IN ('NEW', 'READ', 'REPLIED', 'CLOSED')", name="ck_inquiries_status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    subject = Column(String(500), nullable=True)
    message = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="NEW", index=True)
    artwork_id = Column(Integer, ForeignKey("artworks.id", ondelete="SET NULL"), nullable=True)
    admin_reply = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    artwork = relationship("Artwork")
