# app/api/endpoints/inquiries.py
import math
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.db.session import get_db
from app.middleware.auth import get_current_admin
from app.models.admin import AdminUser
from app.models.artwork import Artwork
from app.models.inquiry import Inquiry
from app.core.responses import ApiError, format_response
from app.schemas.artwork import Pagination
from app.schemas.inquiry import Inquiry as InquirySchema, InquiryCreate, InquiryStatus, InquiryUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_inquiry(inquiry_in: InquiryCreate, db: Session = Depends(get_db)):
    """
    Contact form submission, optionally about a specific artwork
    """
    if inquiry_in.artwork_id is not None:
        artwork = db.query(Artwork.id).filter(Artwork.id == inquiry_in.artwork_id).first()
        if not artwork:
            raise ApiError(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Artwork not found",
                error="ARTWORK_NOT_FOUND",
            )

    inquiry = Inquiry(**inquiry_in.model_dump(), status="NEW")
    db.add(inquiry)
    db.commit()
    db.refresh(inquiry)

    logger.info(f"Inquiry received from {inquiry.email}")
    return format_response(
        True, {"inquiry": InquirySchema.model_validate(inquiry).to_dict()}, "Inquiry submitted successfully"
    )


@router.get("")
def list_inquiries(
    status_filter: Optional[InquiryStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    query = db.query(Inquiry)
    if status_filter:
        query = query.filter(Inquiry.status == status_filter)

    total = query.count()
    inquiries = query.order_by(Inquiry.created_at.desc(), Inquiry.id.desc()).offset(offset).limit(limit).all()

    pagination = Pagination(
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + limit < total,
        page=offset // limit + 1,
        total_pages=math.ceil(total / limit),
    )
    data = {
        "inquiries": [InquirySchema.model_validate(i).to_dict() for i in inquiries],
        "pagination": pagination.to_dict(),
    }
    return format_response(True, data, "Inquiries retrieved successfully")


@router.put("/{inquiry_id}")
def update_inquiry(
    inquiry_id: int,
    inquiry_in: InquiryUpdate,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    inquiry = db.query(Inquiry).filter(Inquiry.id == inquiry_id).first()
    if not inquiry:
        raise ApiError(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Inquiry not found",
            error="INQUIRY_NOT_FOUND",
        )

    for field, value in inquiry_in.model_dump(exclude_unset=True).items():
        setattr(inquiry, field, value)
    db.commit()
    db.refresh(inquiry)

    logger.info(f"Inquiry {inquiry_id} updated by {current_admin.email}")
    return format_response(
        True, {"inquiry": InquirySchema.model_validate(inquiry).to_dict()}, "Inquiry updated successfully"
    )
