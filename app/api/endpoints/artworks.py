# app/api/endpoints/artworks.py
import math
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload
from typing import Literal, Optional

from app.db.database import database
from app.db.session import get_db
from app.middleware.auth import get_current_admin
from app.models.admin import AdminUser
from app.models.artwork import Artwork, ArtworkImage
from app.models.category import Category
from app.models.inquiry import Inquiry
from app.core.responses import ApiError, format_response
from app.schemas.artwork import Artwork as ArtworkSchema, ArtworkCreate, ArtworkUpdate, Pagination
from app.services.cache import resource_cache, ARTWORKS, CATEGORIES
from app.services.storage import storage_service

router = APIRouter()
logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
DEFAULT_STATUS = "AVAILABLE"

SORT_ORDERS = {
    "newest": (Artwork.created_at.desc(), Artwork.id.desc()),
    "oldest": (Artwork.created_at.asc(), Artwork.id.asc()),
    "price-low": (Artwork.price.asc(), Artwork.id.asc()),
    "price-high": (Artwork.price.desc(), Artwork.id.asc()),
    "popular": (Artwork.view_count.desc(), Artwork.id.asc()),
}


def artwork_not_found() -> ApiError:
    return ApiError(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Artwork not found",
        error="ARTWORK_NOT_FOUND",
    )


def invalidate_caches() -> None:
    # Category listings carry artwork counts
    resource_cache.invalidate(ARTWORKS)
    resource_cache.invalidate(CATEGORIES)


def ensure_category(db: Session, category_id: int) -> Category:
    category = (
        db.query(Category)
        .filter(Category.id == category_id, Category.is_active.is_(True))
        .first()
    )
    if not category:
        raise ApiError(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid category",
            error="INVALID_CATEGORY",
        )
    return category


def set_primary_image(db: Session, artwork: Artwork, image_url: str) -> Optional[str]:
    """
    Point the artwork's primary image at `image_url`, replacing the current
    primary row or inserting one. Runs in the caller's transaction.

    Returns the filename of a replaced local upload, which the caller deletes
    once the transaction has committed.
    """
    filename = image_url.rstrip("/").rsplit("/", 1)[-1] or image_url
    primary = (
        db.query(ArtworkImage)
        .filter(ArtworkImage.artwork_id == artwork.id, ArtworkImage.is_primary.is_(True))
        .first()
    )
    if primary:
        replaced = None
        if primary.url != image_url and primary.url.startswith("/uploads/"):
            replaced = primary.filename
        primary.url = image_url
        primary.filename = filename
        primary.original_name = filename
        primary.mime_type = None
        primary.size = None
        return replaced

    image = ArtworkImage(
        artwork_id=artwork.id,
        filename=filename,
        original_name=filename,
        url=image_url,
        is_primary=True,
    )
    db.add(image)
    return None


def load_artwork(db: Session, artwork_id: int, active_only: bool = True) -> Optional[Artwork]:
    query = (
        db.query(Artwork)
        .options(joinedload(Artwork.category), selectinload(Artwork.images))
        .filter(Artwork.id == artwork_id)
    )
    if active_only:
        query = query.filter(Artwork.is_active.is_(True))
    return query.first()


def serialize_artwork(artwork: Artwork) -> dict:
    return ArtworkSchema.model_validate(artwork).to_dict()


@router.get("")
def list_artworks(
    category: Optional[int] = Query(None, ge=1),
    status_filter: Literal["AVAILABLE", "SOLD", "RESERVED", "ALL"] = Query(DEFAULT_STATUS, alias="status"),
    featured: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    sort: Optional[Literal["newest", "oldest", "price-low", "price-high", "popular"]] = None,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """
    List active artworks with optional filters, search, sorting and pagination.

    Only the default first page is cached; any filter goes to the database.
    """
    search = search.strip() if search else None
    is_default_listing = (
        category is None
        and status_filter == DEFAULT_STATUS
        and featured is None
        and not search
        and sort is None
        and limit == DEFAULT_LIMIT
        and offset == 0
    )
    if is_default_listing:
        cached = resource_cache.get(ARTWORKS)
        if cached is not None:
            return format_response(True, cached, "Artworks retrieved successfully", meta={"cached": True})

    query = db.query(Artwork).filter(Artwork.is_active.is_(True))
    if category is not None:
        query = query.filter(Artwork.category_id == category)
    if status_filter != "ALL":
        query = query.filter(Artwork.status == status_filter)
    if featured is not None:
        query = query.filter(Artwork.is_featured.is_(featured))
    if search:
        query = query.filter(
            or_(
                Artwork.name.icontains(search, autoescape=True),
                Artwork.description.icontains(search, autoescape=True),
                Artwork.medium.icontains(search, autoescape=True),
            )
        )

    total = query.count()
    artworks = (
        query.options(joinedload(Artwork.category), selectinload(Artwork.images))
        .order_by(*SORT_ORDERS.get(sort, (Artwork.id.asc(),)))
        .offset(offset)
        .limit(limit)
        .all()
    )

    pagination = Pagination(
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + limit < total,
        page=offset // limit + 1,
        total_pages=math.ceil(total / limit),
    )
    data = {
        "artworks": [serialize_artwork(a) for a in artworks],
        "pagination": pagination.to_dict(),
    }
    if is_default_listing:
        resource_cache.set(ARTWORKS, data)
    return format_response(True, data, "Artworks retrieved successfully")


@router.get("/{artwork_id}")
def get_artwork(artwork_id: int, db: Session = Depends(get_db)):
    """
    Get an active artwork and count the view.

    The increment is a single UPDATE so concurrent views are never lost; it
    does not invalidate the listing cache.
    """
    updated = (
        db.query(Artwork)
        .filter(Artwork.id == artwork_id, Artwork.is_active.is_(True))
        .update({Artwork.view_count: Artwork.view_count + 1}, synchronize_session=False)
    )
    if not updated:
        db.rollback()
        raise artwork_not_found()
    db.commit()

    artwork = load_artwork(db, artwork_id)
    if not artwork:
        raise artwork_not_found()
    return format_response(True, {"artwork": serialize_artwork(artwork)}, "Artwork retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_artwork(
    artwork_in: ArtworkCreate,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """
    Create an artwork (admin only)
    """
    ensure_category(db, artwork_in.category_id)

    data = artwork_in.model_dump(exclude={"image_url"})
    data["is_featured"] = bool(data.get("is_featured"))
    artwork = Artwork(**data, is_active=True, view_count=0)
    db.add(artwork)
    db.flush()  # Flush to get artwork ID

    if artwork_in.image_url:
        set_primary_image(db, artwork, artwork_in.image_url)

    db.commit()
    invalidate_caches()

    logger.info(f"Artwork created: {artwork.name} by {current_admin.email}")
    artwork = load_artwork(db, artwork.id, active_only=False)
    return format_response(True, {"artwork": serialize_artwork(artwork)}, "Artwork created successfully")


@router.put("/{artwork_id}")
def update_artwork(
    artwork_id: int,
    artwork_in: ArtworkUpdate,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """
    Update only the supplied fields of an artwork (admin only)
    """
    artwork = db.query(Artwork).filter(Artwork.id == artwork_id).first()
    if not artwork:
        raise artwork_not_found()

    update_data = artwork_in.model_dump(exclude_unset=True)
    image_url = update_data.pop("image_url", None)

    if "category_id" in update_data:
        ensure_category(db, update_data["category_id"])

    for field, value in update_data.items():
        setattr(artwork, field, value)

    replaced = set_primary_image(db, artwork, image_url) if image_url else None

    db.commit()
    invalidate_caches()
    storage_service.delete_file(replaced)

    logger.info(f"Artwork updated: {artwork_id} by {current_admin.email}")
    artwork = load_artwork(db, artwork_id, active_only=False)
    return format_response(True, {"artwork": serialize_artwork(artwork)}, "Artwork updated successfully")


@router.delete("/{artwork_id}")
def delete_artwork(
    artwork_id: int,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """
    Delete an artwork and its images in one transaction (admin only)
    """
    artwork = db.query(Artwork).filter(Artwork.id == artwork_id).first()
    if not artwork:
        raise artwork_not_found()

    uploaded_files = [image.filename for image in artwork.images if image.url.startswith("/uploads/")]

    def _delete(session: Session) -> None:
        session.query(ArtworkImage).filter(ArtworkImage.artwork_id == artwork_id).delete(
            synchronize_session=False
        )
        session.query(Inquiry).filter(Inquiry.artwork_id == artwork_id).update(
            {Inquiry.artwork_id: None}, synchronize_session=False
        )
        session.query(Artwork).filter(Artwork.id == artwork_id).delete(synchronize_session=False)

    database.transaction(_delete, session=db)
    invalidate_caches()

    # Files go only after the rows are gone for good
    for filename in uploaded_files:
        storage_service.delete_file(filename)

    logger.info(f"Artwork deleted: {artwork_id} by {current_admin.email}")
    return format_response(True, {"id": artwork_id}, "Artwork deleted successfully")


@router.put("/{artwork_id}/images/{image_id}/primary")
def make_primary_image(
    artwork_id: int,
    image_id: int,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """
    Mark one of the artwork's images as primary (admin only)
    """
    image = (
        db.query(ArtworkImage)
        .filter(ArtworkImage.id == image_id, ArtworkImage.artwork_id == artwork_id)
        .first()
    )
    if not image:
        raise ApiError(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found", error="IMAGE_NOT_FOUND")

    def _swap(session: Session) -> None:
        # Clear the old primary first so the partial unique index never sees two
        session.query(ArtworkImage).filter(
            ArtworkImage.artwork_id == artwork_id, ArtworkImage.id != image_id
        ).update({ArtworkImage.is_primary: False}, synchronize_session=False)
        session.query(ArtworkImage).filter(ArtworkImage.id == image_id).update(
            {ArtworkImage.is_primary: True}, synchronize_session=False
        )

    database.transaction(_swap, session=db)
    invalidate_caches()

    artwork = load_artwork(db, artwork_id, active_only=False)
    return format_response(True, {"artwork": serialize_artwork(artwork)}, "Primary image updated")


@router.delete("/{artwork_id}/images/{image_id}")
def delete_artwork_image(
    artwork_id: int,
    image_id: int,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """
    Remove a single image from an artwork (admin only)
    """
    image = (
        db.query(ArtworkImage)
        .filter(ArtworkImage.id == image_id, ArtworkImage.artwork_id == artwork_id)
        .first()
    )
    if not image:
        raise ApiError(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found", error="IMAGE_NOT_FOUND")

    filename = image.filename if image.url.startswith("/uploads/") else None
    db.delete(image)
    db.commit()
    invalidate_caches()
    storage_service.delete_file(filename)

    return format_response(True, {"id": image_id}, "Image deleted successfully")
