# app/api/endpoints/categories.py
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Dict, Optional

from app.db.session import get_db
from app.middleware.auth import get_current_admin
from app.models.admin import AdminUser
from app.models.artwork import Artwork
from app.models.category import Category
from app.core.responses import ApiError, format_response
from app.schemas.category import (
    Category as CategorySchema, CategoryWithArtworks, CategoryCreate, CategoryUpdate,
)
from app.schemas.artwork import Artwork as ArtworkSchema
from app.services.cache import resource_cache, CATEGORIES, ARTWORKS

router = APIRouter()
logger = logging.getLogger(__name__)


def category_not_found() -> ApiError:
    return ApiError(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Category not found",
        error="CATEGORY_NOT_FOUND",
    )


def find_active_by_name(db: Session, name: str, exclude_id: Optional[int] = None) -> Optional[Category]:
    """Case-insensitive lookup among active categories"""
    query = db.query(Category).filter(
        func.lower(Category.name) == name.strip().lower(),
        Category.is_active.is_(True),
    )
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    return query.first()


def count_active_artworks(db: Session, category_id: int) -> int:
    return (
        db.query(func.count(Artwork.id))
        .filter(Artwork.category_id == category_id, Artwork.is_active.is_(True))
        .scalar()
    )


def artwork_counts(db: Session) -> Dict[int, int]:
    rows = (
        db.query(Artwork.category_id, func.count(Artwork.id))
        .filter(Artwork.is_active.is_(True), Artwork.category_id.isnot(None))
        .group_by(Artwork.category_id)
        .all()
    )
    return {category_id: count for category_id, count in rows}


def serialize_category(category: Category, artwork_count: Optional[int] = None) -> dict:
    data = CategorySchema.model_validate(category).to_dict()
    if artwork_count is not None:
        data["artworkCount"] = artwork_count
    return data


@router.get("")
def list_categories(db: Session = Depends(get_db)):
    """
    List active categories ordered by sort order then name, with artwork counts
    """
    cached = resource_cache.get(CATEGORIES)
    if cached is not None:
        return format_response(True, cached, "Categories retrieved successfully", meta={"cached": True})

    categories = (
        db.query(Category)
        .filter(Category.is_active.is_(True))
        .order_by(Category.sort_order.asc(), Category.name.asc())
        .all()
    )
    counts = artwork_counts(db)
    data = {
        "categories": [serialize_category(c, counts.get(c.id, 0)) for c in categories],
        "total": len(categories),
    }
    resource_cache.set(CATEGORIES, data)
    return format_response(True, data, "Categories retrieved successfully")


@router.get("/{category_id}")
def get_category(category_id: int, db: Session = Depends(get_db)):
    """
    Get an active category with its active artworks
    """
    category = (
        db.query(Category)
        .filter(Category.id == category_id, Category.is_active.is_(True))
        .first()
    )
    if not category:
        raise category_not_found()

    artworks = (
        db.query(Artwork)
        .filter(Artwork.category_id == category.id, Artwork.is_active.is_(True))
        .order_by(Artwork.id.asc())
        .all()
    )
    result = CategoryWithArtworks.model_validate(category).model_copy(
        update={
            "artwork_count": len(artworks),
            "artworks": [ArtworkSchema.model_validate(a) for a in artworks],
        }
    )
    return format_response(True, {"category": result.to_dict()}, "Category retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(
    category_in: CategoryCreate,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """
    Create a category (admin only)
    """
    if find_active_by_name(db, category_in.name):
        raise ApiError(
            status_code=status.HTTP_409_CONFLICT,
            detail="Category already exists",
            error="CATEGORY_EXISTS",
        )

    max_sort = db.query(func.max(Category.sort_order)).scalar() or 0
    category = Category(
        name=category_in.name,
        description=category_in.description or "",
        color=category_in.color,
        is_active=True,
        sort_order=max_sort + 1,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    resource_cache.invalidate(CATEGORIES)

    logger.info(f"Category created: {category.name} by {current_admin.email}")
    return format_response(
        True, {"category": serialize_category(category, 0)}, "Category created successfully"
    )


@router.put("/{category_id}")
def update_category(
    category_id: int,
    category_in: CategoryUpdate,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """
    Update only the supplied fields of a category (admin only)
    """
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise category_not_found()

    update_data = category_in.model_dump(exclude_unset=True)

    # Renaming, or reactivating, must not collide with another active category
    becomes_active = update_data.get("is_active", category.is_active)
    if becomes_active and ("name" in update_data or "is_active" in update_data):
        target_name = update_data.get("name", category.name)
        if find_active_by_name(db, target_name, exclude_id=category.id):
            raise ApiError(
                status_code=status.HTTP_409_CONFLICT,
                detail="Category already exists",
                error="CATEGORY_EXISTS",
            )

    for field, value in update_data.items():
        setattr(category, field, value)

    db.commit()
    db.refresh(category)
    # Artwork payloads embed the category name and color
    resource_cache.invalidate(CATEGORIES)
    resource_cache.invalidate(ARTWORKS)

    logger.info(f"Category updated: {category.id} by {current_admin.email}")
    return format_response(
        True,
        {"category": serialize_category(category, count_active_artworks(db, category.id))},
        "Category updated successfully",
    )


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """
    Delete a category that no active artwork references (admin only)
    """
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise category_not_found()

    artwork_count = count_active_artworks(db, category.id)
    if artwork_count > 0:
        raise ApiError(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot delete category with {artwork_count} artwork(s)",
            error="CATEGORY_HAS_ARTWORKS",
        )

    # Inactive artworks lose their category instead of blocking the delete
    db.query(Artwork).filter(Artwork.category_id == category.id).update(
        {Artwork.category_id: None}, synchronize_session=False
    )
    db.delete(category)
    db.commit()
    resource_cache.invalidate(CATEGORIES)
    resource_cache.invalidate(ARTWORKS)

    logger.info(f"Category deleted: {category_id} by {current_admin.email}")
    return format_response(True, {"id": category_id}, "Category deleted successfully")
