# app/api/endpoints/uploads.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.db.session import get_db
from app.middleware.auth import get_current_admin
from app.models.admin import AdminUser
from app.models.artwork import Artwork, ArtworkImage
from app.core.config import settings
from app.core.logging import logger
from app.core.responses import ApiError, format_response
from app.services.cache import resource_cache, ARTWORKS, CATEGORIES
from app.services.storage import StagedFile, UploadError, storage_service

router = APIRouter()


def no_file(detail: str = "No file uploaded") -> ApiError:
    return ApiError(status_code=status.HTTP_400_BAD_REQUEST, detail=detail, error="NO_FILE")


def artwork_exists(db: Session, artwork_id: int) -> bool:
    return db.query(Artwork.id).filter(Artwork.id == artwork_id).first() is not None


async def stage_uploads(files: List[UploadFile]) -> List[StagedFile]:
    try:
        return await storage_service.stage_all(files)
    except UploadError as e:
        raise ApiError(status_code=e.status_code, detail=str(e), error=e.error)


def attach_to_artwork(db: Session, artwork_id: int, staged: List[StagedFile], is_primary: bool) -> List[dict]:
    """
    Record staged files as images of an artwork in one transaction, then
    publish them. Staged files are discarded if the rows cannot be written.
    """
    try:
        has_primary = (
            db.query(ArtworkImage.id)
            .filter(ArtworkImage.artwork_id == artwork_id, ArtworkImage.is_primary.is_(True))
            .first()
            is not None
        )
        make_primary = is_primary or not has_primary
        if is_primary and has_primary:
            db.query(ArtworkImage).filter(ArtworkImage.artwork_id == artwork_id).update(
                {ArtworkImage.is_primary: False}, synchronize_session=False
            )

        rows = []
        for index, item in enumerate(staged):
            image = ArtworkImage(
                artwork_id=artwork_id,
                filename=item.filename,
                original_name=item.original_name,
                mime_type=item.mime_type,
                size=item.size,
                url=item.url,
                is_primary=make_primary and index == 0,
            )
            db.add(image)
            rows.append(image)
        db.commit()
    except Exception:
        db.rollback()
        storage_service.discard(staged)
        logger.error(f"Could not attach {len(staged)} upload(s) to artwork {artwork_id}, staged files discarded")
        raise

    storage_service.commit(staged)
    resource_cache.invalidate(ARTWORKS)
    resource_cache.invalidate(CATEGORIES)

    return [
        {**item.to_dict(), "id": row.id, "artworkId": artwork_id, "isPrimary": row.is_primary}
        for item, row in zip(staged, rows)
    ]


def publish(staged: List[StagedFile]) -> List[dict]:
    storage_service.commit(staged)
    return [item.to_dict() for item in staged]


async def handle_upload(
    db: Session,
    files: List[UploadFile],
    artwork_id: Optional[int],
    is_primary: bool,
    current_admin: AdminUser,
) -> List[dict]:
    # Database and disk work runs on the worker pool, off the event loop
    if artwork_id is not None and not await run_in_threadpool(artwork_exists, db, artwork_id):
        raise ApiError(status_code=status.HTTP_404_NOT_FOUND, detail="Artwork not found", error="ARTWORK_NOT_FOUND")

    staged = await stage_uploads(files)
    logger.info(f"{len(staged)} file(s) uploaded by {current_admin.email}")

    if artwork_id is None:
        return await run_in_threadpool(publish, staged)
    return await run_in_threadpool(attach_to_artwork, db, artwork_id, staged, is_primary)


@router.post("/image")
async def upload_image(
    image: Optional[UploadFile] = File(None),
    artwork_id: Optional[int] = Form(None, alias="artworkId"),
    is_primary: bool = Form(False, alias="isPrimary"),
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """
    Upload one image (field `image`), optionally attaching it to an artwork.
    `data` is the uploaded file itself: url, filename, originalName, size.
    """
    if image is None or not image.filename:
        raise no_file()

    uploaded = await handle_upload(db, [image], artwork_id, is_primary, current_admin)
    return format_response(True, uploaded[0], "Image uploaded successfully")


@router.post("/images")
async def upload_images(
    images: Optional[List[UploadFile]] = File(None),
    artwork_id: Optional[int] = Form(None, alias="artworkId"),
    is_primary: bool = Form(False, alias="isPrimary"),
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """
    Upload several images (field `images`); with `isPrimary` the first one
    becomes the artwork's primary image
    """
    files = [f for f in images or [] if f.filename]
    if not files:
        raise no_file("No files uploaded")
    if len(files) > settings.MAX_UPLOAD_FILES:
        raise ApiError(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Too many files (max {settings.MAX_UPLOAD_FILES})",
            error="TOO_MANY_FILES",
        )

    uploaded = await handle_upload(db, files, artwork_id, is_primary, current_admin)
    return format_response(
        True, {"images": uploaded, "count": len(uploaded)}, f"{len(uploaded)} images uploaded successfully"
    )
