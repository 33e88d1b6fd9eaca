# app/services/storage.py
import io
import os
import uuid
import logging
from typing import List, Optional

from fastapi import UploadFile
from PIL import Image as PILImage, UnidentifiedImageError
from starlette.concurrency import run_in_threadpool

from app.core.config import settings

logger = logging.getLogger(__name__)

# Pillow format name -> extensions it may legitimately carry
PILLOW_FORMATS = {
    "JPEG": {"jpg", "jpeg"},
    "PNG": {"png"},
    "GIF": {"gif"},
    "WEBP": {"webp"},
}


class UploadError(ValueError):
    """Upload rejected before anything reaches the public directory."""

    def __init__(self, message: str, error: str = "INVALID_FILE_TYPE", status_code: int = 400):
        super().__init__(message)
        self.error = error
        self.status_code = status_code


class StagedFile:
    """A validated upload sitting in the staging directory, not yet public."""

    def __init__(self, filename: str, original_name: str, mime_type: str, size: int, staged_path: str):
        self.filename = filename
        self.original_name = original_name
        self.mime_type = mime_type
        self.size = size
        self.staged_path = staged_path

    @property
    def url(self) -> str:
        return f"/uploads/{self.filename}"

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "filename": self.filename,
            "originalName": self.original_name,
            "mimeType": self.mime_type,
            "size": self.size,
        }


class StorageService:
    """
    Local file storage for artwork images.

    Uploads are two-phase: `stage` writes a validated file under a staging
    directory, the caller records it in the database, then `commit` moves it
    into the public directory served under /uploads. `discard` removes a
    staged file when the database step fails, so no orphan is left behind.
    """

    @property
    def storage_dir(self) -> str:
        return os.path.abspath(settings.UPLOAD_DIR)

    @property
    def staging_dir(self) -> str:
        return os.path.join(self.storage_dir, ".staging")

    def ensure_dirs(self) -> None:
        os.makedirs(self.staging_dir, exist_ok=True)
        logger.info(f"Storage service using directory: {self.storage_dir}")

    async def validate_image(self, file: UploadFile) -> bytes:
        """
        Validates extension, MIME type, size and decodability.
        Returns the file content.
        """
        original_name = file.filename or ""
        extension = os.path.splitext(original_name)[1].lower().lstrip(".")
        allowed = ", ".join(settings.ALLOWED_IMAGE_EXTENSIONS)

        if extension not in settings.ALLOWED_IMAGE_EXTENSIONS:
            raise UploadError(f"Only image files are allowed ({allowed})")
        if (file.content_type or "").lower() not in settings.ALLOWED_IMAGE_MIME_TYPES:
            raise UploadError(f"Only image files are allowed ({allowed})")

        # Read one byte past the ceiling to detect oversized files without buffering them whole
        content = await file.read(settings.MAX_UPLOAD_SIZE + 1)
        if len(content) > settings.MAX_UPLOAD_SIZE:
            raise UploadError(
                f"File too large (max {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB)",
                error="FILE_TOO_LARGE",
                status_code=413,
            )
        if not content:
            raise UploadError("Uploaded file is empty")

        img_format = await run_in_threadpool(self.detect_format, content, original_name)
        if extension not in PILLOW_FORMATS.get(img_format, set()):
            raise UploadError(f"File content ({img_format}) does not match its extension")

        return content

    def detect_format(self, content: bytes, original_name: str) -> Optional[str]:
        try:
            img = PILImage.open(io.BytesIO(content))
            img_format = img.format
            img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            logger.warning(f"Rejected undecodable upload {original_name}: {e}")
            raise UploadError("File content is not a valid image") from e
        return img_format

    def write_staged(self, filename: str, content: bytes) -> str:
        os.makedirs(self.staging_dir, exist_ok=True)
        staged_path = os.path.join(self.staging_dir, filename)
        with open(staged_path, "wb") as f:
            f.write(content)
        return staged_path

    async def stage(self, file: UploadFile) -> StagedFile:
        content = await self.validate_image(file)

        extension = os.path.splitext(file.filename)[1].lower()
        filename = f"artwork-{uuid.uuid4().hex}{extension}"

        staged_path = await run_in_threadpool(self.write_staged, filename, content)
        logger.info(f"Staged upload {file.filename} as {filename}")

        return StagedFile(
            filename=filename,
            original_name=file.filename,
            mime_type=file.content_type,
            size=len(content),
            staged_path=staged_path,
        )

    async def stage_all(self, files: List[UploadFile]) -> List[StagedFile]:
        """Stage every file or none: a rejected file discards those already staged."""
        staged: List[StagedFile] = []
        try:
            for file in files:
                staged.append(await self.stage(file))
        except Exception:
            await run_in_threadpool(self.discard, staged)
            raise
        return staged

    def commit(self, staged: List[StagedFile]) -> None:
        os.makedirs(self.storage_dir, exist_ok=True)
        for item in staged:
            os.replace(item.staged_path, os.path.join(self.storage_dir, item.filename))
            logger.info(f"Published upload: {item.url}")

    def discard(self, staged: List[StagedFile]) -> None:
        for item in staged:
            try:
                os.remove(item.staged_path)
            except FileNotFoundError:
                pass
            logger.info(f"Discarded staged upload: {item.filename}")

    def path_for(self, filename: str) -> str:
        return os.path.join(self.storage_dir, os.path.basename(filename))

    def delete_file(self, filename: Optional[str]) -> bool:
        """
        Deletes a published file; returns False when it is not there
        """
        if not filename:
            return False
        local_path = self.path_for(filename)
        if not os.path.exists(local_path):
            logger.warning(f"File does not exist in local storage when attempting to delete: {local_path}")
            return False
        try:
            os.remove(local_path)
        except OSError as e:
            logger.error(f"Error deleting file {local_path}: {e}")
            return False
        logger.info(f"Deleted file from local storage: {local_path}")
        return True


# Create a singleton instance
storage_service = StorageService()
