"""
Upload Service

Validates and stores memorial photos under <uploads>/memorial-photos/.
"""

import secrets
from pathlib import Path

from fastapi import UploadFile
import structlog

from funeral_platform.core.exceptions import BadRequestError
from funeral_platform.utils.clock import now_ms

logger = structlog.get_logger(__name__)

PHOTO_DIR = "memorial-photos"

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": [".jpg", ".jpeg"],
    "image/png": [".png"],
    "image/gif": [".gif"],
    "image/webp": [".webp"],
}


class UploadService:
    def __init__(self, uploads_dir: Path, max_bytes: int):
        self.uploads_dir = uploads_dir
        self.max_bytes = max_bytes

    @staticmethod
    def validate_photo(file: UploadFile) -> str:
        """Check MIME type and extension; returns the extension to store under"""
        if not file.filename:
            raise BadRequestError("No file provided")

        mime_type = file.content_type
        if mime_type not in ALLOWED_IMAGE_TYPES:
            raise BadRequestError(
                f"File type not allowed. Allowed types: {', '.join(ALLOWED_IMAGE_TYPES)}"
            )

        ext = Path(file.filename).suffix.lower()
        if ext not in ALLOWED_IMAGE_TYPES[mime_type]:
            raise BadRequestError(f"File extension {ext or '(none)'} does not match {mime_type}")
        return ext

    @staticmethod
    def generate_unique_filename(ext: str) -> str:
        return f"{now_ms()}-{secrets.randbelow(10**9)}{ext}"

    async def save_memorial_photo(self, file: UploadFile) -> str:
        """Store the photo and return its public path"""
        ext = self.validate_photo(file)
        content = await file.read(self.max_bytes + 1)
        if len(content) > self.max_bytes:
            raise BadRequestError("Photo is too large")
        if not content:
            raise BadRequestError("Photo is empty")

        filename = self.generate_unique_filename(ext)
        target_dir = self.uploads_dir / PHOTO_DIR
        target_dir.mkdir(parents=True, exist_ok=True)
        (target_dir / filename).write_bytes(content)

        logger.info(f"Memorial photo stored: {filename}", size=len(content))
        return f"/uploads/{PHOTO_DIR}/{filename}"
