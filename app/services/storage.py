"""Image hosting behind a small storage-provider interface.

Routes only see ``ImageStorage.store(data, filename) -> url``; the Cloudinary
implementation is the production provider.
"""
import io
import logging
import time
from abc import ABC, abstractmethod

import cloudinary
import cloudinary.uploader

from app.config import CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET, CLOUDINARY_CLOUD_NAME
from app.errors import UploadError

logger = logging.getLogger("quill.storage")

UPLOAD_FOLDER = "quill_uploads"
ALLOWED_FORMATS = ("jpeg", "jpg", "png", "webp", "gif")


class ImageStorage(ABC):
    @abstractmethod
    def store(self, data: bytes, filename: str) -> str:
        """Persist ``data`` and return its public URL."""


def is_allowed_image(filename: str | None) -> bool:
    if not filename or "." not in filename:
        return False
    return filename.rsplit(".", 1)[1].lower() in ALLOWED_FORMATS


class CloudinaryStorage(ImageStorage):
    def __init__(self, cloud_name=None, api_key=None, api_secret=None):
        cloudinary.config(
            cloud_name=cloud_name or CLOUDINARY_CLOUD_NAME,
            api_key=api_key or CLOUDINARY_API_KEY,
            api_secret=api_secret or CLOUDINARY_API_SECRET,
            secure=True,
        )

    def store(self, data: bytes, filename: str) -> str:
        public_id = f"image-{int(time.time() * 1000)}"
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(data),
                folder=UPLOAD_FOLDER,
                public_id=public_id,
                allowed_formats=list(ALLOWED_FORMATS),
                resource_type="image",
            )
        except Exception as e:
            logger.exception("Cloudinary upload of %s failed", filename)
            raise UploadError() from e

        url = result.get("secure_url")
        if not url:
            logger.error("Cloudinary returned no URL for %s", filename)
            raise UploadError()
        return url
