import logging

from fastapi import APIRouter, Depends, File, UploadFile, status

from app.dependencies import get_current_user, get_image_storage
from app.errors import ValidationError
from app.models.user import User
from app.services.storage import ImageStorage, is_allowed_image

router = APIRouter(prefix="/api/upload", tags=["upload"])

logger = logging.getLogger("quill.upload")


@router.post("", status_code=status.HTTP_201_CREATED)
def upload_image(
    image: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    storage: ImageStorage = Depends(get_image_storage)
):
    """Forward an image to the image host and hand back its URL.

    Nothing is written locally; the client attaches the URL to a post or
    profile afterwards.
    """
    if image is None:
        raise ValidationError("No image provided")

    if not is_allowed_image(image.filename):
        raise ValidationError("Only jpeg, jpg, png, webp and gif images are allowed")

    data = image.file.read()
    if not data:
        raise ValidationError("Uploaded image is empty")

    url = storage.store(data, image.filename)
    logger.info("User %s uploaded %s", user.id, image.filename)

    return {"message": "Image Uploaded Successfully", "image": url}
