# app/dependencies.py
import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Path
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import AuthenticationError
from app.models.user import User
from app.services.auth import decode_token
from app.services.storage import CloudinaryStorage, ImageStorage

logger = logging.getLogger("quill.auth")

# Largest value a 64-bit INTEGER primary key can hold
MAX_ID = 2**63 - 1

RecordId = Annotated[int, Path(ge=1, le=MAX_ID)]

# Security scheme; missing headers are reported by get_current_user itself
bearer = HTTPBearer(auto_error=False, description="Quill session token (JWT)")


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise AuthenticationError("Not authorized, no token")

    user_id = decode_token(credentials.credentials)

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning("Token for missing user %s", user_id)
        raise AuthenticationError("Not authorized, token failed")
    return user


@lru_cache
def get_image_storage() -> ImageStorage:
    return CloudinaryStorage()
