from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional

from app.database import get_db
from app.dependencies import RecordId, get_current_user
from app.models.user import User
from app.services import users as user_service
from app.services.auth import create_token
from app.api.serializers import serialize_post, serialize_user

router = APIRouter(prefix="/api/users", tags=["users"])


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    password: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


@router.post("", status_code=status.HTTP_201_CREATED)
def register_user(data: RegisterRequest, db: Session = Depends(get_db)):
    user = user_service.register_user(db, data.name, data.email, data.password)
    return serialize_user(user, token=create_token(user.id))


@router.post("/login")
def login_user(data: LoginRequest, db: Session = Depends(get_db)):
    user = user_service.authenticate(db, data.email, data.password)
    return serialize_user(user, token=create_token(user.id))


@router.get("/profile")
def get_user_details(user: User = Depends(get_current_user)):
    """The caller's own profile"""
    return serialize_user(user)


@router.put("/profile")
def update_user_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Partial profile update. A fresh token is issued on every update,
    whether or not the password changed.
    """
    updated = user_service.update_profile(db, user, data.model_dump())
    return serialize_user(updated, token=create_token(updated.id))


@router.get("/profile/bookmarks")
def get_bookmarked_posts(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [serialize_post(p) for p in user_service.list_bookmarked_posts(db, user)]


@router.put("/profile/bookmarks/{post_id}")
def toggle_bookmark(post_id: RecordId, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Toggle a bookmark; returns the bookmarked post ids"""
    return user_service.toggle_bookmark(db, user, post_id)


@router.get("/{user_id}")
def get_user_profile(user_id: RecordId, db: Session = Depends(get_db)):
    """Public profile plus everything the user has written"""
    user, posts = user_service.get_public_profile(db, user_id)
    return {
        "user": serialize_user(user),
        "posts": [serialize_post(p) for p in posts],
    }
