from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional

from app.database import get_db
from app.dependencies import MAX_ID, RecordId, get_current_user
from app.errors import ValidationError
from app.models.user import User
from app.services import posts as post_service
from app.api.serializers import serialize_post

router = APIRouter(prefix="/api/posts", tags=["posts"])


class PostPayload(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[int] = Field(None, ge=1, le=MAX_ID)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


def _category_filter(raw: Optional[str]) -> Optional[int]:
    if not raw:
        return None
    if not raw.isdigit() or int(raw) > MAX_ID:
        raise ValidationError("Invalid category id")
    return int(raw)


@router.get("")
def get_posts(
    keyword: Optional[str] = None,
    category: Optional[str] = None,
    page_number: Optional[str] = Query(None, alias="pageNumber"),
    db: Session = Depends(get_db)
):
    """Search/filter posts, 9 per page, newest first"""
    result = post_service.list_posts(
        db,
        keyword=keyword,
        category_id=_category_filter(category),
        page=page_number,
    )
    return {
        "posts": [serialize_post(p) for p in result["posts"]],
        "page": result["page"],
        "pages": result["pages"],
    }


@router.get("/popular")
def get_popular_posts(db: Session = Depends(get_db)):
    """Top 4 posts by like count"""
    return [serialize_post(p) for p in post_service.list_popular(db)]


@router.get("/slug/{slug}")
def get_post_by_slug(slug: str, db: Session = Depends(get_db)):
    return serialize_post(post_service.get_by_slug(db, slug))


@router.get("/my-posts")
def get_my_posts(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [serialize_post(p) for p in post_service.list_my_posts(db, user.id)]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_post(
    data: PostPayload,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new post authored by the caller"""
    post = post_service.create_post(db, user, data.model_dump())
    return serialize_post(post)


@router.get("/{post_id}")
def get_post_by_id(post_id: RecordId, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Fetch a post for the edit form"""
    return serialize_post(post_service.get_by_id(db, post_id))


@router.put("/{post_id}")
def update_post(
    post_id: RecordId,
    data: PostPayload,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    post = post_service.update_post(db, post_id, user, data.model_dump())
    return serialize_post(post)


@router.delete("/{post_id}")
def delete_post(post_id: RecordId, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    post_service.delete_post(db, post_id, user)
    return {"message": "Post removed"}


@router.get("/{post_id}/related")
def get_related_posts(post_id: RecordId, db: Session = Depends(get_db)):
    """Up to 3 other posts from the same category"""
    return [serialize_post(p) for p in post_service.related_posts(db, post_id)]


@router.put("/{post_id}/like")
def toggle_like_post(post_id: RecordId, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Toggle like status for a post; returns the updated post"""
    return serialize_post(post_service.toggle_like(db, post_id, user.id))
