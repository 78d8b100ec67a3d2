from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional

from app.database import get_db
from app.dependencies import MAX_ID, RecordId, get_current_user
from app.models.user import User
from app.services import comments as comment_service
from app.api.serializers import serialize_comment

router = APIRouter(prefix="/api/comments", tags=["comments"])


class CommentCreate(BaseModel):
    text: Optional[str] = None
    parent_id: Optional[int] = Field(None, ge=1, le=MAX_ID)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


@router.get("/{post_id}")
def get_post_comments(post_id: RecordId, db: Session = Depends(get_db)):
    """Get all comments for a post, newest first"""
    return [serialize_comment(c) for c in comment_service.list_comments(db, post_id)]


@router.post("/{post_id}", status_code=status.HTTP_201_CREATED)
def create_comment(
    post_id: RecordId,
    comment: CommentCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new comment (or a reply when parentId is set)"""
    created = comment_service.create_comment(db, post_id, user, comment.text, comment.parent_id)
    return serialize_comment(created)
