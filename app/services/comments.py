import logging

from sqlalchemy.orm import Session, joinedload

from app.errors import NotFoundError, ValidationError
from app.models.comment import Comment
from app.models.post import Post
from app.models.user import User

logger = logging.getLogger("quill.comments")

MAX_COMMENT_LENGTH = 5000


def create_comment(db: Session, post_id: int, user: User, text: str | None, parent_id: int | None = None) -> Comment:
    """Store a comment on a post, optionally as a reply to ``parent_id``.

    Only the direct parent pointer is stored. The parent has to exist and sit
    on the same post; nesting depth is not limited.
    """
    if not text or len(text.strip()) == 0:
        raise ValidationError("Comment text is required")

    if len(text) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Comment is too long (max {MAX_COMMENT_LENGTH} characters)")

    post = db.query(Post.id).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")

    if parent_id is not None:
        parent = db.query(Comment).filter(Comment.id == parent_id).first()
        if not parent:
            raise ValidationError("Parent comment not found")
        if parent.post_id != post_id:
            raise ValidationError("Parent comment belongs to a different post")

    comment = Comment(post_id=post_id, user_id=user.id, text=text.strip(), parent_id=parent_id)
    db.add(comment)
    db.commit()

    logger.info("Comment %s added to post %s by user %s", comment.id, post_id, user.id)
    return db.query(Comment).options(joinedload(Comment.user)).filter(Comment.id == comment.id).first()


def list_comments(db: Session, post_id: int) -> list[Comment]:
    """Flat list of a post's comments, newest first; clients nest them by ``parent``."""
    return (
        db.query(Comment)
        .options(joinedload(Comment.user))
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )
