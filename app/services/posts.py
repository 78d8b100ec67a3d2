import logging
import math
import re

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.models.bookmark import Bookmark
from app.models.category import Category
from app.models.comment import Comment
from app.models.like import PostLike
from app.models.post import Post
from app.models.user import User

logger = logging.getLogger("quill.posts")

PAGE_SIZE = 9
POPULAR_LIMIT = 4
RELATED_LIMIT = 3
# Pages beyond this are answered as empty without touching OFFSET
MAX_PAGE = 1_000_000

# snake_case field -> name reported back to API clients
REQUIRED_FIELDS = {
    "title": "title",
    "slug": "slug",
    "excerpt": "excerpt",
    "content": "content",
    "image_url": "imageUrl",
    "category": "category",
}
EDITABLE_FIELDS = ("title", "slug", "excerpt", "content", "image_url", "category")
STRIPPED_FIELDS = ("title", "slug", "image_url")


def slugify(text: str) -> str:
    """Lowercase, spaces to dashes, then drop anything that isn't a word char or dash."""
    slug = text.strip().lower().replace(" ", "-")
    return re.sub(r"[^\w-]+", "", slug)


def parse_page_number(raw) -> int:
    try:
        page = int(raw)
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1


def _populated(query):
    return query.options(
        joinedload(Post.author),
        joinedload(Post.category),
        selectinload(Post.likes),
    )


def _newest_first(query):
    return query.order_by(Post.created_at.desc(), Post.id.desc())


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _get_post(db: Session, post_id: int) -> Post:
    # One statement, so like_count and likes come from the same snapshot
    post = (
        db.query(Post)
        .options(joinedload(Post.author), joinedload(Post.category), joinedload(Post.likes))
        .filter(Post.id == post_id)
        .first()
    )
    if not post:
        raise NotFoundError("Post not found")
    return post


def _require_category(db: Session, category_id) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def _clean_fields(fields: dict) -> dict:
    """Strip the single-line fields and drop values that are blank after stripping."""
    cleaned = {}
    for key in EDITABLE_FIELDS:
        value = fields.get(key)
        if isinstance(value, str):
            if not value.strip():
                continue
            if key in STRIPPED_FIELDS:
                value = value.strip()
        if value:
            cleaned[key] = value
    return cleaned


def _slug_taken(db: Session, slug: str, exclude_id: int | None = None) -> bool:
    query = db.query(Post.id).filter(Post.slug == slug)
    if exclude_id is not None:
        query = query.filter(Post.id != exclude_id)
    return query.first() is not None


def list_posts(db: Session, keyword: str | None = None, category_id: int | None = None, page=1) -> dict:
    """Search and paginate posts, newest first, ``PAGE_SIZE`` per page."""
    page = parse_page_number(page)

    query = db.query(Post)
    if keyword:
        query = query.filter(Post.title.ilike(f"%{_escape_like(keyword)}%", escape="\\"))
    if category_id is not None:
        query = query.filter(Post.category_id == category_id)

    count = query.count()
    if page > MAX_PAGE:
        posts = []
    else:
        posts = (
            _newest_first(_populated(query))
            .offset(PAGE_SIZE * (page - 1))
            .limit(PAGE_SIZE)
            .all()
        )
    return {"posts": posts, "page": page, "pages": math.ceil(count / PAGE_SIZE)}


def list_my_posts(db: Session, author_id: int) -> list[Post]:
    return _newest_first(_populated(db.query(Post)).filter(Post.author_id == author_id)).all()


def list_popular(db: Session) -> list[Post]:
    return (
        _populated(db.query(Post))
        .order_by(Post.like_count.desc(), Post.created_at.desc(), Post.id.desc())
        .limit(POPULAR_LIMIT)
        .all()
    )


def get_by_slug(db: Session, slug: str) -> Post:
    post = _populated(db.query(Post)).filter(Post.slug == slug).first()
    if not post:
        raise NotFoundError("Post not found")
    return post


def get_by_id(db: Session, post_id: int) -> Post:
    return _get_post(db, post_id)


def create_post(db: Session, author: User, fields: dict) -> Post:
    """Create a post owned by ``author``.

    Every field is required except ``slug``, which is derived from the title
    when the client leaves it out. A taken slug is a ConflictError whether it
    is caught up front or by the unique index on insert.
    """
    fields = _clean_fields(fields)
    if not fields.get("slug") and fields.get("title"):
        fields["slug"] = slugify(fields["title"])

    missing = [label for key, label in REQUIRED_FIELDS.items() if not fields.get(key)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    _require_category(db, fields["category"])

    if _slug_taken(db, fields["slug"]):
        raise ConflictError("A post with this slug already exists")

    post = Post(
        author_id=author.id,
        title=fields["title"],
        slug=fields["slug"],
        excerpt=fields["excerpt"],
        content=fields["content"],
        image_url=fields["image_url"],
        category_id=fields["category"],
        like_count=0,
    )
    db.add(post)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("A post with this slug already exists")

    logger.info("Post %s created by user %s", post.slug, author.id)
    return _get_post(db, post.id)


def _require_author(post: Post, user: User):
    if post.author_id != user.id:
        logger.warning("User %s refused access to post %s", user.id, post.id)
        raise AuthorizationError()


def update_post(db: Session, post_id: int, editor: User, fields: dict) -> Post:
    """Partial update; blank or missing fields keep their stored value."""
    post = _get_post(db, post_id)
    _require_author(post, editor)

    changes = _clean_fields(fields)

    if "category" in changes:
        _require_category(db, changes["category"])
        post.category_id = changes.pop("category")

    if "slug" in changes and changes["slug"] != post.slug and _slug_taken(db, changes["slug"], post.id):
        raise ConflictError("A post with this slug already exists")

    for key, value in changes.items():
        setattr(post, key, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("A post with this slug already exists")

    return _get_post(db, post_id)


def delete_post(db: Session, post_id: int, requester: User):
    post = _get_post(db, post_id)
    _require_author(post, requester)

    db.query(PostLike).filter(PostLike.post_id == post_id).delete(synchronize_session=False)
    db.query(Bookmark).filter(Bookmark.post_id == post_id).delete(synchronize_session=False)
    db.query(Comment).filter(Comment.post_id == post_id).delete(synchronize_session=False)
    db.query(Post).filter(Post.id == post_id).delete(synchronize_session=False)
    db.commit()
    logger.info("Post %s deleted by user %s", post_id, requester.id)


def toggle_like(db: Session, post_id: int, user_id: int) -> Post:
    """Add or remove ``user_id`` from the post's likes and resync ``like_count``.

    The post row is locked first (``SELECT ... FOR UPDATE`` where the backend
    supports it) so toggles on the same post are serialized; the delete or
    insert of the like row and the count recomputation commit together.
    """
    locked = db.query(Post.id).filter(Post.id == post_id).with_for_update().first()
    if not locked:
        raise NotFoundError("Post not found")

    removed = (
        db.query(PostLike)
        .filter(PostLike.post_id == post_id, PostLike.user_id == user_id)
        .delete(synchronize_session=False)
    )
    if not removed:
        db.add(PostLike(post_id=post_id, user_id=user_id))
        try:
            db.flush()
        except IntegrityError:
            # Same user toggling twice at once; the other request already recorded it
            db.rollback()
            raise ConflictError("Like already recorded")

    like_total = (
        db.query(func.count(PostLike.id))
        .filter(PostLike.post_id == post_id)
        .scalar_subquery()
    )
    db.query(Post).filter(Post.id == post_id).update(
        {Post.like_count: like_total}, synchronize_session=False
    )

    db.commit()
    return _get_post(db, post_id)


def related_posts(db: Session, post_id: int) -> list[Post]:
    """Up to three other posts in the same category, newest first."""
    current = db.query(Post).filter(Post.id == post_id).first()
    if not current:
        raise NotFoundError("Post not found")

    return (
        _newest_first(_populated(db.query(Post)))
        .filter(Post.category_id == current.category_id, Post.id != current.id)
        .limit(RELATED_LIMIT)
        .all()
    )
