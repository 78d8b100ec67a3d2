import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from app.models.bookmark import Bookmark
from app.models.post import Post
from app.models.user import User
from app.services.auth import hash_password, verify_password

logger = logging.getLogger("quill.users")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str):
    """Retrieve a user from the database by their email address"""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def register_user(db: Session, name: str | None, email: str | None, password: str | None) -> User:
    if not name or not name.strip() or not email or not email.strip() or not password:
        raise ValidationError("Name, email and password are required")

    if get_user_by_email(db, email):
        raise ConflictError("User already exists")

    user = User(
        name=name.strip(),
        email=normalize_email(email),
        password_hash=hash_password(password),
        bio="",
        avatar_url="",
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User already exists")
    db.refresh(user)

    logger.info("User %s registered", user.id)
    return user


def authenticate(db: Session, email: str | None, password: str | None) -> User:
    """Return the user for a matching email/password pair.

    Unknown email and wrong password produce the same error.
    """
    user = get_user_by_email(db, email) if email else None
    if not user or not password or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise AuthenticationError("Invalid email or password")
    return user


def get_public_profile(db: Session, user_id: int):
    """Return ``(user, posts)`` with the user's posts newest first."""
    user = get_user(db, user_id)
    posts = (
        db.query(Post)
        .options(joinedload(Post.author), joinedload(Post.category), selectinload(Post.likes))
        .filter(Post.author_id == user.id)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )
    return user, posts


def update_profile(db: Session, user: User, fields: dict) -> User:
    """Partial profile update.

    Empty values keep the stored name, email and avatar; ``bio`` is replaced
    whenever it is present, so it can be cleared. A new password is re-hashed.
    """
    if fields.get("name"):
        user.name = fields["name"].strip()

    if fields.get("email"):
        email = normalize_email(fields["email"])
        if email != user.email:
            taken = db.query(User.id).filter(User.email == email, User.id != user.id).first()
            if taken:
                raise ConflictError("Email is already registered")
            user.email = email

    if fields.get("bio") is not None:
        user.bio = fields["bio"]

    if fields.get("avatar_url"):
        user.avatar_url = fields["avatar_url"]

    if fields.get("password"):
        user.password_hash = hash_password(fields["password"])

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email is already registered")
    db.refresh(user)
    return user


def toggle_bookmark(db: Session, user: User, post_id: int) -> list[int]:
    """Add or remove a post from the user's bookmarks; returns the bookmarked post ids."""
    post = db.query(Post.id).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")

    removed = (
        db.query(Bookmark)
        .filter(Bookmark.user_id == user.id, Bookmark.post_id == post_id)
        .delete(synchronize_session=False)
    )
    if not removed:
        db.add(Bookmark(user_id=user.id, post_id=post_id))

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Bookmark already recorded")

    return bookmark_ids(db, user.id)


def bookmark_ids(db: Session, user_id: int) -> list[int]:
    rows = db.query(Bookmark.post_id).filter(Bookmark.user_id == user_id).order_by(Bookmark.id).all()
    return [row.post_id for row in rows]


def list_bookmarked_posts(db: Session, user: User) -> list[Post]:
    """Resolve the user's bookmarks into populated posts, in bookmark order."""
    return (
        db.query(Post)
        .join(Bookmark, Bookmark.post_id == Post.id)
        .options(joinedload(Post.author), joinedload(Post.category), selectinload(Post.likes))
        .filter(Bookmark.user_id == user.id)
        .order_by(Bookmark.id)
        .all()
    )
