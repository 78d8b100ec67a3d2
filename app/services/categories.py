import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import ConflictError, ValidationError
from app.models.category import Category

logger = logging.getLogger("quill.categories")


def category_slug(name: str) -> str:
    return name.strip().lower().replace(" ", "-")


def create_category(db: Session, name: str | None) -> Category:
    if not name or not name.strip():
        raise ValidationError("Category name is required")

    slug = category_slug(name)
    existing = db.query(Category).filter(Category.slug == slug).first()
    if existing:
        raise ConflictError("Category already exists")

    category = Category(name=name.strip(), slug=slug)
    db.add(category)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Category already exists")
    db.refresh(category)

    logger.info("Category %s created", category.slug)
    return category


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name.asc()).all()
