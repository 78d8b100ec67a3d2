from sqlalchemy import Column, Integer, String, DateTime

from app.database import Base, utcnow


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(120), nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
