from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship

from app.database import Base, utcnow
from app.models.bookmark import Bookmark


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    bio = Column(Text, default="")
    avatar_url = Column(String(500), default="")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Insertion order of the bookmark rows is the order of the user's bookmark set
    bookmarks = relationship(Bookmark, order_by=Bookmark.id, lazy="selectin")

    @property
    def bookmark_ids(self):
        return [b.post_id for b in self.bookmarks]
