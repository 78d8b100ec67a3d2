from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint

from app.database import Base, utcnow


class Bookmark(Base):
    __tablename__ = "bookmarks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # A post appears at most once in a user's bookmarks
    __table_args__ = (UniqueConstraint('user_id', 'post_id', name='uq_user_post_bookmark'),)
