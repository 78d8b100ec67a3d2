from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint

from app.database import Base, utcnow


class PostLike(Base):
    __tablename__ = "post_likes"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Ensure each user can only like a post once
    __table_args__ = (UniqueConstraint('post_id', 'user_id', name='uq_post_user_like'),)
