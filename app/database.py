from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import DATABASE_URL


def build_engine(url: str):
    # SQLite connections are shared with FastAPI's worker threads.
    connect_args = {"check_same_thread": False, "timeout": 30} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency function that provides a database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
