import logging
import os

from dotenv import load_dotenv

load_dotenv()

ENV = os.getenv("ENV", "dev")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./quill.db")

JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
TOKEN_EXPIRE_DAYS = int(os.getenv("TOKEN_EXPIRE_DAYS", "30"))

FRONTEND_URL = os.getenv("FRONTEND_URL")

CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_DEV_JWT_SECRET = "quill-dev-secret-change-me"


def configure_logging():
    """Attach a single console handler to the ``quill`` logger tree."""
    logger = logging.getLogger("quill")
    logger.setLevel(LOG_LEVEL.upper())

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console_handler)

    return logger


def get_jwt_secret() -> str:
    if JWT_SECRET:
        return JWT_SECRET
    if ENV == "prod":
        raise RuntimeError("JWT_SECRET environment variable not set!")
    logging.getLogger("quill.config").warning("JWT_SECRET not set, using development secret")
    return _DEV_JWT_SECRET
