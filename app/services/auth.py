import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import JWT_ALGORITHM, TOKEN_EXPIRE_DAYS, get_jwt_secret
from app.errors import AuthenticationError

logger = logging.getLogger("quill.auth")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plain text password using the configured password hashing context"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify if a plain text password matches its hashed version"""
    return pwd_context.verify(plain_password, hashed_password)


def create_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Issue a signed session token carrying the user id.

    There is no refresh or revocation: a token stays valid until ``exp``.
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=TOKEN_EXPIRE_DAYS))
    return jwt.encode({"userId": user_id, "exp": expire}, get_jwt_secret(), algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> int:
    """Return the user id from a session token or raise AuthenticationError."""
    try:
        payload = jwt.decode(token, get_jwt_secret(), algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.warning("Token validation failed: %s", e)
        raise AuthenticationError("Not authorized, token failed")

    user_id = payload.get("userId")
    if not isinstance(user_id, int):
        logger.warning("Token payload without a user id")
        raise AuthenticationError("Not authorized, token failed")
    return user_id
