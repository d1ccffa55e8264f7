"""
Contains authentication-related helpers: password hashing, JWT creation and
validation, and the dependency that resolves the caller from a bearer token.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from .core.config import settings
from .errors import AuthError
from .repositories.base import Repositories
from .repositories.provider import get_repositories

# --- Configuration ---
ALGORITHM = "HS256"

# We use bcrypt as the hashing algorithm
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Missing credentials are reported by get_current_user, not by the scheme
bearer_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifies a plain-text password against a hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hashes a plain-text password using bcrypt."""
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Creates a new JWT access token.

    Args:
        data (dict): The payload to encode in the token (e.g., user ID).
        expires_delta (timedelta, optional): Token lifetime. Defaults to
            ACCESS_TOKEN_EXPIRE_DAYS.

    Returns:
        str: The encoded JWT token.
    """
    to_encode = data.copy()
    # Set the token expiration time
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode.update({"exp": expire})
    # Encode the token with the secret key and algorithm
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> int:
    """
    Validates a token and returns the user id from its 'sub' claim.

    Raises:
        AuthError: If the token is malformed, expired, or has no usable subject.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise AuthError("Not authorized, token failed")
    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise AuthError("Not authorized, token failed")


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    repos: Repositories = Depends(get_repositories),
):
    """
    FastAPI dependency to secure endpoints and retrieve the current user.

    Args:
        credentials: The bearer credentials extracted by FastAPI, if any.
        repos (Repositories): The request's repository set.

    Raises:
        AuthError: If no token is sent, the token is invalid, or its user no
            longer exists.

    Returns:
        models.User: The authenticated user.
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("Not authorized, no token")

    user = repos.users.get(decode_access_token(credentials.credentials))
    if user is None:
        raise AuthError("Not authorized, user not found")
    return user
