# recordshop/auth_utils.py
import hashlib
import hmac
import logging
import secrets

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError

from recordshop.config import settings
from recordshop.db.schemas import Principal

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
HASH_SCHEME = "pbkdf2_sha256"
HASH_ITERATIONS = 260000

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/sign-in")


def hash_password(password: str) -> str:
    """Хэширует пароль (PBKDF2-SHA256 с солью)."""
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, HASH_ITERATIONS)
    return f"{HASH_SCHEME}${HASH_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверяет пароль, сравнивая с хэшем."""
    try:
        scheme, iterations, salt, expected = hashed_password.split("$")
        if scheme != HASH_SCHEME:
            return False
        digest = hashlib.pbkdf2_hmac(
            "sha256", plain_password.encode(), bytes.fromhex(salt), int(iterations)
        )
    except ValueError:
        return False
    return hmac.compare_digest(digest.hex(), expected)


def create_access_token(data: dict, secret: str = None) -> str:
    """Signs {userId, username}. No expiry is set."""
    return jwt.encode(data.copy(), secret or settings.token_secret, algorithm=ALGORITHM)


def decode_access_token(token: str, secret: str = None) -> Principal:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="invalid access token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, secret or settings.token_secret, algorithms=[ALGORITHM])
        return Principal.model_validate(payload)
    except (jwt.InvalidTokenError, ValidationError):
        raise credentials_exception


async def get_current_user(token: str = Depends(oauth2_scheme)) -> Principal:
    return decode_access_token(token)
