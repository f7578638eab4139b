from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional
import jwt
from jwt.exceptions import InvalidTokenError as JWTError

from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher

from flashdash.config.settings import settings
from flashdash.utils.exceptions import ServerMisconfiguredException, UnauthorizedException

password_hasher = PasswordHash((BcryptHasher(rounds=settings.BCRYPT_ROUNDS),))


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return password_hasher.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against a bcrypt hash. Bad or missing hashes never match."""
    if not hashed_password:
        return False
    try:
        return password_hasher.verify(plain_password, hashed_password)
    except Exception:
        return False


@lru_cache()
def _dummy_hash() -> str:
    return hash_password("flashdash-timing-equaliser")


def burn_password_check(plain_password: str) -> None:
    """Spend one bcrypt verification so unknown emails cost the same as known ones."""
    verify_password(plain_password, _dummy_hash())


def create_access_token(
    employee_id: str,
    email: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create the session JWT.

    Claims: sub (employee id), email, role, iat, exp.
    """
    if not settings.JWT_SECRET_KEY:
        raise ServerMisconfiguredException()

    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)

    payload = {
        "sub": employee_id,
        "email": email,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(
        payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )


def decode_token(token: str) -> dict[str, Any]:
    """Decode and verify a session JWT. Raises 401 on any failure."""
    if not settings.JWT_SECRET_KEY:
        raise UnauthorizedException()
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise UnauthorizedException()
    if not payload.get("sub") or not payload.get("role"):
        raise UnauthorizedException()
    return payload
