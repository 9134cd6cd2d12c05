"""Password hashing and access-token helpers."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from threadboard.core.settings import settings

PASSWORD_SCHEME = "pbkdf2_sha256"

pwd_context = CryptContext(
    schemes=[PASSWORD_SCHEME],
    pbkdf2_sha256__default_rounds=settings.password_hash_iterations,
)


def hash_password(password: str, *, iterations: int | None = None) -> str:
    """Return a salted PBKDF2-SHA256 hash in passlib's modular crypt format."""
    if iterations is None:
        return pwd_context.hash(password)
    return pwd_context.handler(PASSWORD_SCHEME).using(rounds=iterations).hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against a stored hash; unknown formats never match."""
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        return False


def create_access_token(user_id: int, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT access token whose subject is the user id."""
    to_encode: dict[str, object] = {"sub": str(user_id)}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> int | None:
    """Return the user id carried by a token, or None if it is invalid."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None
