from __future__ import annotations

import hmac
import re
import secrets
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from qaznedr.app.core.config import settings

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

ALGORITHM = "HS256"

# In-memory token deny-list for logout
# In production with multiple replicas, use a shared store instead
_revoked_tokens: set[str] = set()


def create_access_token(subject: str, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta
        if expires_delta
        else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": subject, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def validate_password_strength(password: str) -> str | None:
    """Return an error message if *password* is too weak, None if valid."""
    if len(password) < 8:
        return "Password must be at least 8 characters"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"\d", password):
        return "Password must contain at least one number"
    return None


def revoke_token(token: str) -> None:
    """Add a token to the deny-list (logout), pruning entries that expired."""
    cleanup_expired_tokens()
    _revoked_tokens.add(token)


def is_token_revoked(token: str) -> bool:
    return token in _revoked_tokens


def cleanup_expired_tokens() -> int:
    """Drop tokens that no longer decode from the deny-list.

    Expired or malformed tokens are rejected by `get_current_user` anyway.
    Returns the number of tokens removed.
    """
    stale: list[str] = []
    for token in _revoked_tokens:
        try:
            jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        except JWTError:
            # ExpiredSignatureError included
            stale.append(token)
    for token in stale:
        _revoked_tokens.discard(token)
    return len(stale)


# ─── CSRF (double-submit cookie) ─────────────────────────────────────────────


def generate_csrf_token() -> str:
    """64 hex characters from 32 random bytes."""
    return secrets.token_hex(32)


def validate_csrf_token(cookie_token: str | None, header_token: str | None) -> bool:
    """True only when both tokens are present and equal."""
    if not cookie_token or not header_token:
        return False
    return hmac.compare_digest(cookie_token.encode(), header_token.encode())
