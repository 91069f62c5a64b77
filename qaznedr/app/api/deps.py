from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from qaznedr.app.core.config import settings
from qaznedr.app.core.database import get_db
from qaznedr.app.core.i18n import (
    DictionaryLoader,
    DictionaryLoadFailure,
    InvalidLocale,
    ResolvedLocale,
    resolve_locale,
)
from qaznedr.app.core.security import ALGORITHM, is_token_revoked, validate_csrf_token
from qaznedr.app.models.user import User

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login/access-token")

_SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}


def get_current_user(
    db: Session = Depends(get_db),
    token: str = Depends(oauth2_scheme),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if is_token_revoked(token):
        raise credentials_exception

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        user_id: str | None = payload.get("sub")
        if user_id is None:
            raise credentials_exception
        subject = UUID(user_id)
    except (JWTError, ValueError):
        raise credentials_exception

    user = db.query(User).filter(User.id == subject).first()
    if user is None:
        raise credentials_exception
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user"
        )
    return user


def require_csrf(request: Request) -> None:
    """Double-submit check for state-changing requests."""
    if request.method in _SAFE_METHODS:
        return
    cookie_token = request.cookies.get(settings.CSRF_COOKIE_NAME)
    header_token = request.headers.get(settings.CSRF_HEADER_NAME) or request.headers.get(
        "X-XSRF-Token"
    )
    if not validate_csrf_token(cookie_token, header_token):
        client = request.client.host if request.client else "unknown"
        logger.warning(
            "CSRF validation failed: %s %s from %s", request.method, request.url.path, client
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="CSRF validation failed",
        )


def get_dictionary_loader(request: Request) -> DictionaryLoader:
    return request.app.state.dictionary_loader


async def get_resolved_locale(
    locale: str,
    loader: DictionaryLoader = Depends(get_dictionary_loader),
) -> ResolvedLocale:
    """Resolve the ``{locale}`` path segment or answer 404."""
    try:
        return await resolve_locale(locale, loader)
    except InvalidLocale:
        logger.info("Rejected unsupported locale %r", locale)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    except DictionaryLoadFailure:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
