from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from qaznedr.app.core.config import settings
from qaznedr.app.core.database import get_db
from qaznedr.app.core.security import (
    create_access_token,
    generate_csrf_token,
    revoke_token,
)
from qaznedr.app.middleware.rate_limit import InMemoryRateLimiter
from qaznedr.app.schemas.auth import (
    CsrfTokenOut,
    RegisterIn,
    RegisterOut,
    TokenOut,
    UserPublic,
)
from qaznedr.app.services.user_management import authenticate, register_user

router = APIRouter()

# In-memory per-IP rate limiters. Not shared between replicas.
login_limiter = InMemoryRateLimiter(
    window_seconds=settings.LOGIN_RATE_LIMIT_WINDOW,
    max_attempts=settings.LOGIN_RATE_LIMIT_ATTEMPTS,
)
register_limiter = InMemoryRateLimiter(
    window_seconds=settings.LOGIN_RATE_LIMIT_WINDOW,
    max_attempts=settings.REGISTER_RATE_LIMIT_ATTEMPTS,
)


@router.post(
    "/register",
    response_model=RegisterOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(register_limiter)],
)
def register(payload: RegisterIn, db: Session = Depends(get_db)) -> RegisterOut:
    try:
        user = register_user(
            db, email=payload.email, password=payload.password, name=payload.name
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    db.commit()
    db.refresh(user)
    return RegisterOut(
        message="User created successfully", user=UserPublic.model_validate(user)
    )


@router.post(
    "/login/access-token",
    response_model=TokenOut,
    dependencies=[Depends(login_limiter)],
)
def login_access_token(
    db: Session = Depends(get_db),
    form_data: OAuth2PasswordRequestForm = Depends(),
) -> TokenOut:
    user = authenticate(db, email=form_data.username, password=form_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user"
        )
    return TokenOut(access_token=create_access_token(subject=str(user.id)))


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login/access-token")


@router.post("/logout")
def logout(token: str = Depends(oauth2_scheme)) -> dict[str, str]:
    """Invalidate the current access token."""
    revoke_token(token)
    return {"detail": "Logged out successfully"}


@router.get("/csrf", response_model=CsrfTokenOut)
def issue_csrf_token(response: Response) -> CsrfTokenOut:
    """Set the CSRF cookie; clients echo it in the ``X-CSRF-Token`` header."""
    token = generate_csrf_token()
    response.set_cookie(
        settings.CSRF_COOKIE_NAME,
        token,
        max_age=settings.CSRF_COOKIE_MAX_AGE,
        path="/",
        samesite="strict",
        httponly=False,
    )
    response.headers[settings.CSRF_HEADER_NAME] = token
    return CsrfTokenOut(csrf_token=token)
