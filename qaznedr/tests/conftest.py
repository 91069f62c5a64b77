"""Shared test fixtures.

Tests run against an in-memory SQLite database whose tables are created
before and dropped after every test, so tests never pollute each other.
"""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"

from typing import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from qaznedr.app.api.v1.endpoints.auth import login_limiter, register_limiter  # noqa: E402
from qaznedr.app.core.config import settings  # noqa: E402
from qaznedr.app.core.database import Base, SessionLocal, engine, get_db  # noqa: E402
from qaznedr.app.core.security import create_access_token, get_password_hash  # noqa: E402
from qaznedr.app.main import app  # noqa: E402
from qaznedr.app.models.deposit import (  # noqa: E402
    KazakhstanDeposit,
    ListingStatus,
    ListingType,
)
from qaznedr.app.models.user import RoleEnum, User  # noqa: E402


# ─── DB session on a fresh schema ─────────────────────────────────────────────


@pytest.fixture()
def db() -> Generator[Session, None, None]:
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _reset_rate_limits() -> None:
    login_limiter.reset()
    register_limiter.reset()


@pytest.fixture()
def client(db: Session) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the test session."""

    def _override_get_db() -> Generator[Session, None, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ─── Users & auth ─────────────────────────────────────────────────────────────


def _make_user(db: Session, email: str, name: str) -> User:
    user = User(
        email=email,
        name=name,
        hashed_password=get_password_hash("Secret123"),
        role=RoleEnum.SELLER,
        company="Қазнедр Тест ЖШС",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def seller(db: Session) -> User:
    return _make_user(db, "seller@qaznedr.kz", "Seller")


@pytest.fixture()
def other_user(db: Session) -> User:
    return _make_user(db, "other@qaznedr.kz", "Other")


@pytest.fixture()
def seller_token(seller: User) -> str:
    return create_access_token(subject=str(seller.id))


@pytest.fixture()
def other_token(other_user: User) -> str:
    return create_access_token(subject=str(other_user.id))


@pytest.fixture()
def csrf(client: TestClient) -> str:
    """Fetch a CSRF token; the cookie lands in the client's jar."""
    resp = client.get("/api/v1/auth/csrf")
    assert resp.status_code == 200
    return resp.json()["csrf_token"]


def auth(token: str, csrf_token: str | None = None) -> dict[str, str]:
    """Return Authorization (and CSRF) header dict."""
    headers = {"Authorization": f"Bearer {token}"}
    if csrf_token:
        headers[settings.CSRF_HEADER_NAME] = csrf_token
    return headers


# ─── Listings ─────────────────────────────────────────────────────────────────


@pytest.fixture()
def deposits(db: Session, seller: User) -> list[KazakhstanDeposit]:
    rows = [
        KazakhstanDeposit(
            title="Золотое месторождение Акбакай",
            description="Лицензия на добычу золота",
            type=ListingType.MINING_LICENSE,
            mineral="Золото",
            region="Жамбылская",
            city="Мойынкум",
            area=120.5,
            price=5_000_000_000,
            latitude=44.1,
            longitude=72.8,
            verified=True,
            status=ListingStatus.ACTIVE,
            user_id=seller.id,
        ),
        KazakhstanDeposit(
            title="Медный участок Бозшаколь",
            description="Разведка меди",
            type=ListingType.EXPLORATION_LICENSE,
            mineral="Медь",
            region="Павлодарская",
            city="Экибастуз",
            area=80.0,
            price=1_200_000_000,
            latitude=51.8,
            longitude=74.3,
            status=ListingStatus.ACTIVE,
            user_id=seller.id,
        ),
        KazakhstanDeposit(
            title="Угольное рудопроявление",
            description="Рудопроявление угля",
            type=ListingType.MINERAL_OCCURRENCE,
            mineral="Уголь",
            region="Карагандинская",
            city="Караганда",
            area=15.0,
            price=None,
            latitude=49.8,
            longitude=73.1,
            featured=True,
            status=ListingStatus.ACTIVE,
            user_id=seller.id,
        ),
    ]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    return rows
