"""Favorites. Flushes only; the calling endpoint commits."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from qaznedr.app.models.deposit import Favorite, KazakhstanDeposit
from qaznedr.app.models.user import User
from qaznedr.app.schemas.listing import FavoriteOut
from qaznedr.app.services.listings import get_listing, to_listing_out


def list_favorites(db: Session, user: User) -> list[FavoriteOut]:
    favorites = (
        db.query(Favorite)
        .options(selectinload(Favorite.deposit).selectinload(KazakhstanDeposit.owner))
        .filter(Favorite.user_id == user.id)
        .order_by(Favorite.created_at.desc())
        .all()
    )
    return [
        FavoriteOut(id=f.id, created_at=f.created_at, deposit=to_listing_out(f.deposit))
        for f in favorites
    ]


def add_favorite(db: Session, user: User, deposit_id: UUID) -> Favorite:
    """Idempotent: returns the existing row when already favorited."""
    get_listing(db, deposit_id)
    favorite = (
        db.query(Favorite)
        .filter(Favorite.user_id == user.id, Favorite.deposit_id == deposit_id)
        .first()
    )
    if favorite is None:
        favorite = Favorite(user_id=user.id, deposit_id=deposit_id)
        db.add(favorite)
        db.flush()
        db.refresh(favorite)
    return favorite


def remove_favorite(db: Session, user: User, deposit_id: UUID) -> int:
    """Return the number of rows removed (0 or 1)."""
    removed = (
        db.query(Favorite)
        .filter(Favorite.user_id == user.id, Favorite.deposit_id == deposit_id)
        .delete(synchronize_session=False)
    )
    return removed
