from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from qaznedr.app.api.deps import get_current_user, require_csrf
from qaznedr.app.core.database import get_db
from qaznedr.app.models.user import User
from qaznedr.app.schemas.listing import FavoriteIn, FavoriteOut
from qaznedr.app.services.favorites import add_favorite, list_favorites, remove_favorite
from qaznedr.app.services.listings import ListingNotFound

router = APIRouter()


@router.get("", response_model=list[FavoriteOut])
def get_favorites(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[FavoriteOut]:
    return list_favorites(db, current_user)


@router.post("", dependencies=[Depends(require_csrf)])
def add_to_favorites(
    payload: FavoriteIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, str]:
    try:
        favorite = add_favorite(db, current_user, payload.deposit_id)
    except ListingNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    db.commit()
    return {"id": str(favorite.id), "deposit_id": str(favorite.deposit_id)}


@router.delete("", dependencies=[Depends(require_csrf)])
def remove_from_favorites(
    payload: FavoriteIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, str]:
    remove_favorite(db, current_user, payload.deposit_id)
    db.commit()
    return {"detail": "Removed from favorites"}
