from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from qaznedr.app.api.deps import get_current_user, require_csrf
from qaznedr.app.core.database import get_db
from qaznedr.app.models.deposit import ListingType
from qaznedr.app.models.user import User
from qaznedr.app.schemas.listing import (
    ListingCreate,
    ListingFilters,
    ListingOut,
    ListingPage,
    ListingUpdate,
)
from qaznedr.app.services.listings import (
    ListingNotFound,
    ListingPermissionDenied,
    create_listing,
    delete_listing,
    list_listings,
    list_user_listings,
    update_listing,
    view_listing,
)

router = APIRouter()


def _http_error(e: ValueError) -> HTTPException:
    if isinstance(e, ListingNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, ListingPermissionDenied):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/listings", response_model=ListingPage)
def get_listings(
    db: Session = Depends(get_db),
    query: str | None = None,
    region: str | None = None,
    mineral: str | None = None,
    type: ListingType | None = None,
    verified: bool | None = None,
    featured: bool | None = None,
    price_min: float | None = None,
    price_max: float | None = None,
    area_min: float | None = None,
    area_max: float | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
) -> ListingPage:
    try:
        filters = ListingFilters(
            query=query,
            region=region,
            mineral=mineral,
            type=type,
            verified=verified,
            featured=featured,
            price_min=price_min,
            price_max=price_max,
            area_min=area_min,
            area_max=area_max,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False),
        )
    return list_listings(db, filters)


@router.get("/listings/{deposit_id}", response_model=ListingOut)
def get_listing_detail(deposit_id: UUID, db: Session = Depends(get_db)) -> ListingOut:
    try:
        listing = view_listing(db, deposit_id)
    except ValueError as e:
        raise _http_error(e)
    db.commit()
    return listing


@router.post(
    "/listings",
    response_model=ListingOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf)],
)
def create_new_listing(
    payload: ListingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ListingOut:
    listing = create_listing(db, payload, current_user)
    db.commit()
    return listing


@router.put(
    "/listings/{deposit_id}",
    response_model=ListingOut,
    dependencies=[Depends(require_csrf)],
)
def update_existing_listing(
    deposit_id: UUID,
    payload: ListingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ListingOut:
    try:
        listing = update_listing(db, deposit_id, payload, current_user)
    except ValueError as e:
        raise _http_error(e)
    db.commit()
    return listing


@router.delete(
    "/listings/{deposit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_csrf)],
)
def delete_existing_listing(
    deposit_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    try:
        delete_listing(db, deposit_id, current_user)
    except ValueError as e:
        raise _http_error(e)
    db.commit()


@router.get("/my-listings", response_model=list[ListingOut])
def get_my_listings(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[ListingOut]:
    return list_user_listings(db, current_user)
