"""Listing queries and owner-checked mutations.

Mutations flush but never commit; the calling endpoint commits.
"""

from __future__ import annotations

import math
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from qaznedr.app.models.deposit import Favorite, KazakhstanDeposit, ListingStatus
from qaznedr.app.models.user import User
from qaznedr.app.schemas.listing import (
    Coordinates,
    ListingCreate,
    ListingFilters,
    ListingOut,
    ListingPage,
    ListingUpdate,
    OwnerOut,
    Pagination,
)


class ListingNotFound(ValueError):
    pass


class ListingPermissionDenied(ValueError):
    pass


def to_listing_out(deposit: KazakhstanDeposit, favorites_count: int = 0) -> ListingOut:
    return ListingOut(
        id=deposit.id,
        title=deposit.title,
        description=deposit.description,
        type=deposit.type,
        mineral=deposit.mineral,
        region=deposit.region,
        city=deposit.city,
        area=deposit.area,
        price=deposit.price,
        coordinates=Coordinates(lat=deposit.latitude, lng=deposit.longitude),
        verified=deposit.verified,
        featured=deposit.featured,
        views=deposit.views,
        status=deposit.status,
        user_id=deposit.user_id,
        owner=OwnerOut.model_validate(deposit.owner) if deposit.owner else None,
        favorites_count=favorites_count,
        created_at=deposit.created_at,
        updated_at=deposit.updated_at,
        license_subtype=deposit.license_subtype,
        license_number=deposit.license_number,
        license_expiry=deposit.license_expiry,
        annual_production_limit=deposit.annual_production_limit,
        exploration_stage=deposit.exploration_stage,
        exploration_start=deposit.exploration_start,
        exploration_end=deposit.exploration_end,
        exploration_budget=deposit.exploration_budget,
        discovery_date=deposit.discovery_date,
        geological_confidence=deposit.geological_confidence,
        estimated_reserves=deposit.estimated_reserves,
        accessibility_rating=deposit.accessibility_rating,
    )


def _favorite_counts(db: Session, deposit_ids: list[UUID]) -> dict[UUID, int]:
    if not deposit_ids:
        return {}
    rows = (
        db.query(Favorite.deposit_id, func.count(Favorite.id))
        .filter(Favorite.deposit_id.in_(deposit_ids))
        .group_by(Favorite.deposit_id)
        .all()
    )
    return {deposit_id: count for deposit_id, count in rows}


def list_listings(db: Session, filters: ListingFilters) -> ListingPage:
    q = db.query(KazakhstanDeposit).options(selectinload(KazakhstanDeposit.owner))

    if filters.query:
        pattern = f"%{filters.query}%"
        q = q.filter(
            or_(
                KazakhstanDeposit.title.ilike(pattern),
                KazakhstanDeposit.description.ilike(pattern),
            )
        )
    if filters.region:
        q = q.filter(KazakhstanDeposit.region == filters.region)
    if filters.mineral:
        q = q.filter(KazakhstanDeposit.mineral == filters.mineral)
    if filters.type:
        q = q.filter(KazakhstanDeposit.type == filters.type)
    if filters.verified is not None:
        q = q.filter(KazakhstanDeposit.verified == filters.verified)
    if filters.featured is not None:
        q = q.filter(KazakhstanDeposit.featured == filters.featured)
    if filters.price_min is not None:
        q = q.filter(KazakhstanDeposit.price >= filters.price_min)
    if filters.price_max is not None:
        q = q.filter(KazakhstanDeposit.price <= filters.price_max)
    if filters.area_min is not None:
        q = q.filter(KazakhstanDeposit.area >= filters.area_min)
    if filters.area_max is not None:
        q = q.filter(KazakhstanDeposit.area <= filters.area_max)

    total = q.count()

    column = getattr(KazakhstanDeposit, filters.sort_by)
    ordering = column.asc() if filters.sort_order == "asc" else column.desc()
    offset = (filters.page - 1) * filters.limit
    deposits = q.order_by(ordering, KazakhstanDeposit.id).offset(offset).limit(filters.limit).all()

    counts = _favorite_counts(db, [d.id for d in deposits])
    total_pages = math.ceil(total / filters.limit) if total else 0
    return ListingPage(
        deposits=[to_listing_out(d, counts.get(d.id, 0)) for d in deposits],
        pagination=Pagination(
            page=filters.page,
            limit=filters.limit,
            total=total,
            total_pages=total_pages,
            has_next=filters.page < total_pages,
            has_prev=filters.page > 1,
        ),
    )


def get_listing(db: Session, deposit_id: UUID) -> KazakhstanDeposit:
    deposit = db.query(KazakhstanDeposit).filter(KazakhstanDeposit.id == deposit_id).first()
    if deposit is None:
        raise ListingNotFound("Listing not found")
    return deposit


def view_listing(db: Session, deposit_id: UUID) -> ListingOut:
    """Return a listing and count the view."""
    deposit = get_listing(db, deposit_id)
    deposit.views = (deposit.views or 0) + 1
    db.flush()
    db.refresh(deposit)
    return to_listing_out(deposit, _favorite_counts(db, [deposit.id]).get(deposit.id, 0))


def list_user_listings(db: Session, user: User) -> list[ListingOut]:
    deposits = (
        db.query(KazakhstanDeposit)
        .filter(KazakhstanDeposit.user_id == user.id)
        .order_by(KazakhstanDeposit.created_at.desc())
        .all()
    )
    counts = _favorite_counts(db, [d.id for d in deposits])
    return [to_listing_out(d, counts.get(d.id, 0)) for d in deposits]


def create_listing(db: Session, data: ListingCreate, owner: User) -> ListingOut:
    """New listings start as unverified, non-featured drafts."""
    fields = data.model_dump(exclude={"coordinates"})
    deposit = KazakhstanDeposit(
        **fields,
        latitude=data.coordinates.lat,
        longitude=data.coordinates.lng,
        verified=False,
        featured=False,
        status=ListingStatus.DRAFT,
        user_id=owner.id,
    )
    db.add(deposit)
    db.flush()
    db.refresh(deposit)
    return to_listing_out(deposit)


def _owned_listing(db: Session, deposit_id: UUID, user: User) -> KazakhstanDeposit:
    deposit = get_listing(db, deposit_id)
    if deposit.user_id != user.id:
        raise ListingPermissionDenied("Permission denied")
    return deposit


def update_listing(
    db: Session, deposit_id: UUID, data: ListingUpdate, user: User
) -> ListingOut:
    deposit = _owned_listing(db, deposit_id, user)
    changes = data.model_dump(exclude_unset=True, exclude={"coordinates"})
    for key, value in changes.items():
        setattr(deposit, key, value)
    if data.coordinates is not None:
        deposit.latitude = data.coordinates.lat
        deposit.longitude = data.coordinates.lng
    db.flush()
    db.refresh(deposit)
    return to_listing_out(deposit, _favorite_counts(db, [deposit.id]).get(deposit.id, 0))


def delete_listing(db: Session, deposit_id: UUID, user: User) -> None:
    deposit = _owned_listing(db, deposit_id, user)
    db.delete(deposit)
    db.flush()
