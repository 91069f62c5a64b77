from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from qaznedr.app.models.deposit import (
    ExplorationStage,
    LicenseSubtype,
    ListingStatus,
    ListingType,
)

SORTABLE_FIELDS = ("created_at", "price", "area", "views", "title")


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class ListingDetails(BaseModel):
    """Type-specific fields shared by create and update payloads."""

    license_subtype: LicenseSubtype | None = None
    license_number: str | None = None
    license_expiry: date | None = None
    annual_production_limit: float | None = None

    exploration_stage: ExplorationStage | None = None
    exploration_start: date | None = None
    exploration_end: date | None = None
    exploration_budget: float | None = None

    discovery_date: date | None = None
    geological_confidence: str | None = None
    estimated_reserves: float | None = None
    accessibility_rating: str | None = None


class ListingCreate(ListingDetails):
    title: str = Field(..., min_length=3, max_length=255)
    description: str = Field(..., min_length=1)
    type: ListingType
    mineral: str = Field(..., min_length=1, max_length=100)
    region: str = Field(..., min_length=1, max_length=100)
    city: str = Field(..., min_length=1, max_length=100)
    area: float
    price: float | None = None
    coordinates: Coordinates

    @field_validator("area")
    @classmethod
    def area_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Area must be greater than zero")
        return v

    @field_validator("price")
    @classmethod
    def price_not_negative(cls, v: float | None) -> float | None:
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative")
        return v


class ListingUpdate(ListingDetails):
    title: str | None = Field(None, min_length=3, max_length=255)
    description: str | None = None
    type: ListingType | None = None
    mineral: str | None = None
    region: str | None = None
    city: str | None = None
    area: float | None = Field(None, gt=0)
    price: float | None = Field(None, ge=0)
    coordinates: Coordinates | None = None
    status: ListingStatus | None = None

    @field_validator(
        "title", "description", "type", "mineral", "region", "city", "area", "status"
    )
    @classmethod
    def not_null(cls, v: object) -> object:
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class OwnerOut(BaseModel):
    id: UUID
    name: str | None
    email: str
    company: str | None
    verified: bool

    class Config:
        from_attributes = True


class ListingOut(ListingDetails):
    id: UUID
    title: str
    description: str
    type: ListingType
    mineral: str
    region: str
    city: str
    area: float
    price: float | None
    coordinates: Coordinates
    verified: bool
    featured: bool
    views: int
    status: ListingStatus
    user_id: UUID
    owner: OwnerOut | None = None
    favorites_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class ListingPage(BaseModel):
    deposits: list[ListingOut]
    pagination: Pagination


class ListingFilters(BaseModel):
    query: str | None = None
    region: str | None = None
    mineral: str | None = None
    type: ListingType | None = None
    verified: bool | None = None
    featured: bool | None = None
    price_min: float | None = None
    price_max: float | None = None
    area_min: float | None = None
    area_max: float | None = None
    sort_by: str = "created_at"
    sort_order: str = "desc"
    page: int = Field(1, ge=1)
    limit: int = Field(12, ge=1, le=100)

    @field_validator("sort_by")
    @classmethod
    def sortable(cls, v: str) -> str:
        if v not in SORTABLE_FIELDS:
            raise ValueError(f"sort_by must be one of {', '.join(SORTABLE_FIELDS)}")
        return v

    @field_validator("sort_order")
    @classmethod
    def order(cls, v: str) -> str:
        if v not in ("asc", "desc"):
            raise ValueError("sort_order must be 'asc' or 'desc'")
        return v


class FavoriteIn(BaseModel):
    deposit_id: UUID


class FavoriteOut(BaseModel):
    id: UUID
    created_at: datetime | None = None
    deposit: ListingOut
