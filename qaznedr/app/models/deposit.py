from __future__ import annotations

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from qaznedr.app.core.database import Base


class ListingType(str, enum.Enum):
    MINING_LICENSE = "MINING_LICENSE"
    EXPLORATION_LICENSE = "EXPLORATION_LICENSE"
    MINERAL_OCCURRENCE = "MINERAL_OCCURRENCE"


class ListingStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    SOLD = "SOLD"
    PENDING = "PENDING"
    DRAFT = "DRAFT"


class LicenseSubtype(str, enum.Enum):
    EXTRACTION_RIGHT = "EXTRACTION_RIGHT"
    PROCESSING_RIGHT = "PROCESSING_RIGHT"
    TRANSPORTATION_RIGHT = "TRANSPORTATION_RIGHT"
    COMBINED_RIGHT = "COMBINED_RIGHT"


class ExplorationStage(str, enum.Enum):
    PRELIMINARY = "PRELIMINARY"
    DETAILED = "DETAILED"
    FEASIBILITY = "FEASIBILITY"
    ENVIRONMENTAL = "ENVIRONMENTAL"


class KazakhstanDeposit(Base):
    """A marketplace listing: a mining or exploration license, or an occurrence.

    License and exploration fields are only meaningful for the matching
    ``type``; they stay NULL otherwise.
    """

    __tablename__ = "kazakhstan_deposits"
    __table_args__ = (
        Index("ix_deposits_region_mineral", "region", "mineral"),
        Index("ix_deposits_status_created", "status", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[ListingType] = mapped_column(Enum(ListingType), nullable=False)
    mineral: Mapped[str] = mapped_column(String(100), nullable=False)
    region: Mapped[str] = mapped_column(String(100), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    area: Mapped[float] = mapped_column(Float, nullable=False)  # km²
    price: Mapped[float | None] = mapped_column(Float, nullable=True)  # KZT
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    verified: Mapped[bool] = mapped_column(default=False)
    featured: Mapped[bool] = mapped_column(default=False)
    views: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[ListingStatus] = mapped_column(
        Enum(ListingStatus), default=ListingStatus.DRAFT, nullable=False
    )

    # Mining license
    license_subtype: Mapped[LicenseSubtype | None] = mapped_column(
        Enum(LicenseSubtype), nullable=True
    )
    license_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    license_expiry: Mapped[date | None] = mapped_column(Date, nullable=True)
    annual_production_limit: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Exploration license
    exploration_stage: Mapped[ExplorationStage | None] = mapped_column(
        Enum(ExplorationStage), nullable=True
    )
    exploration_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    exploration_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    exploration_budget: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Mineral occurrence
    discovery_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    geological_confidence: Mapped[str | None] = mapped_column(String(50), nullable=True)
    estimated_reserves: Mapped[float | None] = mapped_column(Float, nullable=True)
    accessibility_rating: Mapped[str | None] = mapped_column(String(50), nullable=True)

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    owner: Mapped["User"] = relationship(back_populates="deposits")  # noqa: F821
    favorites: Mapped[list[Favorite]] = relationship(
        back_populates="deposit", cascade="all, delete-orphan"
    )


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "deposit_id", name="uq_favorite_user_deposit"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    deposit_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("kazakhstan_deposits.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped["User"] = relationship(back_populates="favorites")  # noqa: F821
    deposit: Mapped[KazakhstanDeposit] = relationship(back_populates="favorites")
