"""Seed the database with a demo seller and a handful of deposits.

Usage:
    python -m qaznedr.scripts.seed
"""

from __future__ import annotations

from qaznedr.app.core.database import SessionLocal
from qaznedr.app.core.security import get_password_hash
from qaznedr.app.models.deposit import (
    ExplorationStage,
    KazakhstanDeposit,
    LicenseSubtype,
    ListingStatus,
    ListingType,
)
from qaznedr.app.models.user import RoleEnum, User

DEMO_EMAIL = "test@qaznedr.kz"
DEMO_PASSWORD = "Qaznedr@Demo2025"

DEPOSITS: list[dict[str, object]] = [
    {
        "title": "Золоторудное месторождение Акбакай",
        "description": "Лицензия на добычу золота, подтверждённые запасы.",
        "type": ListingType.MINING_LICENSE,
        "mineral": "Золото",
        "region": "Жамбылская",
        "city": "Мойынкум",
        "area": 120.5,
        "price": 5_000_000_000,
        "latitude": 44.62,
        "longitude": 72.86,
        "verified": True,
        "featured": True,
        "license_subtype": LicenseSubtype.EXTRACTION_RIGHT,
        "license_number": "KZ-ML-2024-0117",
    },
    {
        "title": "Медный участок Бозшаколь-Северный",
        "description": "Разведка медно-порфировых руд, детальная стадия.",
        "type": ListingType.EXPLORATION_LICENSE,
        "mineral": "Медь",
        "region": "Павлодарская",
        "city": "Экибастуз",
        "area": 80.0,
        "price": 1_200_000_000,
        "latitude": 51.85,
        "longitude": 74.32,
        "verified": True,
        "exploration_stage": ExplorationStage.DETAILED,
    },
    {
        "title": "Рудопроявление вольфрама Караоба",
        "description": "Перспективное рудопроявление, требуется доразведка.",
        "type": ListingType.MINERAL_OCCURRENCE,
        "mineral": "Вольфрам",
        "region": "Карагандинская",
        "city": "Балхаш",
        "area": 15.0,
        "price": None,
        "latitude": 47.31,
        "longitude": 74.98,
        "geological_confidence": "INFERRED",
    },
]


def seed() -> None:
    db = SessionLocal()
    try:
        seller = db.query(User).filter_by(email=DEMO_EMAIL).first()
        if seller:
            seller.hashed_password = get_password_hash(DEMO_PASSWORD)
            print("Updated demo seller password.")
        else:
            seller = User(
                email=DEMO_EMAIL,
                name="Демо продавец",
                hashed_password=get_password_hash(DEMO_PASSWORD),
                role=RoleEnum.SELLER,
                company="ТОО «Қазнедр Демо»",
                verified=True,
            )
            db.add(seller)
            db.flush()
            print(f"Created demo seller {DEMO_EMAIL}.")

        for fields in DEPOSITS:
            if db.query(KazakhstanDeposit).filter_by(title=fields["title"]).first():
                continue
            db.add(
                KazakhstanDeposit(**fields, status=ListingStatus.ACTIVE, user_id=seller.id)
            )
            print(f"Created deposit: {fields['title']}")

        db.commit()
        print("Seed complete.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
