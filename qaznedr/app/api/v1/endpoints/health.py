from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from qaznedr.app.core.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def health(request: Request, db: Session = Depends(get_db)) -> dict[str, Any]:
    try:
        db.execute(text("SELECT 1"))
        database = True
    except SQLAlchemyError:
        logger.exception("Health check: database unreachable")
        database = False
    registry = request.app.state.dictionary_loader.registry
    return {
        "status": "ok" if database else "degraded",
        "database": database,
        "locales": list(registry.locales),
        "default_locale": registry.default,
    }
