from fastapi import APIRouter

from qaznedr.app.api.v1.endpoints import auth, favorites, health, listings

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(listings.router, tags=["listings"])
api_router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
