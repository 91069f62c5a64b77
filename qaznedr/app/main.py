import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from qaznedr.app.api import pages
from qaznedr.app.api.v1.api import api_router
from qaznedr.app.core.config import settings
from qaznedr.app.core.i18n import DictionaryLoader
from qaznedr.app.core.locales import ensure_shared_registry, locale_registry
from qaznedr.app.middleware.language import LocaleMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

dictionary_loader = DictionaryLoader(locale_registry)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    ensure_shared_registry(app.state.dictionary_loader, app.state)
    yield


app = FastAPI(title="QAZNEDR.KZ Marketplace", lifespan=lifespan)
app.state.registry = locale_registry
app.state.dictionary_loader = dictionary_loader

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "Accept-Language",
        settings.CSRF_HEADER_NAME,
    ],
    expose_headers=[settings.CSRF_HEADER_NAME],
)
app.add_middleware(LocaleMiddleware, registry=locale_registry)

# Order matters: /api and /locales must win over the /{locale}/... catch-all
app.include_router(api_router)
app.mount(
    "/locales",
    StaticFiles(directory=dictionary_loader.locales_dir),
    name="locales",
)
app.include_router(pages.router)
