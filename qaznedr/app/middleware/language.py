"""Locale detection, root redirect and preference cookie."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from qaznedr.app.core.config import settings
from qaznedr.app.core.locales import LocaleRegistry, locale_registry
from qaznedr.app.middleware.routing import is_locale_governed, locale_segment

logger = logging.getLogger(__name__)


class LocaleMiddleware(BaseHTTPMiddleware):
    """Expose ``request.state.locale`` and keep the ``locale`` cookie current.

    * ungoverned paths (API, assets) pass through untouched apart from the
      ``Content-Language`` header;
    * ``/`` redirects (302) to ``/{preferred}``;
    * ``/{member}/...`` refreshes the cookie to ``member``;
    * anything else is left for the page routes to reject.
    """

    def __init__(self, app: ASGIApp, registry: LocaleRegistry = locale_registry) -> None:
        super().__init__(app)
        self.registry = registry

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        preferred = self.preferred_locale(request)
        request.state.locale = preferred

        if not is_locale_governed(path):
            response = await call_next(request)
            response.headers["Content-Language"] = preferred
            return response

        segment = locale_segment(path)
        if segment is None:
            logger.debug("Redirecting %s to /%s", path, preferred)
            response = RedirectResponse(_prefixed_url(request, preferred), status_code=302)
            self._set_cookie(response, preferred)
            response.headers["Content-Language"] = preferred
            return response

        if self.registry.is_supported(segment):
            request.state.locale = segment
            response = await call_next(request)
            self._set_cookie(response, segment)
            response.headers["Content-Language"] = segment
            return response

        return await call_next(request)

    def preferred_locale(self, request: Request) -> str:
        """Cookie, then Referer path, then Accept-Language, then default."""
        cookie = request.cookies.get(settings.LOCALE_COOKIE_NAME)
        if self.registry.is_supported(cookie):
            return cookie  # type: ignore[return-value]

        referer = request.headers.get("referer")
        if referer:
            from_referer = locale_segment(urlsplit(referer).path)
            if self.registry.is_supported(from_referer):
                return from_referer  # type: ignore[return-value]

        return parse_accept_language(
            request.headers.get("accept-language", ""), self.registry
        )

    @staticmethod
    def _set_cookie(response: Response, locale: str) -> None:
        response.set_cookie(
            settings.LOCALE_COOKIE_NAME,
            locale,
            max_age=settings.LOCALE_COOKIE_MAX_AGE,
            path="/",
            samesite="lax",
        )


def _prefixed_url(request: Request, locale: str) -> str:
    url = f"/{locale}"
    if request.url.query:
        url = f"{url}?{request.url.query}"
    return url


def parse_accept_language(header: str, registry: LocaleRegistry = locale_registry) -> str:
    """Return the best supported locale from an Accept-Language header.

    Entries are taken in header order; ``kk`` (ISO 639-1 Kazakh) maps to ``kz``.
    """
    for part in header.split(","):
        tag = part.split(";")[0].strip().lower()
        if not tag:
            continue
        # Match full tag or primary subtag (e.g. "ru-RU" → "ru")
        for candidate in (tag, tag.split("-")[0]):
            if candidate == "kk":
                candidate = "kz"
            if registry.is_supported(candidate):
                return candidate
    return registry.default
