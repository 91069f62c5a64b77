"""Locale-prefixed page routes.

Markup is produced elsewhere; these routes hand the resolved
``(locale, dictionary)`` pair to the renderer as JSON.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from qaznedr.app.api.deps import get_resolved_locale
from qaznedr.app.core.i18n import ResolvedLocale

router = APIRouter(include_in_schema=False)


def _page(request: Request, resolved: ResolvedLocale, path: str) -> dict[str, Any]:
    registry = request.app.state.dictionary_loader.registry
    return {
        "locale": resolved.locale,
        "label": resolved.label,
        "path": f"/{path}" if path else "/",
        "locales": registry.options(),
        "messages": resolved.dictionary,
    }


@router.get("/{locale}")
def locale_home(
    request: Request,
    resolved: ResolvedLocale = Depends(get_resolved_locale),
) -> dict[str, Any]:
    return _page(request, resolved, "")


@router.get("/{locale}/{path:path}")
def locale_page(
    path: str,
    request: Request,
    resolved: ResolvedLocale = Depends(get_resolved_locale),
) -> dict[str, Any]:
    return _page(request, resolved, path)
