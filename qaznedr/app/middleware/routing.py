"""Which request paths go through locale resolution.

A path is locale-governed unless it is under an API or asset prefix, or
one of its segments contains a dot (a file reference).  Paths shaped
``/{segment}/users/{rest}`` stay governed even when they contain a dot;
the prefix exclusions still apply to them.
"""

from __future__ import annotations

import re

# Matched against the whole first segment: /api/... is excluded, /apiary is not.
EXCLUDED_PREFIXES: tuple[str, ...] = (
    "api",
    "_next",
    "_vercel",
    "static",
    "locales",
    "docs",
    "redoc",
)

_USERS_PATH = re.compile(r"^/(?:[\w-]+/)?users/.+$")


def _segments(path: str) -> list[str]:
    return [s for s in path.split("/") if s]


def is_locale_governed(path: str) -> bool:
    segments = _segments(path)
    if segments and segments[0] in EXCLUDED_PREFIXES:
        return False
    if _USERS_PATH.match(path):
        return True
    return not any("." in s for s in segments)


def locale_segment(path: str) -> str | None:
    """First path segment, or None for ``/``."""
    segments = _segments(path)
    return segments[0] if segments else None
