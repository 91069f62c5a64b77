"""Locale dictionaries: loading, request-time resolution and lookup."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from qaznedr.app.core.config import settings
from qaznedr.app.core.locales import LocaleRegistry, locale_registry

logger = logging.getLogger(__name__)

Dictionary = dict[str, Union[str, "Dictionary"]]

_BUNDLED_LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"
_RESOURCE_NAME = "common.json"


class LocaleError(Exception):
    """Base class for locale resolution failures."""

    def __init__(self, locale: str | None, message: str) -> None:
        self.locale = locale
        super().__init__(message)


class InvalidLocale(LocaleError):
    """The requested code is not in the registry."""

    def __init__(self, locale: str | None) -> None:
        super().__init__(locale, f"Unsupported locale: {locale!r}")


class DictionaryLoadFailure(LocaleError):
    """The dictionary resource is missing, malformed or unreachable."""


class ProviderMisuse(RuntimeError):
    """A locale context was requested outside of any provider scope."""


def default_locales_dir() -> Path:
    return Path(settings.LOCALES_DIR) if settings.LOCALES_DIR else _BUNDLED_LOCALES_DIR


def resource_url(locale: str) -> str:
    """Public HTTP path of a locale's dictionary."""
    return f"/locales/{locale}/{_RESOURCE_NAME}"


def validate_dictionary(data: Any, _path: str = "") -> Dictionary:
    """Return *data* if it is a well-formed dictionary, else raise ``ValueError``.

    Values must be strings or nested objects of the same shape.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected an object at {_path or '<root>'}")
    for key, value in data.items():
        where = f"{_path}.{key}" if _path else key
        if isinstance(value, dict):
            validate_dictionary(value, where)
        elif not isinstance(value, str):
            raise ValueError(f"Expected a string or object at {where}")
    return data


class DictionaryLoader:
    """Reads per-locale dictionaries from ``<locales_dir>/<code>/common.json``.

    Every call reads the file again.  Failures are raised, never replaced by
    another locale's content; callers decide how to degrade.
    """

    def __init__(
        self,
        registry: LocaleRegistry = locale_registry,
        locales_dir: Path | None = None,
    ) -> None:
        self.registry = registry
        self.locales_dir = locales_dir or default_locales_dir()

    def resource_path(self, locale: str) -> Path:
        return self.locales_dir / locale / _RESOURCE_NAME

    async def load(self, locale: str) -> Dictionary:
        if not self.registry.is_supported(locale):
            raise InvalidLocale(locale)
        return await asyncio.to_thread(self._read, locale)

    def _read(self, locale: str) -> Dictionary:
        path = self.resource_path(locale)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            return validate_dictionary(data)
        except (OSError, ValueError) as exc:
            # json.JSONDecodeError is a ValueError
            logger.warning("Dictionary for %s could not be loaded from %s: %s", locale, path, exc)
            raise DictionaryLoadFailure(locale, f"Cannot load dictionary for {locale!r}") from exc


@dataclass(frozen=True)
class ResolvedLocale:
    """The ``(locale, dictionary)`` pair handed to rendering."""

    locale: str
    dictionary: Dictionary
    label: str = ""


async def resolve_locale(segment: str | None, loader: DictionaryLoader) -> ResolvedLocale:
    """Validate the path segment and load its dictionary, once.

    Raises ``InvalidLocale`` before touching the loader when the segment is
    missing or unsupported; propagates ``DictionaryLoadFailure``.
    """
    registry = loader.registry
    if not registry.is_supported(segment):
        raise InvalidLocale(segment)
    assert segment is not None
    dictionary = await loader.load(segment)
    return ResolvedLocale(locale=segment, dictionary=dictionary, label=registry.label(segment))


def lookup(dictionary: Dictionary, key: str) -> str | None:
    """Resolve a dotted *key* (``"navigation.listings"``) to a string."""
    node: Any = dictionary
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def translate(
    dictionary: Dictionary,
    key: str,
    *,
    fallback: Dictionary | None = None,
    **kwargs: Any,
) -> str:
    """Return the string for *key*.

    Falls back to *fallback*, then to the raw key.
    Supports ``{placeholder}`` interpolation via *kwargs*.
    """
    text = lookup(dictionary, key)
    if text is None and fallback is not None:
        text = lookup(fallback, key)
    if text is None:
        return key
    if kwargs:
        try:
            text = text.format(**kwargs)
        except (KeyError, IndexError):
            pass
    return text
