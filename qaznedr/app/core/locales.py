"""Locale registry: the one list of supported locales, the default and labels."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from qaznedr.app.core.config import settings


@dataclass(frozen=True)
class LocaleRegistry:
    """Immutable set of supported locale codes.

    ``locales`` keeps declaration order (used for selection controls),
    ``default`` must be one of them.  Codes without a label are shown
    upper-cased.
    """

    locales: tuple[str, ...]
    default: str
    labels: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.locales:
            raise ValueError("At least one locale is required")
        if len(set(self.locales)) != len(self.locales):
            raise ValueError(f"Duplicate locale codes: {list(self.locales)}")
        if self.default not in self.locales:
            raise ValueError(
                f"Default locale {self.default!r} is not in {list(self.locales)}"
            )
        labels = {code: self.labels.get(code, code.upper()) for code in self.locales}
        object.__setattr__(self, "locales", tuple(self.locales))
        object.__setattr__(self, "labels", MappingProxyType(labels))

    def __contains__(self, code: object) -> bool:
        return code in self.locales

    def __iter__(self) -> Iterator[str]:
        return iter(self.locales)

    def is_supported(self, code: str | None) -> bool:
        return code is not None and code in self.locales

    def label(self, code: str) -> str:
        """Return the display label for *code*; ``KeyError`` if unsupported."""
        return self.labels[code]

    def options(self) -> list[dict[str, str]]:
        """``[{"code": ..., "label": ...}]`` in declaration order."""
        return [{"code": code, "label": self.labels[code]} for code in self.locales]


def build_registry() -> LocaleRegistry:
    return LocaleRegistry(
        locales=tuple(settings.SUPPORTED_LOCALES),
        default=settings.DEFAULT_LOCALE,
        labels=settings.LOCALE_LABELS,
    )


locale_registry = build_registry()


def ensure_shared_registry(*holders: Any, registry: LocaleRegistry = locale_registry) -> None:
    """Fail startup if any holder carries its own copy of the registry.

    Each holder must expose a ``registry`` attribute.
    """
    for holder in holders:
        held = getattr(holder, "registry", None)
        if held is not registry:
            raise RuntimeError(
                f"{type(holder).__name__} does not use the shared locale registry"
            )
