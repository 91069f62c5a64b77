"""Client-side locale state: the current locale, its dictionary and switching.

A ``LocaleContext`` is hydrated from the ``(locale, messages)`` pair served
by a locale-prefixed page and then owns in-page locale switches::

    async with httpx.AsyncClient(base_url="https://qaznedr.kz") as http:
        ctx = await LocaleContext.hydrate(http, "/ru/listings")
        with provide_locale(ctx):
            await use_locale().switch("kz")

State is a single tagged value, ``Resolved`` or ``Switching``, replaced as a
whole on every transition so readers never see a locale paired with
another locale's dictionary.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from http.cookiejar import Cookie
from typing import Any, Union

import httpx

from qaznedr.app.core.config import settings
from qaznedr.app.core.i18n import (
    Dictionary,
    DictionaryLoadFailure,
    InvalidLocale,
    ProviderMisuse,
    ResolvedLocale,
    resource_url,
    translate,
    validate_dictionary,
)
from qaznedr.app.core.locales import LocaleRegistry, locale_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolved:
    locale: str
    dictionary: Dictionary


@dataclass(frozen=True)
class Switching:
    """A fetch for ``to_locale`` is in flight; ``dictionary`` is still ``from_locale``'s."""

    from_locale: str
    to_locale: str
    dictionary: Dictionary


LocaleState = Union[Resolved, Switching]


class LocaleContext:
    def __init__(
        self,
        client: httpx.AsyncClient,
        initial: ResolvedLocale,
        registry: LocaleRegistry = locale_registry,
        timeout: float | None = None,
    ) -> None:
        if not registry.is_supported(initial.locale):
            raise InvalidLocale(initial.locale)
        self.registry = registry
        self._client = client
        self._timeout = timeout if timeout is not None else settings.DICTIONARY_FETCH_TIMEOUT
        self._resolved = Resolved(initial.locale, initial.dictionary)
        self._state: LocaleState = self._resolved
        self._generation = 0

    @classmethod
    async def hydrate(
        cls,
        client: httpx.AsyncClient,
        path: str = "/",
        registry: LocaleRegistry = locale_registry,
    ) -> LocaleContext:
        """Build a context from the JSON of a locale-prefixed page."""
        resp = await client.get(path, follow_redirects=True)
        resp.raise_for_status()
        payload: dict[str, Any] = resp.json()
        initial = ResolvedLocale(
            locale=payload["locale"],
            dictionary=validate_dictionary(payload["messages"]),
            label=payload.get("label", ""),
        )
        return cls(client, initial, registry=registry)

    # ─── Reads (never suspend) ───────────────────────────────────────────

    @property
    def state(self) -> LocaleState:
        return self._state

    @property
    def is_switching(self) -> bool:
        return isinstance(self._state, Switching)

    @property
    def locale(self) -> str:
        return self._resolved.locale

    @property
    def dictionary(self) -> Dictionary:
        return self._resolved.dictionary

    def read(self) -> tuple[str, Dictionary]:
        """The last fully resolved ``(locale, dictionary)`` pair."""
        resolved = self._resolved
        return resolved.locale, resolved.dictionary

    def t(self, key: str, **kwargs: Any) -> str:
        return translate(self._resolved.dictionary, key, **kwargs)

    # ─── Switching ───────────────────────────────────────────────────────

    async def switch(self, new_locale: str) -> bool:
        """Fetch *new_locale*'s dictionary and make it current.

        Returns True when this call's result was applied.  False when the
        fetch failed (the previous pair stays current) or a later switch
        superseded this one.  The preference cookie is written either way.
        """
        if not self.registry.is_supported(new_locale):
            raise InvalidLocale(new_locale)

        self._generation += 1
        generation = self._generation
        self._state = Switching(self._resolved.locale, new_locale, self._resolved.dictionary)
        self._persist(new_locale)

        try:
            dictionary = await self._fetch(new_locale)
        except (httpx.HTTPError, DictionaryLoadFailure) as exc:
            logger.warning("Keeping %s: dictionary for %s unavailable (%s)",
                           self._resolved.locale, new_locale, exc)
            self._settle(generation, None)
            return False
        except asyncio.CancelledError:
            self._settle(generation, None)
            raise

        if not self._settle(generation, Resolved(new_locale, dictionary)):
            logger.debug("Discarding superseded dictionary for %s", new_locale)
            return False
        return True

    def _settle(self, generation: int, resolved: Resolved | None) -> bool:
        if generation != self._generation:
            return False
        if resolved is not None:
            self._resolved = resolved
        self._state = self._resolved
        return resolved is not None

    async def _fetch(self, locale: str) -> Dictionary:
        resp = await self._client.get(resource_url(locale), timeout=self._timeout)
        resp.raise_for_status()
        try:
            return validate_dictionary(resp.json())
        except ValueError as exc:
            raise DictionaryLoadFailure(locale, f"Malformed dictionary for {locale!r}") from exc

    def _persist(self, locale: str) -> None:
        """Store ``locale=<code>`` (path ``/``, one year) in the client's jar."""
        cookies = self._client.cookies
        cookies.delete(settings.LOCALE_COOKIE_NAME)
        cookies.jar.set_cookie(
            Cookie(
                version=0,
                name=settings.LOCALE_COOKIE_NAME,
                value=locale,
                port=None,
                port_specified=False,
                domain="",
                domain_specified=False,
                domain_initial_dot=False,
                path="/",
                path_specified=True,
                secure=False,
                expires=int(time.time()) + settings.LOCALE_COOKIE_MAX_AGE,
                discard=False,
                comment=None,
                comment_url=None,
                rest={},
            )
        )


# ─── Provider scope ──────────────────────────────────────────────────────────

_current_context: ContextVar[LocaleContext | None] = ContextVar(
    "locale_context", default=None
)


@contextmanager
def provide_locale(context: LocaleContext) -> Iterator[LocaleContext]:
    """Make *context* available to ``use_locale()`` in the current task."""
    token = _current_context.set(context)
    try:
        yield context
    finally:
        _current_context.reset(token)


def use_locale() -> LocaleContext:
    """Return the provided context; calling it outside a provider is a bug."""
    context = _current_context.get()
    if context is None:
        raise ProviderMisuse("use_locale() must be called inside provide_locale()")
    return context
