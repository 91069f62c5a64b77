"""Client-side locale context: switching, ordering, failures and cookie."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from qaznedr.app.client.locale_context import (
    LocaleContext,
    Resolved,
    Switching,
    provide_locale,
    use_locale,
)
from qaznedr.app.core.i18n import Dictionary, InvalidLocale, ProviderMisuse, ResolvedLocale
from qaznedr.app.main import app

DICTS: dict[str, Dictionary] = {
    "ru": {"common": {"close": "Закрыть"}},
    "kz": {"common": {"close": "Жабу"}},
    "en": {"common": {"close": "Close"}},
    "zh": {"common": {"close": "关闭"}},
}

BASE_URL = "http://testserver"


def _code(request: httpx.Request) -> str:
    # /locales/<code>/common.json
    return request.url.path.split("/")[2]


class GatedServer:
    """Serves dictionaries only once the locale's gate is opened."""

    def __init__(self) -> None:
        self.gates = {code: asyncio.Event() for code in DICTS}
        self.requested: list[str] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        code = _code(request)
        self.requested.append(code)
        await self.gates[code].wait()
        return httpx.Response(200, json=DICTS[code])


def _context(handler: object, **kwargs: object) -> tuple[httpx.AsyncClient, LocaleContext]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)  # type: ignore[arg-type]
    ctx = LocaleContext(http, ResolvedLocale("ru", DICTS["ru"]), **kwargs)  # type: ignore[arg-type]
    return http, ctx


def _serve(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=DICTS[_code(request)])


class TestRead:
    def test_initial_pair(self) -> None:
        _, ctx = _context(_serve)
        assert ctx.read() == ("ru", DICTS["ru"])
        assert ctx.state == Resolved("ru", DICTS["ru"])
        assert not ctx.is_switching
        assert ctx.t("common.close") == "Закрыть"

    def test_initial_locale_must_be_member(self) -> None:
        http = httpx.AsyncClient(transport=httpx.MockTransport(_serve), base_url=BASE_URL)
        with pytest.raises(InvalidLocale):
            LocaleContext(http, ResolvedLocale("xx", {}))


class TestSwitch:
    def test_switch_makes_pair_consistent(self) -> None:
        async def scenario() -> tuple[bool, LocaleContext]:
            http, ctx = _context(_serve)
            async with http:
                return await ctx.switch("kz"), ctx

        applied, ctx = asyncio.run(scenario())
        assert applied is True
        assert ctx.read() == ("kz", DICTS["kz"])
        assert ctx.state == Resolved("kz", DICTS["kz"])
        assert ctx.t("common.close") == "Жабу"

    def test_non_member_rejected_without_side_effects(self) -> None:
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(request.url.path)
            return _serve(request)

        http, ctx = _context(handler)
        with pytest.raises(InvalidLocale):
            asyncio.run(ctx.switch("xx"))
        assert ctx.read() == ("ru", DICTS["ru"])
        assert requested == []
        assert http.cookies.get("locale") is None

    def test_reader_sees_old_pair_while_fetching(self) -> None:
        async def scenario() -> None:
            server = GatedServer()
            http, ctx = _context(server.handler)
            async with http:
                task = asyncio.create_task(ctx.switch("en"))
                await asyncio.sleep(0)
                assert ctx.is_switching
                assert ctx.state == Switching("ru", "en", DICTS["ru"])
                assert ctx.read() == ("ru", DICTS["ru"])
                server.gates["en"].set()
                assert await task is True
            assert ctx.read() == ("en", DICTS["en"])

        asyncio.run(scenario())

    def test_later_switch_wins_over_slower_earlier_one(self) -> None:
        async def scenario() -> tuple[LocaleContext, httpx.AsyncClient]:
            server = GatedServer()
            http, ctx = _context(server.handler)
            async with http:
                first = asyncio.create_task(ctx.switch("kz"))
                await asyncio.sleep(0)
                second = asyncio.create_task(ctx.switch("en"))
                await asyncio.sleep(0)

                server.gates["en"].set()
                assert await second is True
                assert ctx.read() == ("en", DICTS["en"])

                server.gates["kz"].set()
                assert await first is False
            return ctx, http

        ctx, http = asyncio.run(scenario())
        assert ctx.read() == ("en", DICTS["en"])
        assert not ctx.is_switching
        assert http.cookies.get("locale") == "en"

    def test_superseded_result_arriving_first_is_discarded(self) -> None:
        async def scenario() -> LocaleContext:
            server = GatedServer()
            http, ctx = _context(server.handler)
            async with http:
                first = asyncio.create_task(ctx.switch("kz"))
                await asyncio.sleep(0)
                second = asyncio.create_task(ctx.switch("zh"))
                await asyncio.sleep(0)

                server.gates["kz"].set()
                assert await first is False
                # Still waiting for zh: the kz dictionary was not applied
                assert ctx.read() == ("ru", DICTS["ru"])
                assert ctx.state == Switching("ru", "zh", DICTS["ru"])

                server.gates["zh"].set()
                assert await second is True
            return ctx

        ctx = asyncio.run(scenario())
        assert ctx.read() == ("zh", DICTS["zh"])


class TestSwitchFailures:
    @pytest.mark.parametrize(
        "respond",
        [
            lambda request: httpx.Response(500, text="boom"),
            lambda request: httpx.Response(404),
            lambda request: httpx.Response(200, text="<html>not json</html>"),
            lambda request: httpx.Response(200, json={"common": {"close": 1}}),
        ],
        ids=["server-error", "missing", "not-json", "bad-shape"],
    )
    def test_previous_dictionary_kept(self, respond: object) -> None:
        http, ctx = _context(respond)
        assert asyncio.run(ctx.switch("kz")) is False
        assert ctx.read() == ("ru", DICTS["ru"])
        assert ctx.state == Resolved("ru", DICTS["ru"])

    @pytest.mark.parametrize("error", [httpx.ConnectError, httpx.ReadTimeout])
    def test_transport_errors_kept_previous(self, error: type[httpx.TransportError]) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise error("unreachable", request=request)

        http, ctx = _context(handler)
        assert asyncio.run(ctx.switch("en")) is False
        assert ctx.read() == ("ru", DICTS["ru"])

    def test_cookie_written_even_when_fetch_fails(self) -> None:
        http, ctx = _context(lambda request: httpx.Response(503))
        asyncio.run(ctx.switch("kz"))
        assert http.cookies.get("locale") == "kz"

    def test_cookie_has_root_path_and_one_year_expiry(self) -> None:
        http, ctx = _context(_serve)
        asyncio.run(ctx.switch("zh"))
        (cookie,) = [c for c in http.cookies.jar if c.name == "locale"]
        assert cookie.value == "zh"
        assert cookie.path == "/"
        assert cookie.expires is not None and not cookie.discard

    def test_timeout_is_passed_to_the_request(self) -> None:
        seen: list[object] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.extensions["timeout"])
            return _serve(request)

        http, ctx = _context(handler, timeout=2.5)
        asyncio.run(ctx.switch("en"))
        assert seen == [{"connect": 2.5, "read": 2.5, "write": 2.5, "pool": 2.5}]


class TestAgainstTheApp:
    def test_hydrate_switch_and_cookie_round_trip(self) -> None:
        async def scenario() -> tuple[LocaleContext, str, httpx.Response]:
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http:
                ctx = await LocaleContext.hydrate(http, "/")
                hydrated = ctx.locale
                assert await ctx.switch("kz") is True
                resp = await http.get("/", follow_redirects=False)
            return ctx, hydrated, resp

        ctx, hydrated, resp = asyncio.run(scenario())
        assert hydrated == "ru"
        assert ctx.read()[0] == "kz"
        assert ctx.t("navigation.listings") == "Хабарландырулар"
        assert resp.status_code == 302
        assert resp.headers["location"] == "/kz"

    def test_hydrate_from_locale_page(self) -> None:
        async def scenario() -> LocaleContext:
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http:
                return await LocaleContext.hydrate(http, "/en/listings")

        ctx = asyncio.run(scenario())
        assert ctx.read()[0] == "en"
        assert ctx.t("common.close") == "Close"


class TestProvider:
    def test_use_outside_provider_fails_loudly(self) -> None:
        with pytest.raises(ProviderMisuse):
            use_locale()

    def test_provided_context_is_returned(self) -> None:
        _, ctx = _context(_serve)
        with provide_locale(ctx):
            assert use_locale() is ctx
        with pytest.raises(ProviderMisuse):
            use_locale()

    def test_nested_providers_restore_outer(self) -> None:
        _, outer = _context(_serve)
        _, inner = _context(_serve)
        with provide_locale(outer):
            with provide_locale(inner):
                assert use_locale() is inner
            assert use_locale() is outer

    def test_tasks_inherit_provider(self) -> None:
        _, ctx = _context(_serve)

        async def read_in_task() -> LocaleContext:
            return use_locale()

        async def scenario() -> LocaleContext:
            with provide_locale(ctx):
                return await asyncio.create_task(read_in_task())

        assert asyncio.run(scenario()) is ctx
