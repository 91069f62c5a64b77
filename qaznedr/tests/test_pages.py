"""Locale-prefixed pages and the static dictionary resources."""

from __future__ import annotations

from pathlib import Path

from fastapi.testclient import TestClient

from qaznedr.app.core.i18n import DictionaryLoader
from qaznedr.app.main import app


class TestLocalePages:
    def test_resolves_locale_and_messages(self, client: TestClient) -> None:
        resp = client.get("/kz/listings")
        assert resp.status_code == 200
        body = resp.json()
        assert body["locale"] == "kz"
        assert body["label"] == "Қазақша"
        assert body["path"] == "/listings"
        assert body["messages"]["navigation"]["listings"] == "Хабарландырулар"
        assert [o["code"] for o in body["locales"]] == ["ru", "kz", "en", "zh"]

    def test_locale_home(self, client: TestClient) -> None:
        body = client.get("/en").json()
        assert body["path"] == "/"
        assert body["messages"]["common"]["close"] == "Close"

    def test_users_path_with_dot(self, client: TestClient) -> None:
        resp = client.get("/en/users/42.data")
        assert resp.status_code == 200
        assert resp.json()["path"] == "/users/42.data"

    def test_unknown_locale_is_not_found(self, client: TestClient) -> None:
        resp = client.get("/xx/listings")
        assert resp.status_code == 404
        assert resp.json() == {"detail": "Not Found"}

    def test_broken_dictionary_is_not_found(self, client: TestClient, tmp_path: Path) -> None:
        (tmp_path / "ru").mkdir()
        (tmp_path / "ru" / "common.json").write_text("[]", encoding="utf-8")
        original = app.state.dictionary_loader
        app.state.dictionary_loader = DictionaryLoader(original.registry, locales_dir=tmp_path)
        try:
            assert client.get("/ru/listings").status_code == 404
            # en has no file in tmp_path at all
            assert client.get("/en/listings").status_code == 404
        finally:
            app.state.dictionary_loader = original


class TestDictionaryResources:
    def test_served_per_locale(self, client: TestClient) -> None:
        resp = client.get("/locales/zh/common.json")
        assert resp.status_code == 200
        assert resp.json()["navigation"]["map"] == "地图"
        assert "set-cookie" not in resp.headers

    def test_unknown_resource(self, client: TestClient) -> None:
        assert client.get("/locales/xx/common.json").status_code == 404
