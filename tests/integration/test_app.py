"""HTTP surface tests: routing, caching and filtering through the app."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from fastapi.testclient import TestClient

from perf_tooling.engine import ContentEngine
from perf_tooling.enrichment import EnrichmentCoordinator
from perf_tooling.models.enrichment import PersonProfile, ProfileUpdate, StarUpdate
from perf_tooling.server import create_app

if TYPE_CHECKING:
    from pathlib import Path

    from perf_tooling.config import Settings


class TestRoutes:
    def test_index(self, client: TestClient) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Contributors are on their way." in response.text

    def test_category_page(self, client: TestClient) -> None:
        response = client.get("/tools")
        assert response.status_code == 200
        assert "Lighthouse" in response.text
        assert "WebPageTest" in response.text
        assert "Broken" not in response.text

    def test_empty_category(self, client: TestClient) -> None:
        assert client.get("/books").status_code == 200

    def test_unknown_category_is_404(self, client: TestClient) -> None:
        response = client.get("/podcasts")
        assert response.status_code == 404
        assert "podcasts" in response.json()["detail"]


class TestCaching:
    def test_repeated_get_is_identical(self, client: TestClient) -> None:
        first = client.get("/tools").content
        second = client.get("/tools").content
        assert first == second

    def test_update_visible_on_next_get(self, client: TestClient, engine: ContentEngine) -> None:
        assert "1234 stars" not in client.get("/tools").text
        engine.apply_update(
            StarUpdate(category="tools", slug="lighthouse", field_key="cli", stars=1234)
        )
        assert "1234 stars" in client.get("/tools").text

    def test_profile_update_reaches_every_citing_page(
        self, client: TestClient, engine: ContentEngine
    ) -> None:
        profile = PersonProfile(description="Chrome", follower_count=2500)
        engine.apply_update(ProfileUpdate(handle="addyosmani", profile=profile))
        assert "2.5k followers" in client.get("/videos").text
        assert "2.5k followers" not in client.get("/articles").text


class TestFiltering:
    def test_query_hides_non_matching_entries(self, client: TestClient) -> None:
        page = client.get("/tools", params={"q": "lighthouse"}).text
        assert page.count("is-hidden") == 1
        assert 'value="lighthouse"' in page

    def test_query_does_not_touch_cached_page(self, client: TestClient) -> None:
        before = client.get("/tools").content
        client.get("/tools", params={"q": "nothing-matches-this"})
        assert client.get("/tools").content == before
        assert b"is-hidden" not in before

    def test_empty_query_serves_cached_page(self, client: TestClient) -> None:
        assert client.get("/tools", params={"q": ""}).content == client.get("/tools").content

    def test_query_on_index_is_ignored(self, client: TestClient) -> None:
        assert client.get("/", params={"q": "x"}).status_code == 200


class TestLifespan:
    def test_unconfigured_providers_still_serve(self, bare_settings: Settings) -> None:
        engine = ContentEngine.from_settings(bare_settings)
        http_client = httpx.AsyncClient()
        coordinator = EnrichmentCoordinator(engine, bare_settings, http_client)
        app = create_app(engine, coordinator, http_client=http_client)
        with TestClient(app) as client:
            assert client.get("/tools").status_code == 200
        assert http_client.is_closed

    def test_static_files_mounted(self, engine: ContentEngine, tmp_path: Path) -> None:
        static = tmp_path / "public"
        static.mkdir()
        (static / "main.css").write_text("body{}", encoding="utf-8")
        with TestClient(create_app(engine, static_dir=str(static))) as client:
            assert client.get("/static/main.css").text == "body{}"
            response = client.get("/static/main.css")
        assert response.headers["cache-control"] == "public, max-age=31536000"


class TestCompression:
    def test_pages_are_gzipped(self, client: TestClient) -> None:
        response = client.get("/tools", headers={"Accept-Encoding": "gzip"})
        assert response.headers["content-encoding"] == "gzip"
        assert "Lighthouse" in response.text

    def test_plain_when_client_does_not_accept_gzip(self, client: TestClient) -> None:
        response = client.get("/tools", headers={"Accept-Encoding": "identity"})
        assert "content-encoding" not in response.headers

    def test_small_static_file_not_compressed(self, engine: ContentEngine, tmp_path: Path) -> None:
        (tmp_path / "tiny.css").write_text("a{}", encoding="utf-8")
        with TestClient(create_app(engine, static_dir=str(tmp_path))) as client:
            response = client.get("/static/tiny.css", headers={"Accept-Encoding": "gzip"})
        assert "content-encoding" not in response.headers
