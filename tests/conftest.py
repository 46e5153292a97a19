"""Shared fixtures: an on-disk entry store and an engine loaded from it."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

from perf_tooling.config import Settings
from perf_tooling.engine import ContentEngine

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

LIGHTHOUSE = {
    "name": "Lighthouse",
    "description": "Audits web pages",
    "type": "tool",
    "tags": ["CLI", "Perf"],
    "cli": "https://github.com/GoogleChrome/lighthouse#readme",
    "chrome": "https://chrome.google.com/webstore/detail/lighthouse",
}

WEBPAGETEST = {
    "name": "WebPageTest",
    "description": "Measure page speed from real browsers",
    "type": "tool",
    "tags": ["service"],
    "service": "https://www.webpagetest.org",
    "module": "https://github.com/marcelduran/webpagetest-api",
}

YOUTUBE_VIDEO = {
    "name": "Fast by default",
    "description": "Keynote",
    "type": "video",
    "youtubeId": "yt-abc",
    "social": {"twitter": "@addyosmani"},
}

VIMEO_VIDEO = {
    "name": "Jank free",
    "description": "Rendering talk",
    "type": "video",
    "vimeoId": "7777",
    "social": {"twitter": "addyosmani"},
}

ARTICLE = {
    "name": "Critical rendering path",
    "description": "How browsers paint",
    "type": "article",
    "tags": ["rendering"],
    "url": "https://developers.google.com/web/fundamentals/performance/critical-rendering-path",
    "social": {"twitter": "@igrigorik"},
}


def write_record(directory: Path, name: str, payload: dict[str, Any] | str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    text = payload if isinstance(payload, str) else json.dumps(payload)
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    """Store with 3 tool records (one invalid), 2 videos, 1 article."""
    root = tmp_path / "data"
    write_record(root / "tools", "lighthouse.json", LIGHTHOUSE)
    write_record(root / "tools", "webpagetest.json", WEBPAGETEST)
    write_record(root / "tools", "zz-broken.json", '{"name": "Broken", ')
    write_record(root / "tools", ".DS_Store", "binary junk")
    write_record(root / "videos", "fast-by-default.json", YOUTUBE_VIDEO)
    write_record(root / "videos", "jank-free.json", VIMEO_VIDEO)
    write_record(root / "articles", "crp.json", ARTICLE)
    (root / "books").mkdir()
    (root / "slides").mkdir()
    return root


@pytest.fixture()
def settings(data_dir: Path) -> Settings:
    """Settings pointing at the fixture store, with every provider configured."""
    return Settings(
        store={"data_dir": str(data_dir)},
        github={"token": "gh-token"},
        youtube={"api_key": "yt-key"},
        vimeo={"access_token": "vimeo-token"},
        twitter={"bearer_token": "tw-token"},
    )


@pytest.fixture()
def bare_settings(data_dir: Path) -> Settings:
    """Settings pointing at the fixture store, with no provider credentials."""
    return Settings(store={"data_dir": str(data_dir)})


@pytest.fixture()
def engine(settings: Settings) -> ContentEngine:
    return ContentEngine.from_settings(settings)


@pytest.fixture()
def write() -> Callable[..., Path]:
    """Expose ``write_record`` to tests that add records to the store."""
    return write_record


@pytest.fixture()
def youtube_payload() -> dict[str, Any]:
    """A ``videos.list`` response for the fixture store's YouTube video."""
    return {
        "items": [
            {
                "snippet": {
                    "title": "Fast by default",
                    "publishedAt": "2016-05-19T17:00:00Z",
                    "thumbnails": {
                        "medium": {
                            "url": "https://i.ytimg.com/vi/yt-abc/mq.jpg",
                            "width": 320,
                            "height": 180,
                        }
                    },
                },
                "statistics": {"viewCount": "15230", "likeCount": "310", "dislikeCount": "4"},
            }
        ]
    }


@pytest.fixture()
def vimeo_payload() -> dict[str, Any]:
    """A ``/videos/{id}`` response for the fixture store's Vimeo video."""
    return {
        "name": "Jank free",
        "link": "https://vimeo.com/7777",
        "duration": 1800,
        "created_time": "2015-02-01T10:00:00+00:00",
        "pictures": {
            "sizes": [
                {"link": "https://i.vimeocdn.com/100.jpg", "width": 100, "height": 75},
                {"link": "https://i.vimeocdn.com/200.jpg", "width": 200, "height": 150},
                {"link": "https://i.vimeocdn.com/295.jpg", "width": 295, "height": 166},
                {"link": "https://i.vimeocdn.com/640.jpg", "width": 640, "height": 360},
            ]
        },
        "stats": {"plays": 900},
        "metadata": {"connections": {"likes": {"total": 12}}},
    }
