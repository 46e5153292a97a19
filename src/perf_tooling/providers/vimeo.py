from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from perf_tooling.models.enrichment import VideoMetadata, VideoStats, VideoThumbnail
from perf_tooling.providers.base import bad_payload, fetch_json

if TYPE_CHECKING:
    import httpx

    from perf_tooling.config import VimeoSettings

API_URL = "https://api.vimeo.com/videos/"

# Third picture size is the one the list layout is designed around
_PICTURE_INDEX = 2


def parse_video(payload: Any) -> VideoMetadata:
    sizes = payload["pictures"]["sizes"]
    picture = sizes[min(_PICTURE_INDEX, len(sizes) - 1)]
    return VideoMetadata(
        title=payload["name"],
        url=payload["link"],
        thumbnail=VideoThumbnail(
            url=picture["link"],
            width=picture.get("width"),
            height=picture.get("height"),
        ),
        stats=VideoStats(
            view_count=(payload.get("stats") or {}).get("plays"),
            like_count=payload["metadata"]["connections"]["likes"]["total"],
        ),
        published_at=payload["created_time"],
        duration_minutes=payload["duration"] / 60,
    )


class VimeoClient:
    name = "vimeo"

    def __init__(self, client: httpx.AsyncClient, settings: VimeoSettings) -> None:
        self._client = client
        self._settings = settings

    @property
    def configured(self) -> bool:
        return bool(self._settings.access_token)

    async def fetch_video(self, video_id: str) -> VideoMetadata:
        payload = await fetch_json(
            self._client,
            f"{API_URL}{video_id}",
            provider=self.name,
            headers={
                "Authorization": f"bearer {self._settings.access_token}",
                "Accept": "application/vnd.vimeo.*+json;version=3.4",
            },
        )
        try:
            return parse_video(payload)
        except (AttributeError, KeyError, IndexError, TypeError, ValidationError) as exc:
            raise bad_payload(self.name, f"video {video_id}: {exc!r}") from exc
