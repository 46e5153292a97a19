from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from perf_tooling.errors import ErrorCode, PerfToolingError
from perf_tooling.models.enrichment import VideoMetadata, VideoStats, VideoThumbnail
from perf_tooling.providers.base import bad_payload, fetch_json

if TYPE_CHECKING:
    import httpx

    from perf_tooling.config import YoutubeSettings

API_URL = "https://www.googleapis.com/youtube/v3/videos"
WATCH_URL = "https://www.youtube.com/watch?v="


def parse_video(video_id: str, payload: Any) -> VideoMetadata:
    """Build metadata from a ``videos.list`` response (snippet + statistics).

    Raises KeyError, AttributeError, TypeError or ValidationError on an
    unexpected shape.
    """
    item = payload["items"][0]
    snippet = item["snippet"]
    statistics = item.get("statistics") or {}
    thumbnail = snippet["thumbnails"]["medium"]
    return VideoMetadata(
        title=snippet["title"],
        url=f"{WATCH_URL}{video_id}",
        thumbnail=VideoThumbnail(
            url=thumbnail["url"],
            width=thumbnail.get("width"),
            height=thumbnail.get("height"),
        ),
        stats=VideoStats(
            view_count=statistics.get("viewCount"),
            like_count=statistics.get("likeCount"),
            dislike_count=statistics.get("dislikeCount"),
        ),
        published_at=snippet["publishedAt"],
    )


class YoutubeClient:
    name = "youtube"

    def __init__(self, client: httpx.AsyncClient, settings: YoutubeSettings) -> None:
        self._client = client
        self._settings = settings

    @property
    def configured(self) -> bool:
        return bool(self._settings.api_key)

    async def fetch_video(self, video_id: str) -> VideoMetadata:
        payload = await fetch_json(
            self._client,
            API_URL,
            provider=self.name,
            params={
                "part": "snippet,statistics",
                "id": video_id,
                "key": self._settings.api_key or "",
            },
        )
        if isinstance(payload, dict) and not payload.get("items"):
            # The API answers 200 with an empty list for unknown ids
            raise PerfToolingError(
                ErrorCode.PROVIDER_NOT_FOUND,
                f"{self.name}: no video {video_id}",
                recoverable=False,
            )
        try:
            return parse_video(video_id, payload)
        except (AttributeError, KeyError, IndexError, TypeError, ValidationError) as exc:
            raise bad_payload(self.name, f"video {video_id}: {exc!r}") from exc
