from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from perf_tooling.errors import ErrorCode, PerfToolingError
from perf_tooling.models.enrichment import PersonProfile
from perf_tooling.providers.base import bad_payload, fetch_json

if TYPE_CHECKING:
    import httpx

    from perf_tooling.config import TwitterSettings

API_URL = "https://api.twitter.com/2/users/by/username/"


def parse_profile(user: Any) -> PersonProfile:
    metrics = user.get("public_metrics") or {}
    return PersonProfile(
        description=user.get("description") or "",
        follower_count=metrics.get("followers_count") or 0,
        image=user.get("profile_image_url"),
    )


class TwitterClient:
    name = "twitter"

    def __init__(self, client: httpx.AsyncClient, settings: TwitterSettings) -> None:
        self._client = client
        self._settings = settings

    @property
    def configured(self) -> bool:
        return bool(self._settings.bearer_token)

    async def fetch_profile(self, handle: str) -> PersonProfile:
        payload = await fetch_json(
            self._client,
            f"{API_URL}{handle}",
            provider=self.name,
            params={"user.fields": "description,profile_image_url,public_metrics"},
            headers={"Authorization": f"Bearer {self._settings.bearer_token}"},
        )
        if not isinstance(payload, dict):
            raise bad_payload(self.name, f"profile {handle}")
        user = payload.get("data")
        if user is None:
            # Unknown or suspended users come back as 200 with an errors list
            raise PerfToolingError(
                ErrorCode.PROVIDER_NOT_FOUND,
                f"{self.name}: no user {handle}",
                recoverable=False,
            )
        try:
            return parse_profile(user)
        except (AttributeError, TypeError, ValidationError) as exc:
            raise bad_payload(self.name, f"profile {handle}: {exc!r}") from exc
