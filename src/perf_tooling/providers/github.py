"""GitHub: repository star counts and the project's contributor list."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from perf_tooling.models.enrichment import Contributor
from perf_tooling.providers.base import bad_payload, fetch_json

if TYPE_CHECKING:
    import httpx

    from perf_tooling.config import GithubSettings

API_URL = "https://api.github.com"

_REPO_URL_RE = re.compile(r"^https?://(?:www\.)?github\.com/([\w.-]+)/([\w.-]+)")

_contributors_adapter = TypeAdapter(list[Contributor])


def repo_from_url(value: str) -> str | None:
    """Return ``owner/repo`` for a GitHub repository URL, else None.

    Fragments, query strings and deeper paths are ignored.
    """
    match = _REPO_URL_RE.match(value.strip())
    if match is None:
        return None
    owner, repo = match.groups()
    return f"{owner}/{repo.removesuffix('.git')}"


class GithubClient:
    name = "github"

    def __init__(self, client: httpx.AsyncClient, settings: GithubSettings) -> None:
        self._client = client
        self._settings = settings

    @property
    def configured(self) -> bool:
        return self._settings.configured

    def _auth(self) -> tuple[dict[str, str], dict[str, str]]:
        headers = {"Accept": "application/vnd.github+json"}
        params: dict[str, str] = {}
        if self._settings.token:
            headers["Authorization"] = f"Bearer {self._settings.token}"
        elif self._settings.client_id and self._settings.client_secret:
            params = {
                "client_id": self._settings.client_id,
                "client_secret": self._settings.client_secret,
            }
        return headers, params

    async def fetch_stars(self, repo: str) -> int:
        headers, params = self._auth()
        payload = await fetch_json(
            self._client,
            f"{API_URL}/repos/{repo}",
            provider=self.name,
            params=params,
            headers=headers,
        )
        stars = payload.get("stargazers_count") if isinstance(payload, dict) else None
        if not isinstance(stars, int):
            raise bad_payload(self.name, f"no stargazers_count for {repo}")
        return stars

    async def fetch_contributors(self, repo: str) -> list[Contributor]:
        headers, params = self._auth()
        payload = await fetch_json(
            self._client,
            f"{API_URL}/repos/{repo}/contributors",
            provider=self.name,
            params=params,
            headers=headers,
        )
        try:
            return _contributors_adapter.validate_python(payload)
        except ValidationError as exc:
            raise bad_payload(self.name, f"contributors of {repo}: {exc}") from exc
