from __future__ import annotations

from perf_tooling.providers.base import build_http_client, fetch_json
from perf_tooling.providers.github import GithubClient, repo_from_url
from perf_tooling.providers.twitter import TwitterClient
from perf_tooling.providers.vimeo import VimeoClient
from perf_tooling.providers.youtube import YoutubeClient

__all__ = [
    "build_http_client",
    "fetch_json",
    "GithubClient",
    "repo_from_url",
    "TwitterClient",
    "VimeoClient",
    "YoutubeClient",
]
