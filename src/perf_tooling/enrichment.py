"""Enrichment coordinator: periodic, concurrent provider fetches.

Four independent tasks (contributors, stars, video metadata, social profiles)
run on first start and then every ``interval_hours``. Each provider call
yields one typed update that is submitted to the engine's queue; the engine
applies it and invalidates affected pages.

Provider failures are caught per call and logged. A failing or slow provider
never blocks the other tasks, and cached pages keep being served meanwhile.
A new cycle is started on schedule even if calls from the previous cycle are
still outstanding; calls already in flight for the same key are skipped.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import TYPE_CHECKING

import structlog

from perf_tooling.errors import ErrorCode, PerfToolingError
from perf_tooling.models.enrichment import (
    ContributorListUpdate,
    ProfileUpdate,
    StarUpdate,
    VideoMetadataUpdate,
)
from perf_tooling.providers.github import GithubClient, repo_from_url
from perf_tooling.providers.twitter import TwitterClient
from perf_tooling.providers.vimeo import VimeoClient
from perf_tooling.providers.youtube import YoutubeClient

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Coroutine
    from typing import Any

    import httpx

    from perf_tooling.config import Settings
    from perf_tooling.engine import ContentEngine
    from perf_tooling.models.enrichment import EnrichmentUpdate
    from perf_tooling.providers.base import Provider

log = structlog.get_logger()

STAR_CATEGORY = "tools"
VIDEO_CATEGORY = "videos"


class EnrichmentCoordinator:
    def __init__(
        self,
        engine: ContentEngine,
        settings: Settings,
        client: httpx.AsyncClient,
        *,
        github: GithubClient | None = None,
        youtube: YoutubeClient | None = None,
        vimeo: VimeoClient | None = None,
        twitter: TwitterClient | None = None,
    ) -> None:
        self._engine = engine
        self._settings = settings.enrichment
        self.github = github or GithubClient(client, settings.github)
        self.youtube = youtube or YoutubeClient(client, settings.youtube)
        self.vimeo = vimeo or VimeoClient(client, settings.vimeo)
        self.twitter = twitter or TwitterClient(client, settings.twitter)

        self._in_flight: set[tuple[str, str]] = set()
        self._tasks: set[asyncio.Task[None]] = set()
        self._scheduler: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Run a cycle now and then every ``interval_hours``."""
        if self._scheduler is None:
            self._scheduler = asyncio.create_task(self._schedule())

    async def stop(self) -> None:
        pending = list(self._tasks)
        if self._scheduler is not None:
            pending.append(self._scheduler)
            self._scheduler = None
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    async def _schedule(self) -> None:
        interval = self._settings.interval_hours * 3600
        while True:
            self._spawn(self.run_cycle())
            await asyncio.sleep(interval)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            log.error("enrichment_cycle_crashed", exc_info=task.exception())

    async def run_cycle(self) -> None:
        log.info("enrichment_cycle_started")
        await asyncio.gather(
            self.fetch_contributors(),
            self.fetch_stars(),
            self.fetch_video_metadata(),
            self.fetch_profiles(),
        )
        log.info("enrichment_cycle_finished", pending_updates=self._engine.pending())

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def fetch_contributors(self) -> None:
        if not self._ready(self.github, "contributors"):
            return
        repo = self._settings.contributors_repo
        await self._call("contributors", repo, partial(self._contributors_update, repo))

    async def fetch_stars(self) -> None:
        if not self._ready(self.github, "stars"):
            return
        calls = []
        for entry in self._engine.state.lists.get(STAR_CATEGORY, []):
            for key, value in entry.extra_fields.items():
                repo = repo_from_url(value) if isinstance(value, str) else None
                if repo is None:
                    continue
                calls.append(
                    self._call(
                        "stars",
                        f"{entry.slug}/{key}",
                        partial(self._star_update, entry.slug, key, repo),
                    )
                )
        await asyncio.gather(*calls)

    async def fetch_video_metadata(self) -> None:
        calls = []
        youtube_ready = self._ready(self.youtube, "videos")
        vimeo_ready = self._ready(self.vimeo, "videos")
        for entry in self._engine.state.lists.get(VIDEO_CATEGORY, []):
            if entry.youtube_id:
                if youtube_ready:
                    fetch = partial(self._youtube_update, entry.slug, entry.youtube_id)
                    calls.append(self._call("youtube", entry.slug, fetch))
            elif entry.vimeo_id and vimeo_ready:
                fetch = partial(self._vimeo_update, entry.slug, entry.vimeo_id)
                calls.append(self._call("vimeo", entry.slug, fetch))
        await asyncio.gather(*calls)

    async def fetch_profiles(self) -> None:
        if not self._ready(self.twitter, "profiles"):
            return
        handles: dict[str, None] = {}
        for entries in self._engine.state.lists.values():
            for entry in entries:
                handle = entry.twitter_handle
                if handle:
                    handles.setdefault(handle, None)
        await asyncio.gather(
            *(
                self._call("twitter", handle, partial(self._profile_update, handle))
                for handle in handles
            )
        )

    # ------------------------------------------------------------------
    # Update builders
    # ------------------------------------------------------------------

    async def _contributors_update(self, repo: str) -> EnrichmentUpdate:
        return ContributorListUpdate(contributors=await self.github.fetch_contributors(repo))

    async def _star_update(self, slug: str, field_key: str, repo: str) -> EnrichmentUpdate:
        stars = await self.github.fetch_stars(repo)
        return StarUpdate(category=STAR_CATEGORY, slug=slug, field_key=field_key, stars=stars)

    async def _youtube_update(self, slug: str, video_id: str) -> EnrichmentUpdate:
        metadata = await self.youtube.fetch_video(video_id)
        return VideoMetadataUpdate(category=VIDEO_CATEGORY, slug=slug, metadata=metadata)

    async def _vimeo_update(self, slug: str, video_id: str) -> EnrichmentUpdate:
        metadata = await self.vimeo.fetch_video(video_id)
        return VideoMetadataUpdate(category=VIDEO_CATEGORY, slug=slug, metadata=metadata)

    async def _profile_update(self, handle: str) -> EnrichmentUpdate:
        return ProfileUpdate(handle=handle, profile=await self.twitter.fetch_profile(handle))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ready(self, provider: Provider, task: str) -> bool:
        if provider.configured:
            return True
        log.warning("provider_not_configured", provider=provider.name, task=task)
        return False

    async def _call(
        self,
        provider: str,
        key: str,
        fetch: Callable[[], Awaitable[EnrichmentUpdate]],
    ) -> bool:
        """Run one provider call and submit its update. Returns True on success."""
        marker = (provider, key)
        if marker in self._in_flight:
            log.debug("provider_call_in_flight", provider=provider, key=key)
            return False

        self._in_flight.add(marker)
        try:
            update = await fetch()
        except PerfToolingError as exc:
            if exc.code == ErrorCode.PROVIDER_NOT_FOUND:
                log.info("provider_not_found", provider=provider, key=key, message=exc.message)
            else:
                log.warning(
                    "provider_call_failed",
                    provider=provider,
                    key=key,
                    code=str(exc.code),
                    message=exc.message,
                )
            return False
        finally:
            self._in_flight.discard(marker)

        self._engine.submit(update)
        return True
