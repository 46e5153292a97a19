"""Aggregation engine: owns content state, applies enrichment updates.

Providers never touch entries directly. They submit typed updates to the
engine's queue and a single consumer applies them one at a time, so two
updates for the same entry and provider serialize (last committed wins) and
a render never observes a half-applied merge.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from perf_tooling.cache import INDEX_PAGE, RenderCache
from perf_tooling.models.enrichment import (
    ContributorListUpdate,
    ProfileUpdate,
    StarUpdate,
    VideoMetadataUpdate,
)
from perf_tooling.renderer import PageRenderer
from perf_tooling.state import ContentState
from perf_tooling.store import load_store

if TYPE_CHECKING:
    from perf_tooling.config import Settings
    from perf_tooling.models.enrichment import EnrichmentUpdate
    from perf_tooling.models.entry import Entry

log = structlog.get_logger()


class ContentEngine:
    def __init__(self, state: ContentState, cache: RenderCache) -> None:
        self.state = state
        self.cache = cache
        self._queue: asyncio.Queue[EnrichmentUpdate] = asyncio.Queue()

    @classmethod
    def from_settings(
        cls, settings: Settings, renderer: PageRenderer | None = None
    ) -> ContentEngine:
        """Load the entry store and build a fresh engine around it."""
        lists = load_store(
            Path(settings.store.data_dir),
            settings.store.categories,
            settings.platforms,
        )
        state = ContentState(lists=lists, platforms=list(settings.platforms), site=settings.site)
        cache = RenderCache(state, renderer or PageRenderer(), cdn_url=settings.site.cdn_url)
        return cls(state, cache)

    # ------------------------------------------------------------------
    # Applying updates
    # ------------------------------------------------------------------

    def apply_update(self, update: EnrichmentUpdate) -> set[str]:
        """Apply one partial update and invalidate the pages it changes.

        Returns the page keys that were invalidated. An update that leaves
        rendered output unchanged invalidates nothing.
        """
        if isinstance(update, StarUpdate):
            affected = self._apply_stars(update)
        elif isinstance(update, VideoMetadataUpdate):
            affected = self._apply_video(update)
        elif isinstance(update, ProfileUpdate):
            affected = self._apply_profile(update)
        elif isinstance(update, ContributorListUpdate):
            affected = self._apply_contributors(update)
        else:
            raise TypeError(f"Unsupported update: {type(update).__name__}")

        for category in sorted(affected):
            self.cache.invalidate(category)
        return affected

    def _target(self, category: str, slug: str, kind: str) -> Entry | None:
        entry = self.state.find(category, slug)
        if entry is None:
            log.warning("update_target_missing", kind=kind, category=category, slug=slug)
        return entry

    def _apply_stars(self, update: StarUpdate) -> set[str]:
        entry = self._target(update.category, update.slug, update.kind)
        if entry is None or entry.enrichment.stars.get(update.field_key) == update.stars:
            return set()
        stars = {**entry.enrichment.stars, update.field_key: update.stars}
        entry.enrichment = entry.enrichment.model_copy(update={"stars": stars})
        return {update.category}

    def _apply_video(self, update: VideoMetadataUpdate) -> set[str]:
        entry = self._target(update.category, update.slug, update.kind)
        if entry is None or entry.enrichment.video == update.metadata:
            return set()
        entry.enrichment = entry.enrichment.model_copy(update={"video": update.metadata})
        return {update.category}

    def _apply_profile(self, update: ProfileUpdate) -> set[str]:
        if self.state.people.get(update.handle) == update.profile:
            return set()
        self.state.people[update.handle] = update.profile
        return self.state.categories_citing(update.handle)

    def _apply_contributors(self, update: ContributorListUpdate) -> set[str]:
        if self.state.contributors == update.contributors:
            return set()
        self.state.contributors = list(update.contributors)
        return {INDEX_PAGE}

    # ------------------------------------------------------------------
    # Update queue
    # ------------------------------------------------------------------

    def submit(self, update: EnrichmentUpdate) -> None:
        self._queue.put_nowait(update)

    def pending(self) -> int:
        return self._queue.qsize()

    def apply_pending(self) -> int:
        """Drain the queue synchronously. Returns the number of updates applied."""
        applied = 0
        while True:
            try:
                update = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return applied
            try:
                self.apply_update(update)
                applied += 1
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        """Wait until every submitted update has been applied by ``run``."""
        await self._queue.join()

    async def run(self) -> None:
        """Consume the update queue until cancelled."""
        log.info("engine_consumer_started")
        while True:
            update = await self._queue.get()
            try:
                affected = self.apply_update(update)
                if affected:
                    log.debug("update_applied", kind=update.kind, pages=sorted(affected))
            except Exception:
                log.error("update_apply_error", kind=update.kind, exc_info=True)
            finally:
                self._queue.task_done()
