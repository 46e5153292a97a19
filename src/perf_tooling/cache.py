"""In-memory render cache for unfiltered pages.

Pages are rendered lazily: the first ``get`` after start or after an
invalidation renders and stores the page, later calls return the stored
string. Query-filtered pages are rendered per call and never stored, since
the query space is unbounded.

Rendering failures are not caught here. A template error is a programming
error and should surface to the HTTP layer rather than be cached.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

from perf_tooling.errors import ErrorCode, PerfToolingError
from perf_tooling.fuzzy import apply_filter
from perf_tooling.models.cache import RenderedPage

if TYPE_CHECKING:
    from collections.abc import Sequence

    from perf_tooling.models.entry import Entry
    from perf_tooling.renderer import PageRenderer
    from perf_tooling.state import ContentState

log = structlog.get_logger()

INDEX_PAGE = "index"


class RenderCache:
    """Last rendered output per page key ("index" or a category name)."""

    def __init__(self, state: ContentState, renderer: PageRenderer, cdn_url: str = "") -> None:
        self._state = state
        self._renderer = renderer
        self._cdn_url = cdn_url
        self._pages: dict[str, RenderedPage] = {}
        self._versions: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, category: str) -> str:
        """Return the unfiltered page, rendering it if no valid copy exists."""
        self._check_page(category)
        version = self.version(category)
        page = self._pages.get(category)
        if page is not None and page.version == version:
            return page.content

        content = self._render(category, self._state.lists.get(category), query=None)
        self._pages[category] = RenderedPage(
            category=category,
            content=content,
            version=version,
            rendered_at=datetime.now(UTC),
        )
        log.debug("page_rendered", category=category, version=version)
        return content

    def get_filtered(self, category: str, query: str) -> str:
        """Render *category* with non-matching entries hidden. Never cached."""
        self._check_page(category)
        if category == INDEX_PAGE:
            return self.get(category)
        entries = apply_filter(self._state.lists[category], query)
        return self._render(category, entries, query=query)

    def cached(self, category: str) -> RenderedPage | None:
        """Return the stored page for *category* if it is still valid."""
        page = self._pages.get(category)
        if page is None or page.version != self.version(category):
            return None
        return page

    def version(self, category: str) -> int:
        return self._versions.get(category, 0)

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def invalidate(self, category: str) -> None:
        """Drop the stored page; the next ``get`` re-renders it."""
        self._versions[category] = self.version(category) + 1
        self._pages.pop(category, None)
        log.debug("page_invalidated", category=category, version=self._versions[category])

    def invalidate_all(self) -> None:
        for category in [INDEX_PAGE, *self._state.lists]:
            self.invalidate(category)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_page(self, category: str) -> None:
        if category != INDEX_PAGE and not self._state.has_category(category):
            raise PerfToolingError(
                ErrorCode.CATEGORY_NOT_FOUND,
                f"Unknown category: {category!r}",
                recoverable=False,
            )

    def _render(self, category: str, entries: Sequence[Entry] | None, query: str | None) -> str:
        template = INDEX_PAGE if category == INDEX_PAGE else "list"
        return self._renderer.render(template, self._context(category, entries, query))

    def _context(
        self, category: str, entries: Sequence[Entry] | None, query: str | None
    ) -> dict[str, Any]:
        return {
            "cdn": self._cdn_url,
            "contributors": self._state.contributors,
            "people": self._state.people,
            "platforms": self._state.platforms,
            "resource_count": self._state.resource_counts(),
            "site": self._state.site,
            "list": entries,
            "query": query,
            "type": category,
        }
