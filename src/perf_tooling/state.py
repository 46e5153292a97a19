"""Process state owned by one ContentEngine instance.

Passed by reference to the render cache and the enrichment coordinator so
several independent instances can coexist (one per test, for example).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from perf_tooling.config import SiteSettings

if TYPE_CHECKING:
    from perf_tooling.models.enrichment import Contributor, PersonProfile
    from perf_tooling.models.entry import Entry


@dataclass
class ContentState:
    # category name → entries in load order; never reordered or shrunk
    lists: dict[str, list[Entry]] = field(default_factory=dict)

    # twitter handle (no "@") → profile shared by every entry citing it
    people: dict[str, PersonProfile] = field(default_factory=dict)

    # None until the first successful contributor fetch
    contributors: list[Contributor] | None = None

    platforms: list[str] = field(default_factory=list)
    site: SiteSettings = field(default_factory=SiteSettings)

    def has_category(self, category: str) -> bool:
        return category in self.lists

    def find(self, category: str, slug: str) -> Entry | None:
        for entry in self.lists.get(category, ()):
            if entry.slug == slug:
                return entry
        return None

    def categories_citing(self, handle: str) -> set[str]:
        return {
            category
            for category, entries in self.lists.items()
            if any(entry.twitter_handle == handle for entry in entries)
        }

    def resource_counts(self) -> dict[str, int]:
        return {category: len(entries) for category, entries in self.lists.items()}
