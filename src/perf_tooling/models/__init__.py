from __future__ import annotations

from perf_tooling.models.cache import RenderedPage
from perf_tooling.models.enrichment import (
    Contributor,
    ContributorListUpdate,
    Enrichment,
    EnrichmentUpdate,
    PersonProfile,
    ProfileUpdate,
    StarUpdate,
    VideoMetadata,
    VideoMetadataUpdate,
    VideoStats,
    VideoThumbnail,
)
from perf_tooling.models.entry import Entry, Social

__all__ = [
    # entry
    "Entry",
    "Social",
    # enrichment
    "Enrichment",
    "VideoMetadata",
    "VideoStats",
    "VideoThumbnail",
    "PersonProfile",
    "Contributor",
    # updates
    "EnrichmentUpdate",
    "StarUpdate",
    "VideoMetadataUpdate",
    "ProfileUpdate",
    "ContributorListUpdate",
    # cache
    "RenderedPage",
]
