"""Enrichment payloads and the closed set of partial updates providers emit.

Each update names its target explicitly (category + slug, handle, or the
process-wide contributor list) and is applied by ``ContentEngine.apply_update``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class VideoThumbnail(BaseModel):
    url: str
    width: int | None = None
    height: int | None = None


class VideoStats(BaseModel):
    view_count: int | None = None
    like_count: int | None = None
    dislike_count: int | None = None


class VideoMetadata(BaseModel):
    title: str
    url: str
    thumbnail: VideoThumbnail | None = None
    stats: VideoStats = VideoStats()
    published_at: datetime | None = None
    duration_minutes: float | None = None


class Enrichment(BaseModel):
    """Provider-owned field groups of an entry.

    Frozen: a provider replaces its group by assigning a new ``Enrichment``
    built with ``model_copy``, so the other group is carried over untouched.
    """

    model_config = ConfigDict(frozen=True)

    stars: dict[str, int] = {}  # field key → stargazers count
    video: VideoMetadata | None = None


class PersonProfile(BaseModel):
    description: str = ""
    follower_count: int = 0
    image: str | None = None


class Contributor(BaseModel):
    model_config = ConfigDict(extra="ignore")

    login: str
    avatar_url: str | None = None
    html_url: str | None = None
    contributions: int = 0


class StarUpdate(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["stars"] = "stars"
    category: str
    slug: str
    field_key: str
    stars: int


class VideoMetadataUpdate(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["video"] = "video"
    category: str
    slug: str
    metadata: VideoMetadata


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["profile"] = "profile"
    handle: str
    profile: PersonProfile


class ContributorListUpdate(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["contributors"] = "contributors"
    contributors: list[Contributor]


EnrichmentUpdate = Annotated[
    StarUpdate | VideoMetadataUpdate | ProfileUpdate | ContributorListUpdate,
    Field(discriminator="kind"),
]
