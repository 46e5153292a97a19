from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from perf_tooling.models.enrichment import Enrichment

ENGINE_FIELDS = frozenset({"slug", "fuzzy", "hidden", "enrichment"})


class Social(BaseModel):
    model_config = ConfigDict(extra="allow")

    twitter: str | None = None


class Entry(BaseModel):
    """One cataloged resource read from the entry store.

    Category-specific fields (platform links such as ``cli`` or ``chrome``,
    ``author``, ``url`` ...) are kept as extras and exposed through
    ``extra_fields``.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    description: str = ""
    type: str = ""
    tags: list[str] = []
    social: Social | None = None
    youtube_id: str | None = Field(default=None, alias="youtubeId")
    vimeo_id: str | None = Field(default=None, alias="vimeoId")

    # Derived at load time, owned by the engine
    slug: str = ""
    fuzzy: str = ""
    hidden: bool = False
    enrichment: Enrichment = Field(default_factory=Enrichment)

    @model_validator(mode="before")
    @classmethod
    def _drop_engine_fields(cls, data: Any) -> Any:
        """Ignore engine-owned keys in record input; they start at their defaults."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if key not in ENGINE_FIELDS}
        return data

    @property
    def extra_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    @property
    def twitter_handle(self) -> str | None:
        """Twitter handle without the leading ``@``, or None."""
        if self.social is None or not self.social.twitter:
            return None
        return self.social.twitter.strip().lstrip("@") or None
