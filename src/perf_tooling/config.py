"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (PERF_TOOLING__SERVER__PORT=3000)
  2. perf-tooling.yaml      (searched in cwd, then ~/.config/perf-tooling/)
  3. Hardcoded defaults

The config file is optional; every field has a default. Provider
credentials left unset disable that provider; the site still serves.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CATEGORIES = ["articles", "books", "slides", "tools", "videos"]

DEFAULT_PLATFORMS = [
    "bookmarklet",
    "chrome",
    "firefox",
    "internetExplorer",
    "safari",
    "mac",
    "windows",
    "linux",
    "cli",
    "module",
    "grunt",
    "gulp",
    "javascript",
    "php",
    "service",
]


def _find_config_file() -> str | None:
    """Return the path of the first perf-tooling.yaml found, or None."""
    candidates = [
        Path("perf-tooling.yaml"),
        Path.home() / ".config" / "perf-tooling" / "perf-tooling.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ServerSettings(_Section):
    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: str = "public"


class StoreSettings(_Section):
    data_dir: str = "data"
    categories: list[str] = DEFAULT_CATEGORIES


class SiteSettings(_Section):
    name: str = "Performance tooling today"
    cdn_url: str = ""


class EnrichmentSettings(_Section):
    interval_hours: float = Field(default=12, gt=0)
    timeout_seconds: float = Field(default=20.0, gt=0)
    contributors_repo: str = "stefanjudis/perf-tooling"
    user_agent: str = "perf-tooling.today"


class GithubSettings(_Section):
    client_id: str | None = None
    client_secret: str | None = None
    token: str | None = None

    @property
    def configured(self) -> bool:
        return bool(self.token or (self.client_id and self.client_secret))


class YoutubeSettings(_Section):
    api_key: str | None = None


class VimeoSettings(_Section):
    access_token: str | None = None


class TwitterSettings(_Section):
    bearer_token: str | None = None


class LoggingSettings(_Section):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: PERF_TOOLING__SERVER__PORT=9090
        env_prefix="PERF_TOOLING__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    store: StoreSettings = StoreSettings()
    site: SiteSettings = SiteSettings()
    platforms: list[str] = DEFAULT_PLATFORMS
    enrichment: EnrichmentSettings = EnrichmentSettings()
    github: GithubSettings = GithubSettings()
    youtube: YoutubeSettings = YoutubeSettings()
    vimeo: VimeoSettings = VimeoSettings()
    twitter: TwitterSettings = TwitterSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
