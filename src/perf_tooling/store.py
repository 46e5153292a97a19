"""Flat-file entry store: one directory per category, one JSON record per file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from perf_tooling.fuzzy import tokenize
from perf_tooling.models.entry import Entry

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

log = structlog.get_logger()


def load_category(data_dir: Path, category: str, platforms: Sequence[str]) -> list[Entry]:
    """Load every record of *category*, skipping hidden files and bad records.

    A record that is not valid JSON or fails validation is logged and
    skipped; it never prevents the rest of the category from loading.
    """
    category_dir = data_dir / category
    if not category_dir.is_dir():
        log.warning("category_dir_missing", category=category, path=str(category_dir))
        return []

    entries: list[Entry] = []
    for path in sorted(category_dir.iterdir()):
        if path.name.startswith(".") or not path.is_file():
            continue
        try:
            entry = Entry.model_validate_json(path.read_text(encoding="utf-8"))
        except (ValidationError, OSError, UnicodeDecodeError) as exc:
            log.warning(
                "entry_parse_error",
                category=category,
                path=str(path),
                error=str(exc),
            )
            continue

        entry.slug = path.stem
        entry.fuzzy = tokenize(entry, platforms)
        entry.hidden = False
        entries.append(entry)

    log.info("category_loaded", category=category, count=len(entries))
    return entries


def load_store(
    data_dir: Path, categories: Iterable[str], platforms: Sequence[str]
) -> dict[str, list[Entry]]:
    return {category: load_category(data_dir, category, platforms) for category in categories}
