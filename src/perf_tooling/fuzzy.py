"""Fuzzy search tokens and the query match rule.

A token is built once per entry at load time. Query filtering never touches
the canonical entries: ``apply_filter`` works on copies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from perf_tooling.models.entry import Entry

_AUTHOR_FIELDS = ("author", "authors")


def _literal_values(value: object) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    return []


def tokenize(entry: Entry, vocabulary: Iterable[str]) -> str:
    """Build the lowercase search token for *entry*.

    Includes name, description, type, tags, author fields, and every
    vocabulary term naming a field the entry carries or appearing in a tag.
    """
    parts: list[str] = [entry.name, entry.description, entry.type, *entry.tags]

    extras = entry.extra_fields
    for key in _AUTHOR_FIELDS:
        parts.extend(_literal_values(extras.get(key)))

    present_fields = {key.lower() for key, value in extras.items() if value}
    lowered_tags = [tag.lower() for tag in entry.tags]
    for term in vocabulary:
        lowered = term.lower()
        if lowered in present_fields or any(lowered in tag for tag in lowered_tags):
            parts.append(term)

    return " ".join(part for part in parts if part).lower()


def query_terms(query: str | None) -> list[str]:
    if not query:
        return []
    return [term.lower() for term in query.split()]


def matches(token: str, query: str | None) -> bool:
    """True when every whitespace-separated query term is a substring of *token*."""
    return all(term in token for term in query_terms(query))


def apply_filter(entries: Sequence[Entry], query: str | None) -> list[Entry]:
    """Return copies of *entries* with ``hidden`` set for non-matching ones.

    Order and count are preserved; the input entries are left untouched.
    """
    return [
        entry.model_copy(update={"hidden": not matches(entry.fuzzy, query)})
        for entry in entries
    ]
