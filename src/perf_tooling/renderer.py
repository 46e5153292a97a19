"""Jinja2 page renderer producing minified HTML.

Pure given its context: the same context always yields the same string.
"""

from __future__ import annotations

import re
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape

_COMMENT_RE = re.compile(r"<!--(?!\[if).*?-->", re.DOTALL)
_BETWEEN_TAGS_RE = re.compile(r">\s+<")
_WHITESPACE_RE = re.compile(r"\s{2,}")


def minify_html(html: str) -> str:
    html = _COMMENT_RE.sub("", html)
    html = _BETWEEN_TAGS_RE.sub("><", html)
    html = _WHITESPACE_RE.sub(" ", html)
    return html.strip()


def _compact_count(value: int | None) -> str:
    if value is None:
        return ""
    # 999_950 and up would round to "1000.0k"
    if value >= 999_950:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1000:
        return f"{value / 1000:.1f}k"
    return str(value)


class PageRenderer:
    def __init__(self, env: Environment | None = None) -> None:
        self._env = env or Environment(
            loader=PackageLoader("perf_tooling", "templates"),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["compact"] = _compact_count

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        template = self._env.get_template(f"{template_name}.html")
        return minify_html(template.render(**context))
