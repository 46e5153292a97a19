from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class RenderedPage(BaseModel):
    """Cached output for one unfiltered page."""

    category: str  # "index" or a category name
    content: str  # Minified HTML
    version: int  # Category version the page was rendered from
    rendered_at: datetime
