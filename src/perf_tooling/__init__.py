"""Performance tooling directory: content store, enrichment, and render cache."""

__version__ = "0.1.0"
