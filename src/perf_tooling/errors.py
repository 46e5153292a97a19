"""Error codes and the single exception type raised inside perf_tooling.

Provider clients raise ``PerfToolingError``; the enrichment coordinator
catches it per call and logs it. Nothing here is fatal to the process: the
worst outcome of any failure is stale or partially enriched content.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    PROVIDER_NOT_FOUND = "PROVIDER_NOT_FOUND"
    PROVIDER_FETCH_FAILED = "PROVIDER_FETCH_FAILED"
    PROVIDER_BAD_PAYLOAD = "PROVIDER_BAD_PAYLOAD"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"


class PerfToolingError(Exception):
    """Structured error carrying a machine-readable code."""

    def __init__(self, code: ErrorCode, message: str, recoverable: bool = False) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

    def __repr__(self) -> str:
        return f"PerfToolingError(code={self.code!s}, message={self.message!r})"
