"""Integration test fixtures: a served app over the shared fixture store."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from perf_tooling.server import create_app

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from perf_tooling.engine import ContentEngine


@pytest.fixture()
def client(engine: ContentEngine) -> Iterator[TestClient]:
    """Serve the engine without an enrichment schedule."""
    with TestClient(create_app(engine)) as c:
        yield c


@pytest.fixture()
def subprocess_env(tmp_path: Path) -> dict[str, str]:
    """Environment for running the server as a child process.

    HOME points at an empty directory so a developer's own
    ``~/.config/perf-tooling/perf-tooling.yaml`` is never picked up.
    """
    env = {k: v for k, v in os.environ.items() if not k.startswith("PERF_TOOLING__")}
    env["HOME"] = str(tmp_path)
    return env
