from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import sqlalchemy as sa
from sqlalchemy.pool import NullPool
from structlog.testing import capture_logs


# Ensure the repo root is importable (so `import fixture_db` works without an install).
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture(autouse=True)
def log_events() -> Iterator[list[dict[str, Any]]]:
    # Keeps structlog output off stdout and lets tests assert on events.
    with capture_logs() as events:
        yield events


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "db" / "fixture.db"


@pytest.fixture()
def query(db_path: Path) -> Callable[..., list[tuple]]:
    def _query(sql: str, **params: Any) -> list[tuple]:
        engine = sa.create_engine(sa.engine.URL.create("sqlite", database=str(db_path)), poolclass=NullPool)
        try:
            with engine.connect() as conn:
                return [tuple(r) for r in conn.execute(sa.text(sql), params).all()]
        finally:
            engine.dispose()

    return _query
