"""
Shared pytest fixtures.

``RecordingExecutor`` stands in for the database: it records every
statement/parameter pair and can be told to fail the next execute call.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

import pytest

from pg_export import Exporter


class RecordingExecutor:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, List[Any]]] = []
        self.release_count = 0
        self.fail_with: Optional[BaseException] = None

    async def execute(self, text: str, params: Sequence[Any]) -> int:
        if self.fail_with is not None:
            exc, self.fail_with = self.fail_with, None
            raise exc
        self.calls.append((text, list(params)))
        return 1

    async def release(self) -> None:
        self.release_count += 1

    @property
    def inserts(self) -> List[Tuple[str, List[Any]]]:
        return [c for c in self.calls if c[0].startswith("insert")]


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def make_exporter(executor):
    def _make(**kwargs: Any) -> Exporter:
        kwargs.setdefault("create_table", True)
        kwargs.setdefault("schema", "public")
        return Exporter(executor, kwargs.pop("table", "test"), **kwargs)

    return _make


@pytest.fixture
def date_str() -> str:
    return "1995-12-17T03:24:00"


@pytest.fixture
def date_value() -> datetime:
    return datetime(1995, 12, 17, 3, 24, 0)
