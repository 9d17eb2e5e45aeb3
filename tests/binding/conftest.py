"""Shared fixtures for binding tests."""

from __future__ import annotations

from typing import Any

import pytest

from mapperkit.binding.session import InMemoryOperationRegistry, ResultContext
from mapperkit.configuration import MapperConfiguration


class RecordingSession:
    """Session double that records calls and returns canned results."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.rows: list[Any] | None = []
        self.row_count = 0
        self.cursor: Any = None
        self.flush_result: Any = []

    def execute(self, operation_id: str, parameter: Any) -> int:
        self.calls.append(("execute", (operation_id, parameter)))
        return self.row_count

    def query(
        self,
        operation_id: str,
        parameter: Any,
        bounds: Any = None,
        handler: Any = None,
    ) -> list[Any] | None:
        self.calls.append(("query", (operation_id, parameter, bounds, handler)))
        if handler is not None:
            for count, row in enumerate(self.rows or (), start=1):
                context = ResultContext(row, count)
                handler.handle_result(context)
                if context.stopped:
                    break
            return None
        return self.rows

    def query_cursor(self, operation_id: str, parameter: Any, bounds: Any = None) -> Any:
        self.calls.append(("query_cursor", (operation_id, parameter, bounds)))
        return self.cursor

    def flush(self) -> Any:
        self.calls.append(("flush", ()))
        return self.flush_result


@pytest.fixture
def session() -> RecordingSession:
    return RecordingSession()


@pytest.fixture
def operations() -> InMemoryOperationRegistry:
    return InMemoryOperationRegistry()


@pytest.fixture
def configuration(operations: InMemoryOperationRegistry) -> MapperConfiguration:
    return MapperConfiguration(operation_registry=operations)
