"""Contracts with the execution side.

Mapper proxies never run operations themselves. They look operations up in
an OperationRegistry and hand them to a Session. Both are protocols so any
execution engine can sit behind them. InMemoryOperationRegistry is the
bundled registry implementation.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from mapperkit.core.errors import BindingError
from mapperkit.reflection.params import NonDataParameter

T_co = TypeVar("T_co", covariant=True)
T = TypeVar("T")

NO_ROW_OFFSET = 0
NO_ROW_LIMIT = sys.maxsize


class CommandKind(str, Enum):
    """What an operation does, which drives result coercion."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    SELECT = "select"
    FLUSH = "flush"
    UNKNOWN = "unknown"

    @property
    def is_write(self) -> bool:
        return self in (CommandKind.INSERT, CommandKind.UPDATE, CommandKind.DELETE)


@dataclass(frozen=True, slots=True)
class OperationDescriptor:
    """A registered operation.

    ``result_type`` is the declared row type, None when the operation
    declares no rows. ``callable`` marks stored-procedure style operations
    whose rows come from output parameters.
    """

    id: str
    kind: CommandKind
    result_type: Any = None
    callable: bool = False


@runtime_checkable
class OperationRegistry(Protocol):
    def has_operation(self, operation_id: str) -> bool: ...

    def get_operation(self, operation_id: str) -> OperationDescriptor: ...


class InMemoryOperationRegistry:
    """Dict-backed OperationRegistry."""

    def __init__(self, operations: list[OperationDescriptor] | None = None) -> None:
        self._operations: dict[str, OperationDescriptor] = {}
        for descriptor in operations or ():
            self.add(descriptor)

    def add(self, descriptor: OperationDescriptor) -> OperationDescriptor:
        published = self._operations.setdefault(descriptor.id, descriptor)
        if published is not descriptor:
            raise BindingError.duplicate_operation(descriptor.id)
        return descriptor

    def register(
        self,
        operation_id: str,
        kind: CommandKind | str,
        result_type: Any = None,
        *,
        callable: bool = False,  # noqa: A002
    ) -> OperationDescriptor:
        return self.add(OperationDescriptor(operation_id, CommandKind(kind), result_type, callable))

    def has_operation(self, operation_id: str) -> bool:
        return operation_id in self._operations

    def get_operation(self, operation_id: str) -> OperationDescriptor:
        try:
            return self._operations[operation_id]
        except KeyError:
            raise BindingError.operation_not_found(operation_id) from None

    @property
    def operation_ids(self) -> tuple[str, ...]:
        return tuple(self._operations)

    def __len__(self) -> int:
        return len(self._operations)


@dataclass(frozen=True, slots=True)
class RowBounds(NonDataParameter):
    """Offset/limit pagination applied by the session."""

    offset: int = NO_ROW_OFFSET
    limit: int = NO_ROW_LIMIT


@dataclass
class ResultContext(Generic[T]):
    """The row being handed to a ResultHandler."""

    result_object: T
    result_count: int
    stopped: bool = field(default=False)

    def stop(self) -> None:
        self.stopped = True


class ResultHandler(NonDataParameter, ABC, Generic[T]):
    """Row callback: receives each row instead of the method returning them."""

    __slots__ = ()

    @abstractmethod
    def handle_result(self, context: ResultContext[T]) -> None: ...


@runtime_checkable
class Cursor(Protocol[T_co]):
    """Lazily fetched rows. Iterating consumes them."""

    def __iter__(self) -> Iterator[T_co]: ...

    def close(self) -> None: ...

    @property
    def is_open(self) -> bool: ...

    @property
    def is_consumed(self) -> bool: ...

    @property
    def current_index(self) -> int: ...


@runtime_checkable
class Session(Protocol):
    """Execution entry point used by mapper proxies."""

    def execute(self, operation_id: str, parameter: Any) -> int:
        """Run a write operation and return the affected row count."""
        ...

    def query(
        self,
        operation_id: str,
        parameter: Any,
        bounds: RowBounds | None = None,
        handler: ResultHandler[Any] | None = None,
    ) -> list[Any] | None:
        """Run a read operation. Returns the rows, or None when a handler consumed them."""
        ...

    def query_cursor(
        self, operation_id: str, parameter: Any, bounds: RowBounds | None = None
    ) -> Cursor[Any]: ...

    def flush(self) -> Any: ...
