"""Binding: typed mapper interfaces dispatched to registered operations."""

from mapperkit.binding.annotations import flush, map_key, mapper
from mapperkit.binding.method import (
    MapperMethod,
    MethodSignature,
    OperationCommand,
    ReturnShape,
    operation_id,
)
from mapperkit.binding.proxy import MapperProxyFactory
from mapperkit.binding.registry import MapperRegistry
from mapperkit.binding.session import (
    NO_ROW_LIMIT,
    NO_ROW_OFFSET,
    CommandKind,
    Cursor,
    InMemoryOperationRegistry,
    OperationDescriptor,
    OperationRegistry,
    ResultContext,
    ResultHandler,
    RowBounds,
    Session,
)

__all__ = [
    # Decorators
    "flush",
    "map_key",
    "mapper",
    # Execution contracts
    "CommandKind",
    "Cursor",
    "InMemoryOperationRegistry",
    "NO_ROW_LIMIT",
    "NO_ROW_OFFSET",
    "OperationDescriptor",
    "OperationRegistry",
    "ResultContext",
    "ResultHandler",
    "RowBounds",
    "Session",
    # Dispatch
    "MapperMethod",
    "MapperProxyFactory",
    "MapperRegistry",
    "MethodSignature",
    "OperationCommand",
    "ReturnShape",
    "operation_id",
]
