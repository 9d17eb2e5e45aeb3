"""Per-method call plans for mapper proxies.

A MapperMethod is built once per interface method. Building it resolves the
bound operation, classifies the declared return type and names the
parameters; executing it binds the call's arguments, hands them to the
session and coerces what comes back to the declared return shape.
"""

from __future__ import annotations

import collections.abc
import inspect
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from mapperkit.binding.annotations import get_map_key, is_flush
from mapperkit.binding.session import (
    CommandKind,
    Cursor,
    OperationDescriptor,
    OperationRegistry,
    ResultHandler,
    RowBounds,
    Session,
)
from mapperkit.core.errors import BindingError, TooManyResultsError
from mapperkit.reflection.generics import (
    is_optional,
    raw_type,
    substitute_type_vars,
    type_hints,
    type_var_bindings,
    unwrap_optional,
)
from mapperkit.reflection.params import ParamNameResolver, is_non_data_parameter

if TYPE_CHECKING:
    from mapperkit.configuration import MapperConfiguration

_NONE_TYPE = type(None)
_PRIMITIVE_TYPES = (bool, int, float)


class ReturnShape(str, Enum):
    """How a method's declared return type consumes the session result."""

    VOID = "void"
    SCALAR = "scalar"
    PRIMITIVE = "primitive"
    OPTIONAL = "optional"
    COLLECTION = "collection"
    ARRAY = "array"
    MAP = "map"
    CURSOR = "cursor"


def operation_id(interface: type, method_name: str) -> str:
    return f"{interface.__module__}.{interface.__qualname__}.{method_name}"


def declaring_class(interface: type, method_name: str) -> type:
    """First class in ``interface``'s MRO that defines ``method_name``."""
    for klass in interface.__mro__:
        if method_name in klass.__dict__:
            return klass
    return interface


def _resolve_operation(
    interface: type,
    method_name: str,
    declaring: type,
    registry: OperationRegistry,
) -> OperationDescriptor | None:
    op_id = operation_id(interface, method_name)
    if registry.has_operation(op_id):
        return registry.get_operation(op_id)
    if interface is declaring:
        return None
    for base in interface.__bases__:
        # nominal check: protocols reject issubclass() unless runtime-checkable
        if declaring in base.__mro__:
            descriptor = _resolve_operation(base, method_name, declaring, registry)
            if descriptor is not None:
                return descriptor
    return None


@dataclass(frozen=True, slots=True)
class OperationCommand:
    """The operation a method is bound to: its id and kind."""

    name: str | None
    kind: CommandKind

    @classmethod
    def resolve(
        cls,
        registry: OperationRegistry,
        interface: type,
        method: Callable[..., Any],
        method_name: str,
    ) -> OperationCommand:
        declaring = declaring_class(interface, method_name)
        descriptor = _resolve_operation(interface, method_name, declaring, registry)
        if descriptor is None:
            if is_flush(method):
                return cls(None, CommandKind.FLUSH)
            raise BindingError.operation_not_found(operation_id(interface, method_name))
        if descriptor.kind is CommandKind.UNKNOWN:
            raise BindingError.unknown_command(descriptor.id)
        return cls(descriptor.id, descriptor.kind)


class MethodSignature:
    """Return shape and parameter layout of one mapper method."""

    def __init__(
        self,
        interface: type,
        method: Callable[..., Any],
        use_actual_param_name: bool = True,
    ) -> None:
        self._method_name = getattr(method, "__qualname__", repr(method))
        bindings = type_var_bindings(interface)
        hints = {
            name: substitute_type_vars(hint, bindings)
            for name, hint in type_hints(method).items()
        }
        return_hint = hints.get("return", Any)

        self.return_hint: Any = return_hint
        self.map_key: str | None = get_map_key(method)
        self.returns_optional: bool = is_optional(return_hint)
        self.return_type: type = raw_type(unwrap_optional(return_hint))
        self.shape: ReturnShape = self._classify(return_hint)

        self.param_name_resolver = ParamNameResolver(method, use_actual_param_name)
        self.row_bounds_index = self._unique_param_index(hints, RowBounds)
        self.result_handler_index = self._unique_param_index(hints, ResultHandler)

    def _classify(self, return_hint: Any) -> ReturnShape:
        rt = self.return_type
        if return_hint is None or rt is _NONE_TYPE:
            return ReturnShape.VOID
        if rt is tuple:
            return ReturnShape.ARRAY
        if rt is Cursor or issubclass(rt, collections.abc.Iterator):
            return ReturnShape.CURSOR
        if self.map_key is not None and issubclass(rt, collections.abc.Mapping):
            return ReturnShape.MAP
        if issubclass(rt, collections.abc.Mapping):
            return ReturnShape.SCALAR
        if rt is not str and rt is not bytes and issubclass(rt, collections.abc.Iterable):
            return ReturnShape.COLLECTION
        if self.returns_optional:
            return ReturnShape.OPTIONAL
        if rt in _PRIMITIVE_TYPES:
            return ReturnShape.PRIMITIVE
        return ReturnShape.SCALAR

    def _unique_param_index(self, hints: dict[str, Any], param_type: type) -> int | None:
        index: int | None = None
        for position, param in enumerate(self.param_name_resolver.signature.parameters.values()):
            hint = hints.get(param.name, param.annotation)
            if hint is inspect.Parameter.empty or not is_non_data_parameter(hint):
                continue
            if issubclass(raw_type(unwrap_optional(hint)), param_type):
                if index is not None:
                    raise BindingError.duplicate_special_parameter(self._method_name, param_type)
                index = position
        return index

    @property
    def returns_void(self) -> bool:
        return self.shape is ReturnShape.VOID

    @property
    def returns_many(self) -> bool:
        return self.shape in (ReturnShape.COLLECTION, ReturnShape.ARRAY)

    @property
    def has_row_bounds(self) -> bool:
        return self.row_bounds_index is not None

    @property
    def has_result_handler(self) -> bool:
        return self.result_handler_index is not None

    def extract_row_bounds(self, values: Sequence[Any]) -> RowBounds | None:
        if self.row_bounds_index is None:
            return None
        return values[self.row_bounds_index]

    def extract_result_handler(self, values: Sequence[Any]) -> ResultHandler[Any] | None:
        if self.result_handler_index is None:
            return None
        return values[self.result_handler_index]


class MapperMethod:
    """Executable plan for one interface method."""

    def __init__(
        self,
        interface: type,
        method: Callable[..., Any],
        configuration: MapperConfiguration,
        method_name: str | None = None,
    ) -> None:
        method_name = method_name or method.__name__
        self._configuration = configuration
        self.command = OperationCommand.resolve(
            configuration.operation_registry, interface, method, method_name
        )
        self.signature = MethodSignature(
            interface, method, configuration.settings.binding.use_actual_param_name
        )

    def execute(
        self,
        session: Session,
        args: Sequence[Any],
        kwargs: collections.abc.Mapping[str, Any] | None = None,
    ) -> Any:
        sig = self.signature
        kind = self.command.kind
        if kind is CommandKind.FLUSH:
            sig.param_name_resolver.normalize(args, kwargs)
            result = session.flush()
        elif kind.is_write:
            param = self._convert_args(args, kwargs)
            result = self._row_count_result(session.execute(self.command.name or "", param))
        elif kind is CommandKind.SELECT:
            result = self._execute_select(session, args, kwargs)
        else:
            raise BindingError.unknown_command(self.command.name or "")

        if result is None and sig.shape is ReturnShape.PRIMITIVE:
            raise BindingError.null_for_primitive(self.command.name or "", sig.return_type)
        return result

    def _convert_args(
        self, args: Sequence[Any], kwargs: collections.abc.Mapping[str, Any] | None
    ) -> Any:
        return self.signature.param_name_resolver.get_named_params(args, kwargs)

    def _execute_select(
        self,
        session: Session,
        args: Sequence[Any],
        kwargs: collections.abc.Mapping[str, Any] | None,
    ) -> Any:
        sig = self.signature
        op_id = self.command.name or ""
        values = sig.param_name_resolver.normalize(args, kwargs)
        param = sig.param_name_resolver.name_arguments(values)
        bounds = sig.extract_row_bounds(values)

        if sig.returns_void and sig.has_result_handler:
            handler = sig.extract_result_handler(values)
            self._execute_with_result_handler(session, param, bounds, handler)
            return None
        if sig.returns_many:
            return self._execute_for_many(session, param, bounds)
        if sig.shape is ReturnShape.MAP:
            return self._execute_for_map(session, param, bounds)
        if sig.shape is ReturnShape.CURSOR:
            if bounds is not None:
                return session.query_cursor(op_id, param, bounds)
            return session.query_cursor(op_id, param)
        result = self._select_one(session, param)
        if sig.returns_void:
            return None
        return result

    def _row_count_result(self, row_count: int) -> Any:
        sig = self.signature
        if sig.returns_void:
            return None
        # bool before int: bool is an int subclass
        if sig.return_type is bool:
            return row_count > 0
        if sig.return_type is int:
            return int(row_count)
        raise BindingError.unsupported_return_type(self.command.name or "", sig.return_hint)

    def _execute_with_result_handler(
        self,
        session: Session,
        param: Any,
        bounds: RowBounds | None,
        handler: ResultHandler[Any] | None,
    ) -> None:
        op_id = self.command.name or ""
        descriptor = self._configuration.operation_registry.get_operation(op_id)
        if not descriptor.callable and descriptor.result_type is None:
            raise BindingError.result_type_required(op_id)
        if bounds is not None:
            session.query(op_id, param, bounds, handler)
        else:
            session.query(op_id, param, handler=handler)

    def _query(self, session: Session, param: Any, bounds: RowBounds | None) -> Any:
        op_id = self.command.name or ""
        if bounds is not None:
            return session.query(op_id, param, bounds)
        return session.query(op_id, param)

    def _execute_for_many(self, session: Session, param: Any, bounds: RowBounds | None) -> Any:
        result = self._query(session, param, bounds)
        if result is None:
            return None
        sig = self.signature
        if sig.shape is ReturnShape.ARRAY:
            return result if type(result) is tuple else tuple(result)
        if not isinstance(result, sig.return_type):
            return self._convert_to_declared_collection(result)
        return result

    def _convert_to_declared_collection(self, rows: collections.abc.Iterable[Any]) -> Any:
        factory = self._configuration.object_factory
        concrete = factory.resolve_type(self.signature.return_type)
        if not issubclass(concrete, (collections.abc.MutableSequence, collections.abc.MutableSet)):
            # immutable collections take their elements at construction
            return factory.create(concrete, rows)
        collection = factory.create(concrete)
        self._configuration.new_meta_object(collection).add_all(rows)
        return collection

    def _execute_for_map(self, session: Session, param: Any, bounds: RowBounds | None) -> Any:
        rows = self._query(session, param, bounds)
        if rows is None:
            return None
        sig = self.signature
        mapping = self._configuration.object_factory.create(sig.return_type)
        for row in rows:
            meta = self._configuration.new_meta_object(row) if row is not None else None
            key = meta.get_value(sig.map_key or "") if meta is not None else None
            mapping[key] = row
        return mapping

    def _select_one(self, session: Session, param: Any) -> Any:
        op_id = self.command.name or ""
        rows = session.query(op_id, param)
        if not rows:
            return None
        if len(rows) > 1:
            raise TooManyResultsError.for_operation(op_id, len(rows))
        return rows[0]
