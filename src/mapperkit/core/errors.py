"""mapperkit error types with typed error codes.

Error code ranges:
- 1xxx: Reflection
- 2xxx: Config
- 3xxx: Binding
- 4xxx: Plugin
- 9xxx: Internal

Every error is a permanent programming or configuration error. None of them
is retryable.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Reflection (1xxx)
    NO_SUCH_PROPERTY = 1001
    UNSUPPORTED_OPERATION = 1002
    OBJECT_CREATION_FAILED = 1003
    NOT_INDEXABLE = 1004

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Binding (3xxx)
    OPERATION_NOT_FOUND = 3001
    UNKNOWN_COMMAND = 3002
    DUPLICATE_SPECIAL_PARAMETER = 3003
    UNSUPPORTED_RETURN_TYPE = 3004
    NULL_FOR_PRIMITIVE = 3005
    PARAMETER_NOT_FOUND = 3006
    UNSUPPORTED_PARAMETER = 3007
    RESULT_TYPE_REQUIRED = 3008
    TOO_MANY_RESULTS = 3009
    MAPPER_NOT_KNOWN = 3010
    MAPPER_ALREADY_KNOWN = 3011
    DUPLICATE_OPERATION = 3012

    # Plugin (4xxx)
    INTERCEPTS_MISSING = 4001
    SIGNATURE_METHOD_NOT_FOUND = 4002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(eq=False)
class MapperKitError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'NO_SUCH_PROPERTY')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


def _type_name(tp: Any) -> str:
    return getattr(tp, "__qualname__", None) or repr(tp)


class ReflectionError(MapperKitError):
    """Errors raised while introspecting or walking object graphs."""

    @classmethod
    def creation_failed(cls, tp: Any, reason: str) -> "ReflectionError":
        return cls(
            code=ErrorCode.OBJECT_CREATION_FAILED,
            message=f"Error creating instance of {_type_name(tp)}: {reason}",
            details={"type": _type_name(tp), "reason": reason},
        )

    @classmethod
    def not_indexable(cls, name: str, value: Any) -> "ReflectionError":
        kind = _type_name(type(value))
        return cls(
            code=ErrorCode.NOT_INDEXABLE,
            message=f"The '{name}' property of {kind} is not a sequence or mapping.",
            details={"property": name, "type": kind},
        )


class NoSuchPropertyError(ReflectionError):
    """A property path segment cannot be resolved against a type or value."""

    @classmethod
    def no_getter(cls, tp: Any, name: str) -> "NoSuchPropertyError":
        return cls(
            code=ErrorCode.NO_SUCH_PROPERTY,
            message=f"There is no getter for property named '{name}' in '{_type_name(tp)}'",
            details={"type": _type_name(tp), "property": name, "access": "get"},
        )

    @classmethod
    def no_setter(cls, tp: Any, name: str) -> "NoSuchPropertyError":
        return cls(
            code=ErrorCode.NO_SUCH_PROPERTY,
            message=f"There is no setter for property named '{name}' in '{_type_name(tp)}'",
            details={"type": _type_name(tp), "property": name, "access": "set"},
        )


class UnsupportedOperationError(ReflectionError):
    """An operation that has no meaning for the receiving abstraction."""

    @classmethod
    def because(cls, reason: str) -> "UnsupportedOperationError":
        return cls(code=ErrorCode.UNSUPPORTED_OPERATION, message=reason)


class ConfigError(MapperKitError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class BindingError(MapperKitError):
    """Errors binding a mapper method to a registered operation."""

    @classmethod
    def operation_not_found(cls, operation_id: str) -> "BindingError":
        return cls(
            code=ErrorCode.OPERATION_NOT_FOUND,
            message=f"Invalid bound operation (not found): {operation_id}",
            details={"operation_id": operation_id},
        )

    @classmethod
    def unknown_command(cls, operation_id: str) -> "BindingError":
        return cls(
            code=ErrorCode.UNKNOWN_COMMAND,
            message=f"Unknown execution method for: {operation_id}",
            details={"operation_id": operation_id},
        )

    @classmethod
    def duplicate_special_parameter(cls, method: str, param_type: Any) -> "BindingError":
        return cls(
            code=ErrorCode.DUPLICATE_SPECIAL_PARAMETER,
            message=f"{method} cannot have multiple {_type_name(param_type)} parameters",
            details={"method": method, "parameter_type": _type_name(param_type)},
        )

    @classmethod
    def unsupported_return_type(cls, operation_id: str, return_type: Any) -> "BindingError":
        return cls(
            code=ErrorCode.UNSUPPORTED_RETURN_TYPE,
            message=(
                f"Mapper method '{operation_id}' has an unsupported return type: "
                f"{_type_name(return_type)}"
            ),
            details={"operation_id": operation_id, "return_type": _type_name(return_type)},
        )

    @classmethod
    def null_for_primitive(cls, operation_id: str, return_type: Any) -> "BindingError":
        return cls(
            code=ErrorCode.NULL_FOR_PRIMITIVE,
            message=(
                f"Mapper method '{operation_id}' attempted to return None from a method "
                f"with a primitive return type ({_type_name(return_type)})."
            ),
            details={"operation_id": operation_id, "return_type": _type_name(return_type)},
        )

    @classmethod
    def parameter_not_found(cls, key: str, available: Iterable[str]) -> "BindingError":
        names = list(available)
        return cls(
            code=ErrorCode.PARAMETER_NOT_FOUND,
            message=f"Parameter '{key}' not found. Available parameters are {names}",
            details={"parameter": key, "available": names},
        )

    @classmethod
    def unsupported_parameter(cls, method: str, name: str, reason: str) -> "BindingError":
        return cls(
            code=ErrorCode.UNSUPPORTED_PARAMETER,
            message=f"Parameter '{name}' of {method} is not supported: {reason}",
            details={"method": method, "parameter": name, "reason": reason},
        )

    @classmethod
    def result_type_required(cls, operation_id: str) -> "BindingError":
        return cls(
            code=ErrorCode.RESULT_TYPE_REQUIRED,
            message=(
                f"Operation {operation_id} needs a declared result type "
                "so a ResultHandler can be used as a parameter."
            ),
            details={"operation_id": operation_id},
        )

    @classmethod
    def mapper_not_known(cls, interface: Any) -> "BindingError":
        return cls(
            code=ErrorCode.MAPPER_NOT_KNOWN,
            message=f"Type {_type_name(interface)} is not known to the MapperRegistry.",
            details={"interface": _type_name(interface)},
        )

    @classmethod
    def mapper_already_known(cls, interface: Any) -> "BindingError":
        return cls(
            code=ErrorCode.MAPPER_ALREADY_KNOWN,
            message=f"Type {_type_name(interface)} is already known to the MapperRegistry.",
            details={"interface": _type_name(interface)},
        )

    @classmethod
    def duplicate_operation(cls, operation_id: str) -> "BindingError":
        return cls(
            code=ErrorCode.DUPLICATE_OPERATION,
            message=f"Operation collection already contains value for {operation_id}",
            details={"operation_id": operation_id},
        )


class TooManyResultsError(BindingError):
    """A single-row read produced more than one row."""

    @classmethod
    def for_operation(cls, operation_id: str, count: int) -> "TooManyResultsError":
        return cls(
            code=ErrorCode.TOO_MANY_RESULTS,
            message=(
                f"Expected one result (or None) to be returned by {operation_id}, "
                f"but found: {count}"
            ),
            details={"operation_id": operation_id, "count": count},
        )


class PluginError(MapperKitError):
    """Errors building an interception chain."""

    @classmethod
    def intercepts_missing(cls, interceptor: Any) -> "PluginError":
        name = _type_name(type(interceptor))
        return cls(
            code=ErrorCode.INTERCEPTS_MISSING,
            message=f"No @intercepts declaration was found in interceptor {name}",
            details={"interceptor": name},
        )

    @classmethod
    def method_not_found(cls, tp: Any, method: str) -> "PluginError":
        return cls(
            code=ErrorCode.SIGNATURE_METHOD_NOT_FOUND,
            message=f"Could not find method on {_type_name(tp)} named {method}",
            details={"type": _type_name(tp), "method": method},
        )


class InternalError(MapperKitError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
