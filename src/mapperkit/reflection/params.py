"""Parameter naming for mapper methods.

A ParamNameResolver maps argument positions to names:

- ``f(a: Annotated[int, Param("M")], b: Annotated[int, Param("N")])`` -> ``{0: "M", 1: "N"}``
- ``f(a: int, b: int)`` -> ``{0: "0", 1: "1"}`` (declared names when
  ``use_actual_param_name`` is on: ``{0: "a", 1: "b"}``)
- ``f(a: int, bounds: RowBounds, b: int)`` -> ``{0: "0", 2: "1"}``

Non-data parameters (pagination, row callbacks) are left out of the table,
so positions may have gaps while the fallback names keep counting only the
named parameters.
"""

from __future__ import annotations

import array
import collections.abc
import inspect
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from mapperkit.core.errors import BindingError
from mapperkit.reflection.generics import (
    annotated_metadata,
    raw_type,
    type_hints,
    unwrap_optional,
)

GENERIC_NAME_PREFIX = "param"


@dataclass(frozen=True, slots=True)
class Param:
    """Explicit parameter name, used as ``Annotated[T, Param("name")]``."""

    value: str


class NonDataParameter:
    """Marker base for argument types that never become named parameters."""

    __slots__ = ()


class ParamMap(dict[str, Any]):
    """Named parameters. Looking up an unknown key is a BindingError."""

    def __missing__(self, key: str) -> Any:
        raise BindingError.parameter_not_found(key, self.keys())


def is_non_data_parameter(hint: Any) -> bool:
    cls = raw_type(unwrap_optional(hint))
    return isinstance(cls, type) and issubclass(cls, NonDataParameter)


def _explicit_name(hint: Any) -> str | None:
    for meta in (*annotated_metadata(hint), *annotated_metadata(unwrap_optional(hint))):
        if isinstance(meta, Param):
            return meta.value
    return None


def wrap_to_map_if_collection(obj: Any, actual_param_name: str | None) -> Any:
    """Expose a bare sequence or array under conventional keys.

    Lists get ``collection`` and ``list``, other collections ``collection``,
    tuples and ``array.array`` get ``array``; the actual parameter name is
    added when known. Strings, bytes and mappings are returned unchanged.
    """
    if isinstance(obj, (tuple, array.array)):
        param_map = ParamMap(array=obj)
    elif isinstance(obj, collections.abc.Collection) and not isinstance(
        obj, (str, bytes, bytearray, collections.abc.Mapping)
    ):
        param_map = ParamMap(collection=obj)
        if isinstance(obj, list):
            param_map["list"] = obj
    else:
        return obj
    if actual_param_name is not None:
        param_map[actual_param_name] = obj
    return param_map


class ParamNameResolver:
    def __init__(self, method: Callable[..., Any], use_actual_param_name: bool = True) -> None:
        self._method_name = getattr(method, "__qualname__", repr(method))
        self._use_actual_param_name = use_actual_param_name
        self._signature = self._value_signature(method)
        self._has_param_annotation = False

        hints = type_hints(method)
        names: dict[int, str] = {}
        for index, param in enumerate(self._signature.parameters.values()):
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                raise BindingError.unsupported_parameter(
                    self._method_name, param.name, "variadic parameters cannot be named"
                )
            hint = hints.get(param.name, param.annotation)
            if is_non_data_parameter(hint):
                continue
            name = _explicit_name(hint)
            if name is not None:
                self._has_param_annotation = True
            elif use_actual_param_name:
                name = param.name
            else:
                # use the ordinal among named parameters ("0", "1", ...)
                name = str(len(names))
            names[index] = name
        self._names: Mapping[int, str] = MappingProxyType(names)

    @staticmethod
    def _value_signature(method: Callable[..., Any]) -> inspect.Signature:
        sig = inspect.signature(method)
        params = list(sig.parameters.values())
        if (
            params
            and params[0].name in ("self", "cls")
            and params[0].kind is inspect.Parameter.POSITIONAL_OR_KEYWORD
        ):
            sig = sig.replace(parameters=params[1:])
        return sig

    @property
    def signature(self) -> inspect.Signature:
        return self._signature

    @property
    def table(self) -> Mapping[int, str]:
        """Argument position -> parameter name, positions ascending."""
        return self._names

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._names.values())

    @property
    def has_param_annotation(self) -> bool:
        return self._has_param_annotation

    def normalize(self, args: Sequence[Any], kwargs: Mapping[str, Any] | None = None) -> list[Any]:
        """Positional argument list for a call, keywords and defaults applied."""
        bound = self._signature.bind(*args, **(kwargs or {}))
        bound.apply_defaults()
        return list(bound.arguments.values())

    def get_named_params(
        self,
        args: Sequence[Any] | None,
        kwargs: Mapping[str, Any] | None = None,
    ) -> Any:
        """Turn a call's arguments into one parameter object.

        The arguments are bound to the signature first, so a call with the
        wrong arguments raises TypeError whatever the method's parameters
        are named. See name_arguments for the naming rules.
        """
        if args is None:
            return None
        return self.name_arguments(self.normalize(args, kwargs))

    def name_arguments(self, values: Sequence[Any]) -> Any:
        """Name already normalized positional values.

        A single unnamed parameter is returned as-is (sequences wrapped, see
        wrap_to_map_if_collection). Otherwise every parameter is stored under
        its name and under the generic ``param1``, ``param2``, ... names.
        """
        if not self._names:
            return None
        if not self._has_param_annotation and len(self._names) == 1:
            position, name = next(iter(self._names.items()))
            return wrap_to_map_if_collection(
                values[position], name if self._use_actual_param_name else None
            )
        param = ParamMap()
        taken = set(self._names.values())
        for i, (position, name) in enumerate(self._names.items()):
            param[name] = values[position]
            generic_name = f"{GENERIC_NAME_PREFIX}{i + 1}"
            # ensure not to overwrite a parameter named with Param
            if generic_name not in taken:
                param[generic_name] = values[position]
        return param
