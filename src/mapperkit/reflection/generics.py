"""Static type introspection over typing annotations.

Everything that looks inside ``typing`` constructs lives here so the rest of
the reflection package only deals with plain classes.
"""

from __future__ import annotations

import collections.abc
import types
import typing
from typing import Annotated, Any, Union, get_args, get_origin

_UNION_TYPES: tuple[Any, ...] = (Union, types.UnionType)
_NONE_TYPE = type(None)


def strip_annotated(hint: Any) -> Any:
    """Drop ``Annotated[...]`` metadata, keeping the underlying hint."""
    while get_origin(hint) is Annotated:
        hint = get_args(hint)[0]
    return hint


def annotated_metadata(hint: Any) -> tuple[Any, ...]:
    """Return the metadata attached to an ``Annotated`` hint, or ``()``."""
    if get_origin(hint) is Annotated:
        return tuple(hint.__metadata__)
    return ()


def is_optional(hint: Any) -> bool:
    """True for ``X | None`` / ``Optional[X]`` style unions."""
    hint = strip_annotated(hint)
    return get_origin(hint) in _UNION_TYPES and _NONE_TYPE in get_args(hint)


def unwrap_optional(hint: Any) -> Any:
    """``X | None`` -> ``X``. Unions of several non-None members are kept whole."""
    hint = strip_annotated(hint)
    if get_origin(hint) not in _UNION_TYPES:
        return hint
    members = [arg for arg in get_args(hint) if arg is not _NONE_TYPE]
    if len(members) == 1:
        return members[0]
    return hint


def raw_type(hint: Any) -> type:
    """Return the runtime class behind a hint.

    ``list[int]`` -> ``list``, ``Sequence[str]`` -> ``collections.abc.Sequence``,
    ``None`` -> ``NoneType``. Anything without a class (``Any``, type vars,
    multi-member unions) collapses to ``object``.
    """
    hint = strip_annotated(hint)
    if hint is None or hint is _NONE_TYPE:
        return _NONE_TYPE
    origin = get_origin(hint)
    if origin is not None:
        if origin in _UNION_TYPES:
            return object
        hint = origin
    if isinstance(hint, type):
        return hint
    return object


def element_type(hint: Any) -> Any | None:
    """Unwrap exactly one level of parameterization.

    Returns the single type argument of ``hint`` (``list[Order]`` -> ``Order``,
    ``tuple[Order, ...]`` -> ``Order``), or ``None`` when the hint does not carry
    exactly one type argument. ``X | None`` is looked through.
    """
    hint = unwrap_optional(hint)
    args = tuple(arg for arg in get_args(hint) if arg is not Ellipsis)
    if get_origin(hint) in _UNION_TYPES or len(args) != 1:
        return None
    return args[0]


def resolve_element_class(hint: Any) -> type:
    """Element class of a homogeneous collection hint, else the raw hint class.

    A parameterized element is reduced to its raw class, so
    ``list[list[int]]`` resolves to ``list``.
    """
    element = element_type(hint)
    if element is None:
        return raw_type(hint)
    return raw_type(element)


def is_collection_type(tp: Any) -> bool:
    """True for non-string, non-mapping collection classes."""
    cls = raw_type(tp)
    if cls is object or issubclass(cls, (str, bytes, bytearray, collections.abc.Mapping)):
        return False
    return issubclass(cls, collections.abc.Collection) or cls is collections.abc.Iterable


def type_hints(obj: Any) -> dict[str, Any]:
    """``typing.get_type_hints`` with extras, tolerant of unresolvable names."""
    try:
        return typing.get_type_hints(obj, include_extras=True)
    except (NameError, TypeError, AttributeError):
        return dict(getattr(obj, "__annotations__", {}) or {})


def type_var_bindings(cls: type) -> dict[Any, Any]:
    """TypeVar -> concrete argument bindings inherited through generic bases.

    ``class UserMapper(BaseMapper[User])`` binds ``BaseMapper``'s ``T`` to
    ``User``; bindings propagate through intermediate generic bases.
    """
    bindings: dict[Any, Any] = {}

    def visit(klass: type, scope: dict[Any, Any]) -> None:
        for base in getattr(klass, "__orig_bases__", ()):
            origin = get_origin(base)
            if not isinstance(origin, type) or origin in (typing.Generic, typing.Protocol):
                continue
            params = getattr(origin, "__parameters__", ())
            args = tuple(substitute_type_vars(arg, scope) for arg in get_args(base))
            local = dict(zip(params, args, strict=False))
            for param, arg in local.items():
                bindings.setdefault(param, arg)
            visit(origin, local)

    visit(cls, {})
    return bindings


def substitute_type_vars(hint: Any, bindings: dict[Any, Any]) -> Any:
    """Replace bound TypeVars inside ``hint``; unbound ones are left in place."""
    if isinstance(hint, typing.TypeVar):
        return bindings.get(hint, hint)
    if get_origin(hint) is Annotated:
        inner = substitute_type_vars(get_args(hint)[0], bindings)
        return Annotated[(inner, *hint.__metadata__)]  # type: ignore[valid-type]
    args = get_args(hint)
    if not args:
        return hint
    new_args = tuple(substitute_type_vars(arg, bindings) for arg in args)
    if new_args == args:
        return hint
    origin = get_origin(hint)
    if origin in _UNION_TYPES:
        return Union[new_args]  # noqa: UP007
    if isinstance(hint, types.GenericAlias):
        return types.GenericAlias(origin, new_args)
    copy_with = getattr(hint, "copy_with", None)
    if copy_with is not None:
        return copy_with(new_args)
    return hint
