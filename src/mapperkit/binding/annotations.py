"""Decorators that annotate mapper interfaces and their methods."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type)

_MAP_KEY_ATTR = "__mapperkit_map_key__"
_FLUSH_ATTR = "__mapperkit_flush__"
_MAPPER_ATTR = "__mapperkit_mapper__"


def map_key(prop: str) -> Callable[[F], F]:
    """Key the rows of a mapping-returning read method by ``prop``.

    Usage:
        @abstractmethod
        @map_key("id")
        def select_by_ids(self, ids: list[int]) -> dict[int, User]: ...
    """

    def decorator(fn: F) -> F:
        setattr(fn, _MAP_KEY_ATTR, prop)
        return fn

    return decorator


def flush(fn: F) -> F:
    """Mark a method as flushing batched statements when no operation is bound."""
    setattr(fn, _FLUSH_ATTR, True)
    return fn


def mapper(cls: C) -> C:
    """Mark an interface for discovery by MapperRegistry.add_mappers()."""
    setattr(cls, _MAPPER_ATTR, True)
    return cls


def get_map_key(fn: Callable[..., Any]) -> str | None:
    return getattr(fn, _MAP_KEY_ATTR, None)


def is_flush(fn: Callable[..., Any]) -> bool:
    return bool(getattr(fn, _FLUSH_ATTR, False))


def is_mapper(cls: type) -> bool:
    return bool(cls.__dict__.get(_MAPPER_ATTR, False))
