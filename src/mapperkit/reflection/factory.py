"""Object construction for result coercion and path auto-creation."""

from __future__ import annotations

import collections.abc
from typing import Any

from mapperkit.core.errors import ReflectionError
from mapperkit.reflection.generics import is_collection_type, raw_type

# Abstract collection types resolve to the concrete class that gets built.
_CONCRETE_TYPES: dict[type, type] = {
    collections.abc.Iterable: list,
    collections.abc.Collection: list,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Set: set,
    collections.abc.MutableSet: set,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
}


class ObjectFactory:
    """Creates fresh instances of declared types."""

    def resolve_type(self, tp: Any) -> type:
        cls = raw_type(tp)
        return _CONCRETE_TYPES.get(cls, cls)

    def create(self, tp: Any, *args: Any, **kwargs: Any) -> Any:
        cls = self.resolve_type(tp)
        try:
            return cls(*args, **kwargs)
        except Exception as e:
            raise ReflectionError.creation_failed(cls, str(e)) from e

    def is_collection(self, tp: Any) -> bool:
        return is_collection_type(tp)
