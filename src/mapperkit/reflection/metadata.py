"""Per-class reflection summaries.

A TypeDescriptor records which properties a class exposes for reading and
writing, how to access them, and their declared types. Accessors are
discovered in this order, later sources winning:

1. direct attributes: dataclass fields, pydantic model fields, annotated
   class attributes and ``__slots__`` entries
2. ``property`` objects (writable only when they define a setter)
3. paired accessor methods: ``get_x()`` / ``is_x()`` and ``set_x(value)``

Descriptors are built once per class by a TypeMetadataRegistry and never
change afterwards.
"""

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ClassVar, Literal, get_origin

import structlog

from mapperkit.core.errors import NoSuchPropertyError
from mapperkit.reflection.generics import raw_type, strip_annotated, type_hints, unwrap_optional

log = structlog.get_logger(__name__)

AccessKind = Literal["attribute", "method"]

_GETTER_PREFIXES = ("get_", "is_")
_SETTER_PREFIX = "set_"


@dataclass(frozen=True, slots=True)
class Accessor:
    """Handle reading or writing one property on instances of a class."""

    name: str
    attribute: str
    kind: AccessKind
    hint: Any = Any

    @property
    def type(self) -> type:
        """Raw class of the declared type (``list[int] | None`` -> ``list``)."""
        return raw_type(unwrap_optional(self.hint))

    def get(self, obj: Any) -> Any:
        if self.kind == "method":
            return getattr(obj, self.attribute)()
        return getattr(obj, self.attribute)

    def set(self, obj: Any, value: Any) -> None:
        if self.kind == "method":
            getattr(obj, self.attribute)(value)
        else:
            setattr(obj, self.attribute, value)


def _normalize(name: str) -> str:
    return name.lower()


def _alias(name: str) -> str:
    return name.lower().replace("_", "")


def _value_parameters(fn: Callable[..., Any]) -> list[inspect.Parameter] | None:
    """Parameters after ``self``, or None when the signature is unavailable."""
    try:
        params = list(inspect.signature(fn).parameters.values())
    except (TypeError, ValueError):
        return None
    return params[1:]


def _is_frozen(cls: type) -> bool:
    params = getattr(cls, "__dataclass_params__", None)
    if params is not None and params.frozen:
        return True
    model_config = getattr(cls, "model_config", None)
    return isinstance(model_config, Mapping) and bool(model_config.get("frozen"))


def _field_names(cls: type, hints: dict[str, Any]) -> list[str]:
    names: list[str] = []
    if dataclasses.is_dataclass(cls):
        names.extend(f.name for f in dataclasses.fields(cls))
    model_fields = getattr(cls, "model_fields", None)
    if isinstance(model_fields, Mapping):
        names.extend(model_fields)
    for name, hint in hints.items():
        if get_origin(strip_annotated(hint)) is ClassVar or hint is ClassVar:
            continue
        names.append(name)
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(slots)
    seen: dict[str, None] = {}
    for name in names:
        if not name.startswith("_"):
            seen.setdefault(name, None)
    return list(seen)


def _has_default_constructor(cls: type) -> bool:
    try:
        sig = inspect.signature(cls)
    except (TypeError, ValueError):
        # Builtins such as dict/list expose no signature but take no arguments.
        return cls.__module__ == "builtins"
    return all(
        p.default is not inspect.Parameter.empty
        or p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for p in sig.parameters.values()
    )


class TypeDescriptor:
    """Readable/writable properties of one class. Immutable once built."""

    def __init__(
        self,
        cls: type,
        getters: dict[str, Accessor],
        setters: dict[str, Accessor],
        default_constructible: bool,
    ) -> None:
        self._type = cls
        self._getters: Mapping[str, Accessor] = MappingProxyType(dict(getters))
        self._setters: Mapping[str, Accessor] = MappingProxyType(dict(setters))
        self._default_constructible = default_constructible
        names = [*getters, *setters]
        self._case_insensitive = MappingProxyType({_normalize(n): n for n in names})
        self._aliases = MappingProxyType({_alias(n): n for n in names})

    @classmethod
    def build(cls, tp: type) -> TypeDescriptor:
        hints = type_hints(tp)
        getters: dict[str, Accessor] = {}
        setters: dict[str, Accessor] = {}

        frozen = _is_frozen(tp)
        for name in _field_names(tp, hints):
            hint = hints.get(name, Any)
            getters[name] = Accessor(name, name, "attribute", hint)
            if not frozen:
                setters[name] = Accessor(name, name, "attribute", hint)

        # Walk base classes first so overriding definitions win.
        for klass in reversed(tp.__mro__):
            if klass is object or klass.__module__.startswith("pydantic."):
                continue
            for attr, member in vars(klass).items():
                if attr.startswith("_"):
                    continue
                if isinstance(member, property):
                    cls._add_property(attr, member, getters, setters)
                elif inspect.isfunction(member):
                    cls._add_method(attr, member, getters, setters)

        return cls(tp, getters, setters, _has_default_constructor(tp))

    @staticmethod
    def _add_property(
        name: str,
        prop: property,
        getters: dict[str, Accessor],
        setters: dict[str, Accessor],
    ) -> None:
        if prop.fget is not None:
            hint = type_hints(prop.fget).get("return", Any)
            getters[name] = Accessor(name, name, "attribute", hint)
        else:
            getters.pop(name, None)
        if prop.fset is not None:
            params = _value_parameters(prop.fset) or []
            hint = type_hints(prop.fset).get(params[0].name, Any) if params else Any
            setters[name] = Accessor(name, name, "attribute", hint)
        else:
            setters.pop(name, None)

    @staticmethod
    def _add_method(
        attr: str,
        fn: Callable[..., Any],
        getters: dict[str, Accessor],
        setters: dict[str, Accessor],
    ) -> None:
        params = _value_parameters(fn)
        if params is None:
            return
        required = [p for p in params if p.default is inspect.Parameter.empty]
        for prefix in _GETTER_PREFIXES:
            if attr.startswith(prefix) and len(attr) > len(prefix) and not required:
                hint = type_hints(fn).get("return", Any)
                if prefix == "is_" and raw_type(hint) is not bool:
                    continue
                name = attr[len(prefix) :]
                getters[name] = Accessor(name, attr, "method", hint)
                return
        if attr.startswith(_SETTER_PREFIX) and len(attr) > len(_SETTER_PREFIX) and len(params) == 1:
            name = attr[len(_SETTER_PREFIX) :]
            hint = type_hints(fn).get(params[0].name, Any)
            setters[name] = Accessor(name, attr, "method", hint)

    @property
    def type(self) -> type:
        return self._type

    @property
    def getable_property_names(self) -> tuple[str, ...]:
        return tuple(self._getters)

    @property
    def setable_property_names(self) -> tuple[str, ...]:
        return tuple(self._setters)

    @property
    def has_default_constructor(self) -> bool:
        return self._default_constructible

    def has_getter(self, name: str) -> bool:
        return name in self._getters

    def has_setter(self, name: str) -> bool:
        return name in self._setters

    def get_getter(self, name: str) -> Accessor:
        try:
            return self._getters[name]
        except KeyError:
            raise NoSuchPropertyError.no_getter(self._type, name) from None

    def get_setter(self, name: str) -> Accessor:
        try:
            return self._setters[name]
        except KeyError:
            raise NoSuchPropertyError.no_setter(self._type, name) from None

    def get_getter_hint(self, name: str) -> Any:
        return self.get_getter(name).hint

    def get_setter_hint(self, name: str) -> Any:
        return self.get_setter(name).hint

    def get_getter_type(self, name: str) -> type:
        return self.get_getter(name).type

    def get_setter_type(self, name: str) -> type:
        return self.get_setter(name).type

    def find_property_name(self, name: str, use_camel_case_mapping: bool = False) -> str | None:
        """Resolve ``name`` to a canonical property name, ignoring case.

        With ``use_camel_case_mapping`` underscores are ignored as well, so a
        column label like ``USER_NAME`` finds ``username`` or ``user_name``.
        """
        if name in self._getters or name in self._setters:
            return name
        found = self._case_insensitive.get(_normalize(name))
        if found is None and use_camel_case_mapping:
            found = self._aliases.get(_alias(name))
        return found

    def __repr__(self) -> str:
        return f"TypeDescriptor({self._type.__qualname__})"


class TypeMetadataRegistry:
    """Process-scoped cache of one TypeDescriptor per class.

    Owned by the hosting MapperConfiguration and handed explicitly to every
    component that needs type metadata.
    """

    def __init__(self, cache_enabled: bool = True) -> None:
        self._cache_enabled = cache_enabled
        self._descriptors: dict[type, TypeDescriptor] = {}

    @property
    def cache_enabled(self) -> bool:
        return self._cache_enabled

    def describe(self, tp: type) -> TypeDescriptor:
        if not self._cache_enabled:
            return TypeDescriptor.build(tp)
        descriptor = self._descriptors.get(tp)
        if descriptor is None:
            built = TypeDescriptor.build(tp)
            # Concurrent builders may race; the first published descriptor wins.
            descriptor = self._descriptors.setdefault(tp, built)
            if descriptor is built:
                log.debug(
                    "type_described",
                    type=tp.__qualname__,
                    getters=len(built.getable_property_names),
                    setters=len(built.setable_property_names),
                )
        return descriptor

    def __contains__(self, tp: object) -> bool:
        return tp in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)
