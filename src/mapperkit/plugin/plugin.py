"""Forwarding adapters that route selected calls through an interceptor.

``Plugin.wrap(target, interceptor)`` looks at the capability types named in
the interceptor's signatures and keeps those the target is an instance of.
The result is an instance of a generated class subclassing exactly those
capabilities: every public method forwards to the target, and the methods
named in a signature go through ``interceptor.intercept`` first.

Adapter classes depend only on the capability tuple, so they are generated
once per tuple and shared between interceptors.
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Callable, Mapping
from typing import Any

import structlog

from mapperkit.core.errors import PluginError
from mapperkit.plugin.interceptor import Interceptor, Invocation, get_signatures

log = structlog.get_logger(__name__)

_adapter_classes: dict[tuple[type, ...], type] = {}


def _declaring_class(tp: type, name: str) -> type:
    for klass in tp.__mro__:
        if name in klass.__dict__:
            return klass
    return tp


def get_signature_map(interceptor: Interceptor) -> dict[type, frozenset[str]]:
    """Capability type -> intercepted method names, in declaration order."""
    signatures = get_signatures(interceptor)
    if signatures is None:
        raise PluginError.intercepts_missing(interceptor)
    methods: dict[type, set[str]] = {}
    for sig in signatures:
        if not callable(getattr(sig.type, sig.method, None)):
            raise PluginError.method_not_found(sig.type, sig.method)
        methods.setdefault(sig.type, set()).add(sig.method)
    return {tp: frozenset(names) for tp, names in methods.items()}


def get_capabilities(target: Any, signature_map: Mapping[type, Any]) -> tuple[type, ...]:
    """Signature types ``target`` is an instance of, ordered by its MRO.

    Virtually registered ABCs are not in the MRO; they follow in
    declaration order.
    """
    mro = type(target).__mro__
    matched = [tp for tp in signature_map if isinstance(target, tp)]
    matched.sort(key=lambda tp: mro.index(tp) if tp in mro else len(mro))
    return tuple(matched)


def _forwarded_members(capability: type) -> dict[str, Any]:
    abstract = getattr(capability, "__abstractmethods__", frozenset())
    members: dict[str, Any] = {}
    for klass in reversed(capability.__mro__):
        if klass is object:
            continue
        for name, member in vars(klass).items():
            if name.startswith("_") and name not in abstract:
                continue
            if inspect.isfunction(member) or isinstance(member, property):
                members[name] = member
    return members


def _method_forwarder(declaring: type, name: str) -> Callable[..., Any]:
    def forward(self: Any, *args: Any, **kwargs: Any) -> Any:
        return self._plugin.invoke(declaring, name, args, kwargs)

    forward.__name__ = name
    forward.__qualname__ = f"{declaring.__qualname__}.{name}"
    return forward


def _property_forwarder(name: str) -> property:
    def fget(self: Any) -> Any:
        return getattr(self._plugin.target, name)

    return property(fget)


def _adapter_repr(self: Any) -> str:
    return f"<plugin {type(self._plugin.interceptor).__qualname__} over {self._plugin.target!r}>"


def _build_adapter_class(capabilities: tuple[type, ...]) -> type:
    namespace: dict[str, Any] = {
        "__slots__": ("_plugin",),
        "__repr__": _adapter_repr,
    }
    for capability in reversed(capabilities):
        for name, member in _forwarded_members(capability).items():
            if isinstance(member, property):
                namespace[name] = _property_forwarder(name)
            else:
                namespace[name] = _method_forwarder(_declaring_class(capability, name), name)

    def init(self: Any, plugin: Plugin) -> None:
        object.__setattr__(self, "_plugin", plugin)

    namespace["__init__"] = init
    name = "".join(tp.__name__ for tp in capabilities) + "Plugin"
    return types.new_class(name, capabilities, exec_body=lambda ns: ns.update(namespace))


def adapter_class(capabilities: tuple[type, ...]) -> type:
    cls = _adapter_classes.get(capabilities)
    if cls is None:
        cls = _adapter_classes.setdefault(capabilities, _build_adapter_class(capabilities))
    return cls


class Plugin:
    """Routes adapter calls either to the interceptor or straight to the target."""

    def __init__(
        self,
        target: Any,
        interceptor: Interceptor,
        signature_map: Mapping[type, frozenset[str]],
    ) -> None:
        self.target = target
        self.interceptor = interceptor
        self._signature_map = signature_map

    @staticmethod
    def wrap(target: Any, interceptor: Interceptor) -> Any:
        signature_map = get_signature_map(interceptor)
        capabilities = get_capabilities(target, signature_map)
        if not capabilities:
            return target
        adapter = adapter_class(capabilities)(Plugin(target, interceptor, signature_map))
        log.debug(
            "plugin_wrapped",
            interceptor=type(interceptor).__qualname__,
            target=type(target).__qualname__,
            capabilities=[tp.__qualname__ for tp in capabilities],
        )
        return adapter

    def invoke(
        self,
        declaring: type,
        name: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        methods = self._signature_map.get(declaring)
        if methods is not None and name in methods:
            return self.interceptor.intercept(Invocation(self.target, name, args, kwargs))
        return getattr(self.target, name)(*args, **kwargs)
