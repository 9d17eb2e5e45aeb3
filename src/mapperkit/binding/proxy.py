"""Mapper proxies: interface instances whose abstract methods run operations.

For every mapper interface one proxy class is generated. It subclasses the
interface and replaces each abstract method with a dispatcher that looks up
(or builds) the method's MapperMethod and executes it against the session
the proxy was bound to. Concrete interface methods are inherited, so they
run with the proxy as ``self``.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import structlog

from mapperkit.binding.method import MapperMethod
from mapperkit.binding.session import Session

if TYPE_CHECKING:
    from mapperkit.configuration import MapperConfiguration

log = structlog.get_logger(__name__)

T = TypeVar("T")

_SESSION_ATTR = "_mapperkit_session"
_FACTORY_ATTR = "_mapperkit_factory"


def _proxy_init(self: Any, session: Session, factory: MapperProxyFactory[Any]) -> None:
    object.__setattr__(self, _SESSION_ATTR, session)
    object.__setattr__(self, _FACTORY_ATTR, factory)


def _proxy_repr(self: Any) -> str:
    factory = getattr(self, _FACTORY_ATTR)
    return f"<{factory.mapper_interface.__qualname__} proxy>"


def _dispatcher(name: str, method: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(method)
    def dispatch(self: Any, *args: Any, **kwargs: Any) -> Any:
        factory: MapperProxyFactory[Any] = getattr(self, _FACTORY_ATTR)
        plan = factory.cached_mapper_method(name)
        return plan.execute(getattr(self, _SESSION_ATTR), args, kwargs)

    # wraps() copies the abstract flag from the interface method
    dispatch.__isabstractmethod__ = False  # type: ignore[attr-defined]
    return dispatch


def abstract_method_names(interface: type) -> tuple[str, ...]:
    """Names of the abstract plain methods a proxy has to implement."""
    names = []
    for name in sorted(getattr(interface, "__abstractmethods__", ())):
        if inspect.isfunction(inspect.getattr_static(interface, name, None)):
            names.append(name)
    return tuple(names)


class MapperProxyFactory(Generic[T]):
    """Builds proxies for one mapper interface and caches its method plans."""

    def __init__(self, interface: type[T], configuration: MapperConfiguration) -> None:
        self._interface = interface
        self._configuration = configuration
        self._method_cache: dict[str, MapperMethod] = {}
        self._proxy_class = self._build_proxy_class()

    @classmethod
    def for_interface(
        cls, interface: type[T], configuration: MapperConfiguration
    ) -> MapperProxyFactory[T]:
        return cls(interface, configuration)

    @property
    def mapper_interface(self) -> type[T]:
        return self._interface

    @property
    def method_cache(self) -> Mapping[str, MapperMethod]:
        return MappingProxyType(self._method_cache)

    @property
    def proxy_class(self) -> type[T]:
        return self._proxy_class

    def _build_proxy_class(self) -> type[T]:
        interface = self._interface
        namespace: dict[str, Any] = {
            "__slots__": (_SESSION_ATTR, _FACTORY_ATTR),
            "__init__": _proxy_init,
            "__repr__": _proxy_repr,
            "__module__": interface.__module__,
            "__qualname__": f"{interface.__qualname__}Proxy",
        }
        for name in abstract_method_names(interface):
            namespace[name] = _dispatcher(name, getattr(interface, name))
        return type(interface)(f"{interface.__name__}Proxy", (interface,), namespace)

    def cached_mapper_method(self, name: str) -> MapperMethod:
        method = self._method_cache.get(name)
        if method is None:
            built = MapperMethod(
                self._interface, getattr(self._interface, name), self._configuration, name
            )
            method = self._method_cache.setdefault(name, built)
            if method is built:
                log.debug(
                    "mapper_method_resolved",
                    interface=self._interface.__qualname__,
                    method=name,
                    operation_id=built.command.name,
                    kind=built.command.kind.value,
                    shape=built.signature.shape.value,
                )
        return method

    def new_instance(self, session: Session) -> T:
        return self._proxy_class(session, self)  # type: ignore[call-arg]

    def bind(self, session: Session) -> T:
        return self.new_instance(session)
