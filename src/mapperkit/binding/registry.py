"""Known mapper interfaces and their proxy factories."""

from __future__ import annotations

import importlib
import inspect
from types import ModuleType
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from mapperkit.binding.annotations import is_mapper
from mapperkit.binding.proxy import MapperProxyFactory
from mapperkit.binding.session import Session
from mapperkit.core.errors import BindingError

if TYPE_CHECKING:
    from mapperkit.configuration import MapperConfiguration

log = structlog.get_logger(__name__)

T = TypeVar("T")


class MapperRegistry:
    def __init__(self, configuration: MapperConfiguration) -> None:
        self._configuration = configuration
        self._known: dict[type, MapperProxyFactory[Any]] = {}

    def add_mapper(self, interface: type[T]) -> MapperProxyFactory[T]:
        if not inspect.isclass(interface):
            raise TypeError(f"mapper interface must be a class, got {interface!r}")
        factory = MapperProxyFactory(interface, self._configuration)
        published = self._known.setdefault(interface, factory)
        if published is not factory:
            raise BindingError.mapper_already_known(interface)
        log.info("mapper_added", interface=f"{interface.__module__}.{interface.__qualname__}")
        return factory

    def add_mappers(
        self, module: ModuleType | str, super_type: type | None = None
    ) -> list[type]:
        """Register every ``@mapper`` class defined in ``module``.

        Classes merely imported into the module are skipped. With
        ``super_type`` only its subclasses are registered.
        """
        if isinstance(module, str):
            module = importlib.import_module(module)
        added: list[type] = []
        for _, cls in inspect.getmembers(module, inspect.isclass):
            if cls.__module__ != module.__name__ or not is_mapper(cls):
                continue
            if super_type is not None and not issubclass(cls, super_type):
                continue
            if cls in self._known:
                continue
            self.add_mapper(cls)
            added.append(cls)
        return added

    def has_mapper(self, interface: type) -> bool:
        return interface in self._known

    def get_factory(self, interface: type[T]) -> MapperProxyFactory[T]:
        try:
            return self._known[interface]
        except KeyError:
            raise BindingError.mapper_not_known(interface) from None

    def get_mapper(self, interface: type[T], session: Session) -> T:
        return self.get_factory(interface).new_instance(session)

    @property
    def mappers(self) -> tuple[type, ...]:
        return tuple(self._known)
