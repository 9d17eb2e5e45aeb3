"""Runtime wiring of registries, factories and interceptors."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from mapperkit.binding.proxy import MapperProxyFactory
from mapperkit.binding.registry import MapperRegistry
from mapperkit.binding.session import InMemoryOperationRegistry, OperationRegistry, Session
from mapperkit.config.models import MapperKitConfig
from mapperkit.plugin.interceptor import Interceptor, InterceptorChain
from mapperkit.reflection.factory import ObjectFactory
from mapperkit.reflection.meta_class import MetaClass
from mapperkit.reflection.meta_object import MetaObject
from mapperkit.reflection.metadata import TypeMetadataRegistry

T = TypeVar("T")


class MapperConfiguration:
    """Everything a mapper proxy needs, owned in one place.

    The operation registry describes the operations proxies can bind to.
    Sessions handed to ``get_mapper`` are passed through the interceptor
    chain first, so interceptors declared against ``Session`` see every
    call the proxy makes.
    """

    def __init__(
        self,
        settings: MapperKitConfig | None = None,
        operation_registry: OperationRegistry | None = None,
        object_factory: ObjectFactory | None = None,
    ) -> None:
        self.settings = settings or MapperKitConfig()
        self.operation_registry: OperationRegistry = (
            operation_registry if operation_registry is not None else InMemoryOperationRegistry()
        )
        self.object_factory = object_factory or ObjectFactory()
        self.type_registry = TypeMetadataRegistry(self.settings.reflection.cache_enabled)
        self.mapper_registry = MapperRegistry(self)
        self.interceptor_chain = InterceptorChain()

    def new_meta_object(self, obj: Any) -> MetaObject:
        return MetaObject(
            obj,
            self.object_factory,
            self.type_registry,
            self.settings.reflection.map_underscore_to_camel_case,
        )

    def meta_class(self, tp: type) -> MetaClass:
        return MetaClass.for_class(tp, self.type_registry)

    def add_mapper(self, interface: type[T]) -> MapperProxyFactory[T]:
        return self.mapper_registry.add_mapper(interface)

    def add_mappers(self, module: Any, super_type: type | None = None) -> list[type]:
        return self.mapper_registry.add_mappers(module, super_type)

    def has_mapper(self, interface: type) -> bool:
        return self.mapper_registry.has_mapper(interface)

    def get_mapper(self, interface: type[T], session: Session) -> T:
        return self.mapper_registry.get_mapper(interface, self.plugin_all(session))

    def add_interceptor(
        self, interceptor: Interceptor, properties: Mapping[str, Any] | None = None
    ) -> None:
        if properties:
            interceptor.set_properties(properties)
        self.interceptor_chain.add_interceptor(interceptor)

    @property
    def interceptors(self) -> tuple[Interceptor, ...]:
        return self.interceptor_chain.interceptors

    def plugin_all(self, target: Any) -> Any:
        return self.interceptor_chain.plugin_all(target)
