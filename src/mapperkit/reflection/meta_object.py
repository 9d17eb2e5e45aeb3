"""Value-level property path access.

MetaObject reads and writes property paths against a live object graph::

    meta = configuration.new_meta_object(order)
    meta.get_value("customer.address.city")
    meta.set_value("lines[0].quantity", 3)

Missing intermediate values are created on write (when the written value is
not None) with the ObjectFactory, using the declared setter type. On read a
missing intermediate value yields None.
"""

from __future__ import annotations

import collections.abc
from typing import Any

from mapperkit.reflection.factory import ObjectFactory
from mapperkit.reflection.metadata import TypeMetadataRegistry
from mapperkit.reflection.property import PropertyPath
from mapperkit.reflection.views import BeanView, MappingView, ObjectView, SequenceView


def _view_for(meta_object: MetaObject, obj: Any) -> ObjectView:
    if isinstance(obj, collections.abc.Mapping):
        return MappingView(meta_object, obj)
    if isinstance(obj, collections.abc.Collection) and not isinstance(
        obj, (str, bytes, bytearray)
    ):
        return SequenceView(meta_object, obj)
    return BeanView(meta_object, obj)


class MetaObject:
    def __init__(
        self,
        obj: Any,
        object_factory: ObjectFactory,
        registry: TypeMetadataRegistry,
        use_camel_case_mapping: bool = False,
    ) -> None:
        if obj is None:
            raise ValueError("MetaObject requires a non-None value")
        self._original_object = obj
        self._object_factory = object_factory
        self._registry = registry
        self._use_camel_case_mapping = use_camel_case_mapping
        self._view = _view_for(self, obj)

    @classmethod
    def for_object(
        cls,
        obj: Any,
        object_factory: ObjectFactory,
        registry: TypeMetadataRegistry,
        use_camel_case_mapping: bool = False,
    ) -> MetaObject | None:
        """MetaObject over ``obj``, or None when ``obj`` is None."""
        if obj is None:
            return None
        return cls(obj, object_factory, registry, use_camel_case_mapping)

    def for_value(self, obj: Any) -> MetaObject:
        """Sibling MetaObject sharing this one's factory and registry."""
        return MetaObject(obj, self._object_factory, self._registry, self._use_camel_case_mapping)

    @property
    def original_object(self) -> Any:
        return self._original_object

    @property
    def object_factory(self) -> ObjectFactory:
        return self._object_factory

    @property
    def registry(self) -> TypeMetadataRegistry:
        return self._registry

    @property
    def view(self) -> ObjectView:
        return self._view

    def find_property(self, name: str, use_camel_case_mapping: bool | None = None) -> str | None:
        if use_camel_case_mapping is None:
            use_camel_case_mapping = self._use_camel_case_mapping
        return self._view.find_property(name, use_camel_case_mapping)

    @property
    def getter_names(self) -> tuple[str, ...]:
        return self._view.getter_names

    @property
    def setter_names(self) -> tuple[str, ...]:
        return self._view.setter_names

    def get_setter_type(self, name: str) -> type:
        return self._view.get_setter_type(name)

    def get_getter_type(self, name: str) -> type:
        return self._view.get_getter_type(name)

    def has_setter(self, name: str) -> bool:
        return self._view.has_setter(name)

    def has_getter(self, name: str) -> bool:
        return self._view.has_getter(name)

    def get_value(self, name: str) -> Any:
        prop = PropertyPath.parse(name)
        if prop.has_next():
            meta_value = self.meta_object_for_property(prop.indexed_name)
            if meta_value is None:
                return None
            return meta_value.get_value(prop.children or "")
        return self._view.get(prop)

    def set_value(self, name: str, value: Any) -> None:
        prop = PropertyPath.parse(name)
        if prop.has_next():
            meta_value = self.meta_object_for_property(prop.indexed_name)
            if meta_value is None:
                if value is None:
                    # Don't instantiate child path if value is None
                    return
                meta_value = self._view.instantiate_property_value(
                    name, prop, self._object_factory
                )
            meta_value.set_value(prop.children or "", value)
        else:
            self._view.set(prop, value)

    def meta_object_for_property(self, name: str) -> MetaObject | None:
        value = self.get_value(name)
        if value is None:
            return None
        return self.for_value(value)

    @property
    def is_collection(self) -> bool:
        return self._view.is_collection

    def add(self, element: Any) -> None:
        self._view.add(element)

    def add_all(self, elements: collections.abc.Iterable[Any]) -> None:
        self._view.add_all(elements)

    def __repr__(self) -> str:
        return f"MetaObject({type(self._original_object).__qualname__})"
