"""Type-level property path resolution.

MetaClass combines a TypeDescriptor with PropertyPath parsing so nested
expressions like ``billing.address.city`` or ``orders[0].total`` can be
resolved against a class without an instance.
"""

from __future__ import annotations

from mapperkit.reflection.generics import is_collection_type, resolve_element_class
from mapperkit.reflection.metadata import Accessor, TypeDescriptor, TypeMetadataRegistry
from mapperkit.reflection.property import PropertyPath


class MetaClass:
    def __init__(self, tp: type, registry: TypeMetadataRegistry) -> None:
        self._registry = registry
        self._descriptor: TypeDescriptor = registry.describe(tp)

    @classmethod
    def for_class(cls, tp: type, registry: TypeMetadataRegistry) -> MetaClass:
        return cls(tp, registry)

    @property
    def type(self) -> type:
        return self._descriptor.type

    @property
    def descriptor(self) -> TypeDescriptor:
        return self._descriptor

    @property
    def getter_names(self) -> tuple[str, ...]:
        return self._descriptor.getable_property_names

    @property
    def setter_names(self) -> tuple[str, ...]:
        return self._descriptor.setable_property_names

    @property
    def has_default_constructor(self) -> bool:
        return self._descriptor.has_default_constructor

    def meta_class_for_property(self, name: str) -> MetaClass:
        return MetaClass(self._descriptor.get_getter_type(name), self._registry)

    def find_property(self, name: str, use_camel_case_mapping: bool = False) -> str | None:
        """Canonical spelling of a (possibly nested) property expression, or None."""
        found = self._build_property(name, use_camel_case_mapping)
        return found or None

    def _build_property(self, name: str, use_camel_case_mapping: bool) -> str:
        prop = PropertyPath.parse(name)
        if prop.has_next():
            property_name = self._descriptor.find_property_name(prop.name, use_camel_case_mapping)
            if property_name is None:
                return ""
            rest = self.meta_class_for_property(property_name)._build_property(
                prop.children or "", use_camel_case_mapping
            )
            if not rest:
                return ""
            return f"{property_name}.{rest}"
        return self._descriptor.find_property_name(name, use_camel_case_mapping) or ""

    def get_setter_type(self, name: str) -> type:
        prop = PropertyPath.parse(name)
        if prop.has_next():
            return self.meta_class_for_property(prop.name).get_setter_type(prop.children or "")
        return self._descriptor.get_setter_type(prop.name)

    def get_getter_type(self, name: str) -> type:
        prop = PropertyPath.parse(name)
        if prop.has_next():
            return self._meta_class_for_segment(prop).get_getter_type(prop.children or "")
        return self._segment_getter_type(prop)

    def _meta_class_for_segment(self, prop: PropertyPath) -> MetaClass:
        return MetaClass(self._segment_getter_type(prop), self._registry)

    def _segment_getter_type(self, prop: PropertyPath) -> type:
        tp = self._descriptor.get_getter_type(prop.name)
        if prop.index is not None and is_collection_type(tp):
            return resolve_element_class(self._descriptor.get_getter_hint(prop.name))
        return tp

    def has_setter(self, name: str) -> bool:
        prop = PropertyPath.parse(name)
        if prop.has_next():
            if not self._descriptor.has_setter(prop.name):
                return False
            return self.meta_class_for_property(prop.name).has_setter(prop.children or "")
        return self._descriptor.has_setter(prop.name)

    def has_getter(self, name: str) -> bool:
        prop = PropertyPath.parse(name)
        if prop.has_next():
            if not self._descriptor.has_getter(prop.name):
                return False
            return self._meta_class_for_segment(prop).has_getter(prop.children or "")
        return self._descriptor.has_getter(prop.name)

    def get_getter(self, name: str) -> Accessor:
        return self._descriptor.get_getter(name)

    def get_setter(self, name: str) -> Accessor:
        return self._descriptor.get_setter(name)

    def __repr__(self) -> str:
        return f"MetaClass({self.type.__qualname__})"

