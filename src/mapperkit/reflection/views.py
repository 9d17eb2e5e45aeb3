"""Uniform property access over beans, mappings and sequences.

Every value walked by a MetaObject is seen through exactly one ObjectView,
chosen once from the value's runtime shape:

- MappingView: any Mapping; property names are keys
- SequenceView: non-string, non-mapping collections; only add/add_all
- BeanView: everything else, resolved through the TypeDescriptor and the
  instance's own attributes
"""

from __future__ import annotations

import collections.abc
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from mapperkit.core.errors import ReflectionError, UnsupportedOperationError
from mapperkit.reflection.meta_class import MetaClass
from mapperkit.reflection.property import PropertyPath

if TYPE_CHECKING:
    from mapperkit.reflection.factory import ObjectFactory
    from mapperkit.reflection.meta_object import MetaObject


class ObjectView(ABC):
    """Property access for one live value."""

    def __init__(self, meta_object: MetaObject) -> None:
        self._meta_object = meta_object

    @abstractmethod
    def get(self, prop: PropertyPath) -> Any: ...

    @abstractmethod
    def set(self, prop: PropertyPath, value: Any) -> None: ...

    @abstractmethod
    def find_property(self, name: str, use_camel_case_mapping: bool) -> str | None: ...

    @property
    @abstractmethod
    def getter_names(self) -> tuple[str, ...]: ...

    @property
    @abstractmethod
    def setter_names(self) -> tuple[str, ...]: ...

    @abstractmethod
    def get_setter_type(self, name: str) -> type: ...

    @abstractmethod
    def get_getter_type(self, name: str) -> type: ...

    @abstractmethod
    def has_setter(self, name: str) -> bool: ...

    @abstractmethod
    def has_getter(self, name: str) -> bool: ...

    @abstractmethod
    def instantiate_property_value(
        self, name: str, prop: PropertyPath, factory: ObjectFactory
    ) -> MetaObject: ...

    @property
    def is_collection(self) -> bool:
        return False

    def add(self, element: Any) -> None:
        raise UnsupportedOperationError.because(
            f"{type(self).__name__} does not support adding elements"
        )

    def add_all(self, elements: collections.abc.Iterable[Any]) -> None:
        raise UnsupportedOperationError.because(
            f"{type(self).__name__} does not support adding elements"
        )

    def _resolve_collection(self, prop: PropertyPath, obj: Any) -> Any:
        if prop.name == "":
            return obj
        return self._meta_object.get_value(prop.name)

    @staticmethod
    def _get_collection_value(prop: PropertyPath, collection: Any) -> Any:
        index = prop.index or ""
        if isinstance(collection, collections.abc.Mapping):
            if index not in collection and index.lstrip("-").isdigit():
                return collection.get(int(index))
            return collection.get(index)
        if isinstance(collection, collections.abc.Sequence) and not isinstance(collection, str):
            return collection[int(index)]
        raise ReflectionError.not_indexable(prop.name, collection)

    @staticmethod
    def _set_collection_value(prop: PropertyPath, collection: Any, value: Any) -> None:
        index = prop.index or ""
        if isinstance(collection, collections.abc.MutableMapping):
            key: Any = index
            if index not in collection and index.lstrip("-").isdigit() and int(index) in collection:
                key = int(index)
            collection[key] = value
        elif isinstance(collection, collections.abc.MutableSequence):
            collection[int(index)] = value
        else:
            raise ReflectionError.not_indexable(prop.name, collection)


class BeanView(ObjectView):
    """Plain objects, resolved through their TypeDescriptor.

    Attributes assigned on the instance (``self.name = ...`` in ``__init__``)
    that the class does not declare are readable and writable too.
    """

    def __init__(self, meta_object: MetaObject, obj: Any) -> None:
        super().__init__(meta_object)
        self._object = obj
        self._meta_class = MetaClass(type(obj), meta_object.registry)

    def _instance_attributes(self) -> dict[str, Any]:
        attrs = getattr(self._object, "__dict__", None)
        if not isinstance(attrs, dict):
            return {}
        return {name: value for name, value in attrs.items() if not name.startswith("_")}

    def _is_instance_attribute(self, name: str) -> bool:
        return PropertyPath.parse(name).name in self._instance_attributes()

    def _instance_attribute_type(self, name: str) -> type:
        value = self._meta_object.get_value(name)
        return object if value is None else type(value)

    def get(self, prop: PropertyPath) -> Any:
        if prop.index is not None:
            collection = self._resolve_collection(prop, self._object)
            return self._get_collection_value(prop, collection)
        if not self._meta_class.has_getter(prop.name):
            attrs = self._instance_attributes()
            if prop.name in attrs:
                return attrs[prop.name]
        return self._meta_class.get_getter(prop.name).get(self._object)

    def set(self, prop: PropertyPath, value: Any) -> None:
        if prop.index is not None:
            collection = self._resolve_collection(prop, self._object)
            self._set_collection_value(prop, collection, value)
        elif not self._meta_class.has_setter(prop.name) and self._is_instance_attribute(prop.name):
            setattr(self._object, prop.name, value)
        else:
            self._meta_class.get_setter(prop.name).set(self._object, value)

    def find_property(self, name: str, use_camel_case_mapping: bool) -> str | None:
        found = self._meta_class.find_property(name, use_camel_case_mapping)
        if found is not None or PropertyPath.parse(name).has_next():
            return found
        for attr in self._instance_attributes():
            if attr.lower() == name.lower() or (
                use_camel_case_mapping
                and attr.lower().replace("_", "") == name.lower().replace("_", "")
            ):
                return attr
        return None

    @property
    def getter_names(self) -> tuple[str, ...]:
        names = dict.fromkeys(self._meta_class.getter_names)
        names.update(dict.fromkeys(self._instance_attributes()))
        return tuple(names)

    @property
    def setter_names(self) -> tuple[str, ...]:
        names = dict.fromkeys(self._meta_class.setter_names)
        names.update(dict.fromkeys(self._instance_attributes()))
        return tuple(names)

    def get_setter_type(self, name: str) -> type:
        prop = PropertyPath.parse(name)
        if prop.has_next():
            meta_value = self._meta_object.meta_object_for_property(prop.indexed_name)
            if meta_value is None:
                return self._meta_class.get_setter_type(name)
            return meta_value.get_setter_type(prop.children or "")
        if not self._meta_class.has_setter(prop.name) and self._is_instance_attribute(name):
            return self._instance_attribute_type(name)
        return self._meta_class.get_setter_type(name)

    def get_getter_type(self, name: str) -> type:
        prop = PropertyPath.parse(name)
        if prop.has_next():
            meta_value = self._meta_object.meta_object_for_property(prop.indexed_name)
            if meta_value is None:
                return self._meta_class.get_getter_type(name)
            return meta_value.get_getter_type(prop.children or "")
        if not self._meta_class.has_getter(prop.name) and self._is_instance_attribute(name):
            return self._instance_attribute_type(name)
        return self._meta_class.get_getter_type(name)

    def has_setter(self, name: str) -> bool:
        prop = PropertyPath.parse(name)
        if prop.has_next():
            if not self._meta_class.has_setter(prop.indexed_name) and not (
                self._is_instance_attribute(prop.name)
            ):
                return False
            meta_value = self._meta_object.meta_object_for_property(prop.indexed_name)
            if meta_value is None:
                return self._meta_class.has_setter(name)
            return meta_value.has_setter(prop.children or "")
        return self._meta_class.has_setter(name) or self._is_instance_attribute(name)

    def has_getter(self, name: str) -> bool:
        prop = PropertyPath.parse(name)
        if prop.has_next():
            if not self._meta_class.has_getter(prop.indexed_name) and not (
                self._is_instance_attribute(prop.name)
            ):
                return False
            meta_value = self._meta_object.meta_object_for_property(prop.indexed_name)
            if meta_value is None:
                return self._meta_class.has_getter(name)
            return meta_value.has_getter(prop.children or "")
        return self._meta_class.has_getter(name) or self._is_instance_attribute(name)

    def instantiate_property_value(
        self, name: str, prop: PropertyPath, factory: ObjectFactory
    ) -> MetaObject:
        if prop.index is not None:
            tp = self._meta_class.get_getter_type(prop.indexed_name)
        else:
            tp = self.get_setter_type(prop.name)
        new_object = factory.create(tp)
        self.set(prop, new_object)
        return self._meta_object.for_value(new_object)


class MappingView(ObjectView):
    """Mappings; property names are used directly as keys."""

    def __init__(self, meta_object: MetaObject, mapping: collections.abc.Mapping[Any, Any]) -> None:
        super().__init__(meta_object)
        self._map = mapping

    def get(self, prop: PropertyPath) -> Any:
        if prop.index is not None:
            collection = self._resolve_collection(prop, self._map)
            return self._get_collection_value(prop, collection)
        return self._map.get(prop.name)

    def set(self, prop: PropertyPath, value: Any) -> None:
        if prop.index is not None:
            collection = self._resolve_collection(prop, self._map)
            self._set_collection_value(prop, collection, value)
        elif isinstance(self._map, collections.abc.MutableMapping):
            self._map[prop.name] = value
        else:
            raise UnsupportedOperationError.because(
                f"Cannot set '{prop.name}' on read-only mapping {type(self._map).__name__}"
            )

    def find_property(self, name: str, use_camel_case_mapping: bool) -> str | None:
        return name

    @property
    def getter_names(self) -> tuple[str, ...]:
        return tuple(str(key) for key in self._map)

    @property
    def setter_names(self) -> tuple[str, ...]:
        return tuple(str(key) for key in self._map)

    def get_setter_type(self, name: str) -> type:
        return self._value_type(name, setter=True)

    def get_getter_type(self, name: str) -> type:
        return self._value_type(name, setter=False)

    def _value_type(self, name: str, setter: bool) -> type:
        prop = PropertyPath.parse(name)
        if prop.has_next():
            meta_value = self._meta_object.meta_object_for_property(prop.indexed_name)
            if meta_value is None:
                return object
            if setter:
                return meta_value.get_setter_type(prop.children or "")
            return meta_value.get_getter_type(prop.children or "")
        value = self._map.get(name)
        return object if value is None else type(value)

    def has_setter(self, name: str) -> bool:
        return True

    def has_getter(self, name: str) -> bool:
        prop = PropertyPath.parse(name)
        if prop.has_next():
            if prop.indexed_name not in self._map:
                return False
            meta_value = self._meta_object.meta_object_for_property(prop.indexed_name)
            if meta_value is None:
                return True
            return meta_value.has_getter(prop.children or "")
        return prop.name in self._map

    def instantiate_property_value(
        self, name: str, prop: PropertyPath, factory: ObjectFactory
    ) -> MetaObject:
        new_map = factory.create(dict)
        self.set(prop, new_map)
        return self._meta_object.for_value(new_map)


class SequenceView(ObjectView):
    """Collections without named properties; supports appending only."""

    def __init__(
        self, meta_object: MetaObject, collection: collections.abc.Collection[Any]
    ) -> None:
        super().__init__(meta_object)
        self._collection = collection

    def _unsupported(self) -> UnsupportedOperationError:
        return UnsupportedOperationError.because(
            f"{type(self._collection).__name__} has no named properties"
        )

    def get(self, prop: PropertyPath) -> Any:
        raise self._unsupported()

    def set(self, prop: PropertyPath, value: Any) -> None:
        raise self._unsupported()

    def find_property(self, name: str, use_camel_case_mapping: bool) -> str | None:
        raise self._unsupported()

    @property
    def getter_names(self) -> tuple[str, ...]:
        raise self._unsupported()

    @property
    def setter_names(self) -> tuple[str, ...]:
        raise self._unsupported()

    def get_setter_type(self, name: str) -> type:
        raise self._unsupported()

    def get_getter_type(self, name: str) -> type:
        raise self._unsupported()

    def has_setter(self, name: str) -> bool:
        raise self._unsupported()

    def has_getter(self, name: str) -> bool:
        raise self._unsupported()

    def instantiate_property_value(
        self, name: str, prop: PropertyPath, factory: ObjectFactory
    ) -> MetaObject:
        raise self._unsupported()

    @property
    def is_collection(self) -> bool:
        return True

    def add(self, element: Any) -> None:
        target = self._collection
        if isinstance(target, collections.abc.MutableSequence):
            target.append(element)
        elif isinstance(target, collections.abc.MutableSet):
            target.add(element)
        else:
            raise UnsupportedOperationError.because(
                f"{type(target).__name__} is immutable and cannot be added to"
            )

    def add_all(self, elements: collections.abc.Iterable[Any]) -> None:
        for element in elements:
            self.add(element)
