"""Reflection: type metadata, property paths and parameter naming."""

from mapperkit.reflection.factory import ObjectFactory
from mapperkit.reflection.meta_class import MetaClass
from mapperkit.reflection.meta_object import MetaObject
from mapperkit.reflection.metadata import Accessor, TypeDescriptor, TypeMetadataRegistry
from mapperkit.reflection.params import (
    GENERIC_NAME_PREFIX,
    NonDataParameter,
    Param,
    ParamMap,
    ParamNameResolver,
    wrap_to_map_if_collection,
)
from mapperkit.reflection.property import PropertyPath
from mapperkit.reflection.views import BeanView, MappingView, ObjectView, SequenceView

__all__ = [
    # Type metadata
    "Accessor",
    "TypeDescriptor",
    "TypeMetadataRegistry",
    "ObjectFactory",
    # Property paths
    "PropertyPath",
    "MetaClass",
    "MetaObject",
    "ObjectView",
    "BeanView",
    "MappingView",
    "SequenceView",
    # Parameters
    "GENERIC_NAME_PREFIX",
    "NonDataParameter",
    "Param",
    "ParamMap",
    "ParamNameResolver",
    "wrap_to_map_if_collection",
]
