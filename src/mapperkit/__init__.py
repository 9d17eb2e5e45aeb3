"""mapperkit - typed mapper interfaces bound to registered operations."""

from mapperkit.binding import (
    CommandKind,
    InMemoryOperationRegistry,
    MapperProxyFactory,
    MapperRegistry,
    ResultContext,
    ResultHandler,
    RowBounds,
    Session,
    flush,
    map_key,
    mapper,
)
from mapperkit.config import MapperKitConfig, load_config
from mapperkit.configuration import MapperConfiguration
from mapperkit.core import BindingError, MapperKitError
from mapperkit.plugin import Interceptor, Invocation, Plugin, Signature, intercepts
from mapperkit.reflection import MetaClass, MetaObject, Param, PropertyPath

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "BindingError",
    "CommandKind",
    "InMemoryOperationRegistry",
    "Interceptor",
    "Invocation",
    "MapperConfiguration",
    "MapperKitConfig",
    "MapperKitError",
    "MapperProxyFactory",
    "MapperRegistry",
    "MetaClass",
    "MetaObject",
    "Param",
    "Plugin",
    "PropertyPath",
    "ResultContext",
    "ResultHandler",
    "RowBounds",
    "Session",
    "Signature",
    "flush",
    "intercepts",
    "load_config",
    "map_key",
    "mapper",
]
