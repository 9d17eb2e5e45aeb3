"""Config module exports."""

from mapperkit.config.loader import MapperKitSettings, load_config
from mapperkit.config.models import (
    BindingConfig,
    LoggingConfig,
    LogOutputConfig,
    MapperKitConfig,
    ReflectionConfig,
)

__all__ = [
    "load_config",
    "MapperKitConfig",
    "MapperKitSettings",
    "BindingConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ReflectionConfig",
]
