"""Core module exports."""

from mapperkit.core.errors import (
    BindingError,
    ConfigError,
    ErrorCode,
    InternalError,
    MapperKitError,
    NoSuchPropertyError,
    PluginError,
    ReflectionError,
    TooManyResultsError,
    UnsupportedOperationError,
)
from mapperkit.core.logging import (
    bind_session_id,
    clear_session_id,
    configure_logging,
    get_logger,
    get_session_id,
    set_session_id,
)

__all__ = [
    # Errors
    "MapperKitError",
    "ErrorCode",
    "ReflectionError",
    "NoSuchPropertyError",
    "UnsupportedOperationError",
    "ConfigError",
    "BindingError",
    "TooManyResultsError",
    "PluginError",
    "InternalError",
    # Logging
    "bind_session_id",
    "clear_session_id",
    "configure_logging",
    "get_logger",
    "get_session_id",
    "set_session_id",
]
