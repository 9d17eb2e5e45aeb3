"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (MAPPERKIT__SECTION__KEY)
3. YAML file (mapperkit.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    MAPPERKIT__<SECTION>__<KEY>=<VALUE>

Examples:
    MAPPERKIT__LOGGING__LEVEL=DEBUG
    MAPPERKIT__BINDING__USE_ACTUAL_PARAM_NAME=false
    MAPPERKIT__REFLECTION__MAP_UNDERSCORE_TO_CAMEL_CASE=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        MAPPERKIT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every plan and descriptor build.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ReflectionConfig(BaseModel):
    """Type metadata and property path configuration.

    Env vars:
        MAPPERKIT__REFLECTION__CACHE_ENABLED: Memoize type descriptors
        MAPPERKIT__REFLECTION__MAP_UNDERSCORE_TO_CAMEL_CASE: Ignore underscores in lookups
    """

    cache_enabled: bool = Field(
        default=True,
        description="Memoize one TypeDescriptor per class. Disable only in tests.",
    )
    map_underscore_to_camel_case: bool = Field(
        default=False,
        description="Strip underscores when resolving column-style names "
        "(USER_NAME) to properties (username).",
    )


class BindingConfig(BaseModel):
    """Mapper binding configuration.

    Env vars:
        MAPPERKIT__BINDING__USE_ACTUAL_PARAM_NAME: Name parameters after their declaration
    """

    use_actual_param_name: bool = Field(
        default=True,
        description="Use declared parameter names when no Param annotation is given. "
        "When false, unnamed parameters are named '0', '1', ...",
    )


class MapperKitConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    reflection: ReflectionConfig = Field(default_factory=ReflectionConfig)
    binding: BindingConfig = Field(default_factory=BindingConfig)
