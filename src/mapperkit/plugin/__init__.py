"""Plugin: method interception over capability types."""

from mapperkit.plugin.interceptor import (
    Interceptor,
    InterceptorChain,
    Invocation,
    Signature,
    intercepts,
)
from mapperkit.plugin.plugin import Plugin

__all__ = [
    "Interceptor",
    "InterceptorChain",
    "Invocation",
    "Plugin",
    "Signature",
    "intercepts",
]
