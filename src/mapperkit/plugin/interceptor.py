"""Interceptor contract and signature declarations.

An interceptor declares which capability methods it wants to see::

    @intercepts(Signature(Session, "query"), Signature(Session, "execute"))
    class AuditInterceptor(Interceptor):
        def intercept(self, invocation: Invocation) -> Any:
            log.info("call", method=invocation.method)
            return invocation.proceed()

and is applied to a target with ``interceptor.plugin(target)``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

import structlog

log = structlog.get_logger(__name__)

C = TypeVar("C", bound=type)

_INTERCEPTS_ATTR = "__mapperkit_intercepts__"


@dataclass(frozen=True, slots=True)
class Signature:
    """One intercepted method: the capability type and the method name."""

    type: type
    method: str


def intercepts(*signatures: Signature) -> Callable[[C], C]:
    def decorator(cls: C) -> C:
        setattr(cls, _INTERCEPTS_ATTR, tuple(signatures))
        return cls

    return decorator


def get_signatures(interceptor: Any) -> tuple[Signature, ...] | None:
    """Signatures declared with @intercepts on the interceptor's class, if any."""
    return getattr(type(interceptor), _INTERCEPTS_ATTR, None)


@dataclass(slots=True)
class Invocation:
    """An intercepted call. ``proceed()`` runs it against the real target."""

    target: Any
    method: str
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    def proceed(self) -> Any:
        return getattr(self.target, self.method)(*self.args, **self.kwargs)


class Interceptor(ABC):
    @abstractmethod
    def intercept(self, invocation: Invocation) -> Any: ...

    def plugin(self, target: Any) -> Any:
        from mapperkit.plugin.plugin import Plugin

        return Plugin.wrap(target, self)

    def set_properties(self, properties: Mapping[str, Any]) -> None:
        # NOP
        return None


class InterceptorChain:
    """Interceptors applied to a target in registration order."""

    def __init__(self) -> None:
        self._interceptors: list[Interceptor] = []

    def add_interceptor(self, interceptor: Interceptor) -> None:
        self._interceptors.append(interceptor)
        log.debug("interceptor_added", interceptor=type(interceptor).__qualname__)

    @property
    def interceptors(self) -> tuple[Interceptor, ...]:
        return tuple(self._interceptors)

    def plugin_all(self, target: Any) -> Any:
        for interceptor in self._interceptors:
            target = interceptor.plugin(target)
        return target
