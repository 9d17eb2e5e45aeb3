"""Tests for MapperConfiguration wiring."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import pytest

from mapperkit.binding.method import operation_id
from mapperkit.binding.session import InMemoryOperationRegistry, Session
from mapperkit.config.models import MapperKitConfig, ReflectionConfig
from mapperkit.configuration import MapperConfiguration
from mapperkit.core.errors import BindingError
from mapperkit.plugin.interceptor import Interceptor, Invocation, Signature, intercepts


@dataclass
class Invoice:
    invoice_id: int = 0
    total: int = 0


class InvoiceMapper(ABC):
    @abstractmethod
    def count_open(self) -> int: ...

    @abstractmethod
    def close(self, invoice_id: int) -> bool: ...


class FakeSession:
    def __init__(self) -> None:
        self.executed: list[tuple[str, Any]] = []

    def execute(self, operation_id: str, parameter: Any) -> int:
        self.executed.append((operation_id, parameter))
        return 1

    def query(
        self, operation_id: str, parameter: Any, bounds: Any = None, handler: Any = None
    ) -> list[Any]:
        return [3]

    def query_cursor(self, operation_id: str, parameter: Any, bounds: Any = None) -> Any:
        return iter(())

    def flush(self) -> Any:
        return []


@intercepts(Signature(Session, "query"))
class QueryAudit(Interceptor):
    def __init__(self) -> None:
        self.seen: list[str] = []
        self.properties: dict[str, Any] = {}

    def intercept(self, invocation: Invocation) -> Any:
        self.seen.append(invocation.args[0])
        rows = invocation.proceed()
        return [row * self.properties.get("factor", 1) for row in rows]

    def set_properties(self, properties: Mapping[str, Any]) -> None:
        self.properties = dict(properties)


@pytest.fixture
def configuration() -> MapperConfiguration:
    operations = InMemoryOperationRegistry()
    operations.register(operation_id(InvoiceMapper, "count_open"), "select")
    operations.register(operation_id(InvoiceMapper, "close"), "update")
    config = MapperConfiguration(operation_registry=operations)
    config.add_mapper(InvoiceMapper)
    return config


class TestDefaults:
    def test_given_no_arguments_when_built_then_defaults_wired(self) -> None:
        # When
        config = MapperConfiguration()

        # Then
        assert isinstance(config.settings, MapperKitConfig)
        assert isinstance(config.operation_registry, InMemoryOperationRegistry)
        assert config.type_registry.cache_enabled is True
        assert config.interceptors == ()

    def test_cache_setting_reaches_type_registry(self) -> None:
        settings = MapperKitConfig(reflection=ReflectionConfig(cache_enabled=False))

        config = MapperConfiguration(settings)

        assert config.type_registry.cache_enabled is False


class TestMappers:
    def test_given_registered_mapper_when_get_mapper_then_dispatches(
        self, configuration: MapperConfiguration
    ) -> None:
        # Given
        session = FakeSession()

        # When
        mapper = configuration.get_mapper(InvoiceMapper, session)

        # Then
        assert configuration.has_mapper(InvoiceMapper)
        assert mapper.count_open() == 3
        assert mapper.close(7) is True
        assert session.executed == [(operation_id(InvoiceMapper, "close"), 7)]

    def test_unknown_mapper_raises(self) -> None:
        with pytest.raises(BindingError):
            MapperConfiguration().get_mapper(InvoiceMapper, FakeSession())


class TestInterceptors:
    def test_given_session_interceptor_when_mapper_called_then_intercepted(
        self, configuration: MapperConfiguration
    ) -> None:
        # Given
        audit = QueryAudit()
        configuration.add_interceptor(audit, {"factor": 2})

        # When
        mapper = configuration.get_mapper(InvoiceMapper, FakeSession())
        result = mapper.count_open()

        # Then
        assert result == 6
        assert audit.seen == [operation_id(InvoiceMapper, "count_open")]
        assert configuration.interceptors == (audit,)

    def test_writes_not_named_in_signature_pass_through(
        self, configuration: MapperConfiguration
    ) -> None:
        audit = QueryAudit()
        configuration.add_interceptor(audit)
        session = FakeSession()

        configuration.get_mapper(InvoiceMapper, session).close(1)

        assert audit.seen == []
        assert audit.properties == {}
        assert len(session.executed) == 1

    def test_plugin_all_leaves_unmatched_targets(self) -> None:
        config = MapperConfiguration()
        config.add_interceptor(QueryAudit())
        target = object()

        assert config.plugin_all(target) is target


class TestMetaObjects:
    def test_camel_case_setting_applies_to_meta_objects(self) -> None:
        # Given
        settings = MapperKitConfig(
            reflection=ReflectionConfig(map_underscore_to_camel_case=True)
        )
        config = MapperConfiguration(settings)
        meta = config.new_meta_object(Invoice())

        # When
        name = meta.find_property("INVOICEID")

        # Then
        assert name == "invoice_id"

    def test_meta_class_reports_properties(self) -> None:
        meta = MapperConfiguration().meta_class(Invoice)

        assert meta.has_getter("total")
        assert meta.get_getter_type("total") is int
