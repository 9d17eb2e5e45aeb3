"""Tests for reflection/metadata.py."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, ClassVar

import pytest
from pydantic import BaseModel, ConfigDict

from mapperkit.core.errors import ErrorCode, NoSuchPropertyError
from mapperkit.reflection.metadata import Accessor, TypeDescriptor, TypeMetadataRegistry


@dataclass
class Address:
    city: str = ""
    zip_code: str = ""


@dataclass(frozen=True)
class Point:
    x: int
    y: int


class Account:
    kind: ClassVar[str] = "account"
    owner: str
    _secret: str

    def __init__(self, owner: str = "") -> None:
        self.owner = owner
        self._balance = 0
        self._active = False

    @property
    def balance(self) -> int:
        return self._balance

    def get_label(self) -> str:
        return f"{self.owner}:{self._balance}"

    def is_active(self) -> bool:
        return self._active

    def set_active(self, active: bool) -> None:
        self._active = active

    def is_weird(self) -> str:
        return "not a bool getter"

    def get_with_arg(self, key: str) -> str:
        return key


class Customer(BaseModel):
    name: str = ""
    tags: list[str] = []


class FrozenCustomer(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""


class Slotted:
    __slots__ = ("sku", "qty")

    def __init__(self, sku: str, qty: int) -> None:
        self.sku = sku
        self.qty = qty


@dataclass
class Order:
    lines: list[Address] = field(default_factory=list)
    USER_NAME: str = ""


class TestTypeDescriptor:
    """Accessor discovery tests."""

    def test_dataclass_fields_readable_and_writable(self) -> None:
        descriptor = TypeDescriptor.build(Address)

        assert descriptor.getable_property_names == ("city", "zip_code")
        assert descriptor.setable_property_names == ("city", "zip_code")
        assert descriptor.get_getter_type("city") is str
        assert descriptor.has_default_constructor

    def test_frozen_dataclass_has_no_setters(self) -> None:
        descriptor = TypeDescriptor.build(Point)

        assert set(descriptor.getable_property_names) == {"x", "y"}
        assert descriptor.setable_property_names == ()
        assert not descriptor.has_default_constructor

    def test_plain_class_members(self) -> None:
        # Given
        descriptor = TypeDescriptor.build(Account)

        # When
        getters = set(descriptor.getable_property_names)
        setters = set(descriptor.setable_property_names)

        # Then
        assert getters == {"owner", "balance", "label", "active"}
        assert setters == {"owner", "active"}
        assert descriptor.get_getter("label").kind == "method"
        assert descriptor.get_getter("label").attribute == "get_label"
        assert descriptor.get_setter_type("active") is bool

    def test_accessors_read_and_write(self) -> None:
        descriptor = TypeDescriptor.build(Account)
        account = Account("ann")

        descriptor.get_setter("active").set(account, True)

        assert descriptor.get_getter("active").get(account) is True
        assert descriptor.get_getter("label").get(account) == "ann:0"

    def test_pydantic_fields(self) -> None:
        descriptor = TypeDescriptor.build(Customer)

        assert set(descriptor.getable_property_names) == {"name", "tags"}
        assert descriptor.get_getter_type("tags") is list
        assert descriptor.has_setter("name")

    def test_frozen_pydantic_model_has_no_setters(self) -> None:
        assert TypeDescriptor.build(FrozenCustomer).setable_property_names == ()

    def test_slots_are_properties(self) -> None:
        descriptor = TypeDescriptor.build(Slotted)

        assert set(descriptor.getable_property_names) == {"sku", "qty"}
        assert not descriptor.has_default_constructor

    def test_missing_getter_raises(self) -> None:
        descriptor = TypeDescriptor.build(Address)

        with pytest.raises(NoSuchPropertyError) as exc_info:
            descriptor.get_getter("street")

        assert exc_info.value.code == ErrorCode.NO_SUCH_PROPERTY

    def test_missing_setter_raises(self) -> None:
        with pytest.raises(NoSuchPropertyError):
            TypeDescriptor.build(Account).get_setter("balance")

    @pytest.mark.parametrize(
        ("name", "camel", "expected"),
        [
            ("city", False, "city"),
            ("CITY", False, "city"),
            ("zipcode", False, None),
            ("ZIPCODE", True, "zip_code"),
            ("Zip_Code", False, "zip_code"),
        ],
    )
    def test_find_property_name(self, name: str, camel: bool, expected: str | None) -> None:
        descriptor = TypeDescriptor.build(Address)

        assert descriptor.find_property_name(name, camel) == expected


class TestAccessor:
    def test_type_unwraps_optional(self) -> None:
        accessor = Accessor("lines", "lines", "attribute", list[Address] | None)

        assert accessor.type is list

    def test_untyped_accessor_is_object(self) -> None:
        assert Accessor("x", "x", "attribute").type is object


class TestTypeMetadataRegistry:
    """Descriptor cache tests."""

    def test_describe_returns_same_instance(self) -> None:
        registry = TypeMetadataRegistry()

        assert registry.describe(Address) is registry.describe(Address)
        assert Address in registry
        assert len(registry) == 1

    def test_cache_disabled_builds_fresh(self) -> None:
        registry = TypeMetadataRegistry(cache_enabled=False)

        assert registry.describe(Address) is not registry.describe(Address)
        assert len(registry) == 0

    def test_concurrent_first_calls_publish_one_descriptor(self) -> None:
        """Racing first describes all observe one instance."""
        # Given
        registry = TypeMetadataRegistry()
        barrier = threading.Barrier(8)
        seen: list[Any] = []

        def describe() -> None:
            barrier.wait()
            seen.append(registry.describe(Order))

        # When
        threads = [threading.Thread(target=describe) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # Then
        assert len(seen) == 8
        assert all(d is seen[0] for d in seen)
