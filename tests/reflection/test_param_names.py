"""Tests for reflection/params.py."""

from __future__ import annotations

import array
from typing import Annotated, Any

import pytest

from mapperkit.binding.session import ResultHandler, RowBounds
from mapperkit.core.errors import BindingError, ErrorCode
from mapperkit.reflection.params import (
    Param,
    ParamMap,
    ParamNameResolver,
    wrap_to_map_if_collection,
)


def annotated(m: Annotated[int, Param("M")], n: Annotated[int, Param("N")]) -> None: ...


def plain(a: int, b: int) -> None: ...


def with_bounds(a: int, bounds: RowBounds, b: int) -> None: ...


def single(user_id: int) -> None: ...


def single_named(user_id: Annotated[int, Param("id")]) -> None: ...


def only_special(bounds: RowBounds, handler: ResultHandler[Any]) -> None: ...


def no_params() -> None: ...


def clashing(a: Annotated[int, Param("param2")], b: int) -> None: ...


def defaults(a: int, b: int = 5) -> None: ...


class Methods:
    def lookup(self, key: str, limit: int) -> None: ...


class TestNameTable:
    """Position -> name tables."""

    def test_explicit_names(self) -> None:
        assert dict(ParamNameResolver(annotated).table) == {0: "M", 1: "N"}

    def test_ordinal_names(self) -> None:
        resolver = ParamNameResolver(plain, use_actual_param_name=False)

        assert dict(resolver.table) == {0: "0", 1: "1"}

    def test_actual_names(self) -> None:
        assert dict(ParamNameResolver(plain).table) == {0: "a", 1: "b"}

    def test_non_data_parameters_leave_gaps(self) -> None:
        resolver = ParamNameResolver(with_bounds, use_actual_param_name=False)

        assert dict(resolver.table) == {0: "0", 2: "1"}

    def test_self_is_not_a_parameter(self) -> None:
        resolver = ParamNameResolver(Methods.lookup)

        assert resolver.names == ("key", "limit")

    def test_has_param_annotation(self) -> None:
        assert ParamNameResolver(annotated).has_param_annotation
        assert not ParamNameResolver(plain).has_param_annotation

    def test_variadic_rejected(self) -> None:
        def variadic(*args: int) -> None: ...

        with pytest.raises(BindingError) as exc_info:
            ParamNameResolver(variadic)

        assert exc_info.value.code == ErrorCode.UNSUPPORTED_PARAMETER


class TestGetNamedParams:
    """Argument binding rules."""

    def test_single_unnamed_parameter_returned_bare(self) -> None:
        assert ParamNameResolver(single).get_named_params([7]) == 7

    def test_single_sequence_parameter_wrapped(self) -> None:
        result = ParamNameResolver(single).get_named_params([[1, 2]])

        assert isinstance(result, ParamMap)
        assert result == {"collection": [1, 2], "list": [1, 2], "user_id": [1, 2]}

    def test_single_sequence_without_actual_name(self) -> None:
        resolver = ParamNameResolver(single, use_actual_param_name=False)

        assert resolver.get_named_params([[1]]) == {"collection": [1], "list": [1]}

    def test_single_explicit_name_gets_map(self) -> None:
        result = ParamNameResolver(single_named).get_named_params([7])

        assert result == {"id": 7, "param1": 7}

    @pytest.mark.parametrize(
        "args",
        [[], [RowBounds(), None]],
    )
    def test_no_named_parameters_gives_none(self, args: list[Any]) -> None:
        resolver = ParamNameResolver(only_special if args else no_params)

        assert resolver.get_named_params(args) is None

    def test_none_args_gives_none(self) -> None:
        assert ParamNameResolver(plain).get_named_params(None) is None

    def test_many_parameters_named_and_generic(self) -> None:
        # Given
        resolver = ParamNameResolver(with_bounds)

        # When
        result = resolver.get_named_params([1, RowBounds(), 2])

        # Then
        assert result == {"a": 1, "b": 2, "param1": 1, "param2": 2}

    def test_generic_name_does_not_overwrite_explicit_name(self) -> None:
        result = ParamNameResolver(clashing).get_named_params([1, 2])

        assert result["param2"] == 1
        assert result["param1"] == 1
        assert result["b"] == 2

    def test_keywords_and_defaults_applied(self) -> None:
        result = ParamNameResolver(defaults).get_named_params([], {"a": 1})

        assert result == {"a": 1, "b": 5, "param1": 1, "param2": 5}

    def test_unknown_key_raises(self) -> None:
        result = ParamNameResolver(plain).get_named_params([1, 2])

        with pytest.raises(BindingError) as exc_info:
            result["c"]

        assert exc_info.value.code == ErrorCode.PARAMETER_NOT_FOUND
        assert "Available parameters are" in exc_info.value.message


class TestWrapToMapIfCollection:
    @pytest.mark.parametrize(
        ("value", "keys"),
        [
            ((1, 2), {"array"}),
            (array.array("i", [1]), {"array"}),
            ([1], {"collection", "list"}),
            ({1}, {"collection"}),
        ],
    )
    def test_collections_wrapped(self, value: Any, keys: set[str]) -> None:
        result = wrap_to_map_if_collection(value, None)

        assert set(result) == keys

    @pytest.mark.parametrize("value", ["text", b"raw", {"a": 1}, 5, None])
    def test_scalars_and_mappings_unchanged(self, value: Any) -> None:
        assert wrap_to_map_if_collection(value, "x") is value


class TestArgumentBinding:
    """Arguments are bound to the signature before naming."""

    @pytest.mark.parametrize(
        ("method", "args"),
        [(no_params, [1]), (only_special, [RowBounds()]), (plain, [1, 2, 3])],
    )
    def test_wrong_arguments_raise(self, method: Any, args: list[Any]) -> None:
        with pytest.raises(TypeError):
            ParamNameResolver(method).get_named_params(args)

    def test_name_arguments_takes_normalized_values(self) -> None:
        # Given
        def keyword_only(name: str, *, limit: int = 10) -> None: ...

        resolver = ParamNameResolver(keyword_only)
        values = resolver.normalize(["a"], {"limit": 5})

        # When
        result = resolver.name_arguments(values)

        # Then
        assert values == ["a", 5]
        assert result == {"name": "a", "limit": 5, "param1": "a", "param2": 5}
