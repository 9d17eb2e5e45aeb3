"""Tests for the describe CLI command."""

import json
from dataclasses import dataclass

import click
import pytest
from click.testing import CliRunner

from mapperkit.cli.describe import describe_type
from mapperkit.cli.main import cli
from mapperkit.cli.utils import load_target, type_label
from mapperkit.reflection.metadata import TypeMetadataRegistry


@dataclass
class Order:
    id: int = 0
    note: str = ""

    @property
    def total(self) -> int:
        return 42


@dataclass(frozen=True)
class Receipt:
    number: str


@dataclass
class Basket:
    items: list[int] | None = None


class TestDescribeType:
    def test_given_dataclass_when_described_then_properties_sorted(self) -> None:
        # Given
        descriptor = TypeMetadataRegistry().describe(Order)

        # When
        data = describe_type(descriptor)

        # Then
        assert data["type"] == f"{__name__}.Order"
        assert data["default_constructor"] is True
        assert data["properties"] == [
            {"name": "id", "getter": "int", "setter": "int"},
            {"name": "note", "getter": "str", "setter": "str"},
            {"name": "total", "getter": "int", "setter": None},
        ]

    def test_given_frozen_dataclass_when_described_then_read_only(self) -> None:
        data = describe_type(TypeMetadataRegistry().describe(Receipt))

        assert data["default_constructor"] is False
        assert data["properties"] == [{"name": "number", "getter": "str", "setter": None}]

    def test_given_generic_field_when_described_then_same_label_both_columns(self) -> None:
        data = describe_type(TypeMetadataRegistry().describe(Basket))

        assert data["properties"] == [
            {"name": "items", "getter": "list[int] | None", "setter": "list[int] | None"}
        ]


class TestDescribeCommand:
    def test_json_output(self) -> None:
        # Given
        runner = CliRunner()

        # When
        result = runner.invoke(cli, ["describe", f"{__name__}:Order", "--json"])

        # Then
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [p["name"] for p in data["properties"]] == ["id", "note", "total"]

    def test_table_output(self) -> None:
        runner = CliRunner(env={"COLUMNS": "200"})

        result = runner.invoke(cli, ["describe", f"{__name__}:Receipt"])

        assert result.exit_code == 0, result.output
        assert "number" in result.output
        assert "Default constructor: no" in result.output

    def test_bad_target_fails(self) -> None:
        runner = CliRunner()

        result = runner.invoke(cli, ["describe", "no_colon_here"])

        assert result.exit_code != 0
        assert "Expected MODULE:CLASS" in result.output


class TestUtils:
    def test_load_target_resolves_nested_qualname(self) -> None:
        assert load_target("mapperkit.binding.session:RowBounds").__name__ == "RowBounds"

    @pytest.mark.parametrize(
        ("target", "message"),
        [
            ("mapperkit.no_such_module:Thing", "Cannot import module"),
            ("mapperkit.binding.session:Missing", "has no attribute"),
            ("mapperkit:__version__", "is not a class"),
        ],
    )
    def test_load_target_errors(self, target: str, message: str) -> None:
        with pytest.raises(click.ClickException, match=message):
            load_target(target)

    @pytest.mark.parametrize(
        ("tp", "label"),
        [(None, "-"), (int, "int"), (Order, "Order")],
    )
    def test_type_label(self, tp: object, label: str) -> None:
        assert type_label(tp) == label
