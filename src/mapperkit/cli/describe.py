"""mapperkit describe command - show the properties of a class."""

import json
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from mapperkit.cli.utils import load_target, type_label
from mapperkit.core.errors import MapperKitError
from mapperkit.reflection.metadata import TypeDescriptor, TypeMetadataRegistry


def describe_type(descriptor: TypeDescriptor) -> dict[str, Any]:
    names = sorted(
        set(descriptor.getable_property_names) | set(descriptor.setable_property_names)
    )
    properties = []
    for name in names:
        properties.append(
            {
                "name": name,
                "getter": (
                    type_label(descriptor.get_getter_hint(name))
                    if descriptor.has_getter(name)
                    else None
                ),
                "setter": (
                    type_label(descriptor.get_setter_hint(name))
                    if descriptor.has_setter(name)
                    else None
                ),
            }
        )
    return {
        "type": f"{descriptor.type.__module__}.{descriptor.type.__qualname__}",
        "default_constructor": descriptor.has_default_constructor,
        "properties": properties,
    }


@click.command()
@click.argument("target")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def describe_command(target: str, as_json: bool) -> None:
    """Show the readable and writable properties of a class.

    TARGET is MODULE:CLASS, for example myapp.models:Order.
    """
    cls = load_target(target)
    try:
        descriptor = TypeMetadataRegistry().describe(cls)
    except MapperKitError as e:
        raise click.ClickException(str(e)) from e

    data = describe_type(descriptor)
    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    console = Console()
    table = Table(title=data["type"], show_lines=False)
    table.add_column("Property", style="cyan")
    table.add_column("Getter")
    table.add_column("Setter")
    for prop in data["properties"]:
        table.add_row(prop["name"], prop["getter"] or "-", prop["setter"] or "-")
    console.print(table)
    constructible = "yes" if data["default_constructor"] else "no"
    console.print(f"Default constructor: [bold]{constructible}[/bold]")
