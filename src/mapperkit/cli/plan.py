"""mapperkit plan command - show how mapper methods would dispatch."""

import json
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from mapperkit.binding.annotations import is_flush
from mapperkit.binding.method import MethodSignature, operation_id
from mapperkit.binding.proxy import abstract_method_names
from mapperkit.cli.utils import load_target, type_label
from mapperkit.core.errors import MapperKitError


def plan_interface(interface: type) -> dict[str, Any]:
    """Dispatch plan of every abstract method, resolved without a registry."""
    methods = []
    for name in abstract_method_names(interface):
        fn = getattr(interface, name)
        signature = MethodSignature(interface, fn)
        methods.append(
            {
                "name": name,
                "operation_id": operation_id(interface, name),
                "flush": is_flush(fn),
                "shape": signature.shape.value,
                "return_type": type_label(signature.return_hint),
                "map_key": signature.map_key,
                "params": {
                    str(position): param
                    for position, param in signature.param_name_resolver.table.items()
                },
                "row_bounds_index": signature.row_bounds_index,
                "result_handler_index": signature.result_handler_index,
            }
        )
    return {
        "interface": f"{interface.__module__}.{interface.__qualname__}",
        "methods": methods,
    }


@click.command()
@click.argument("target")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def plan_command(target: str, as_json: bool) -> None:
    """Show operation ids, return shapes and parameter names of a mapper.

    TARGET is MODULE:INTERFACE, for example myapp.mappers:OrderMapper.
    """
    interface = load_target(target)
    try:
        data = plan_interface(interface)
    except MapperKitError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    console = Console()
    if not data["methods"]:
        console.print(f"[yellow]No abstract methods[/yellow] on {data['interface']}")
        return
    table = Table(title=data["interface"])
    table.add_column("Method", style="cyan")
    table.add_column("Operation")
    table.add_column("Shape")
    table.add_column("Parameters")
    for method in data["methods"]:
        params = ", ".join(f"{pos}={name}" for pos, name in method["params"].items())
        shape = method["shape"]
        if method["map_key"]:
            shape = f"{shape} by {method['map_key']}"
        table.add_row(method["name"], method["operation_id"], shape, params or "-")
    console.print(table)
