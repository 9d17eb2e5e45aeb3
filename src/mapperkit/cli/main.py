"""mapperkit CLI - inspect how classes and mapper interfaces are seen."""

import click

from mapperkit import __version__
from mapperkit.cli.describe import describe_command
from mapperkit.cli.plan import plan_command
from mapperkit.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="mapperkit")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """mapperkit - typed mapper interfaces over registered operations."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(describe_command, name="describe")
cli.add_command(plan_command, name="plan")


if __name__ == "__main__":
    cli()
