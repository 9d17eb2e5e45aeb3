"""CLI utilities."""

import importlib
from typing import Any

import click


def load_target(target: str) -> type:
    """Resolve ``module.path:QualName`` to a class.

    Raises:
        click.ClickException: If the module or class cannot be found
    """
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise click.ClickException(f"Expected MODULE:CLASS, got '{target}'")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise click.ClickException(f"Cannot import module '{module_name}': {e}") from e
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise click.ClickException(f"'{module_name}' has no attribute '{qualname}'") from None
    if not isinstance(obj, type):
        raise click.ClickException(f"'{target}' is not a class")
    return obj


def type_label(tp: Any) -> str:
    if tp is None:
        return "-"
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp).replace("typing.", "")
