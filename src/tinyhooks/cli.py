"""tinyhooks CLI for inspecting hookable classes - Tyro implementation."""

import importlib
import inspect
import json
import logging
import sys
from builtins import print as builtin_print
from pathlib import Path
from typing import Annotated, Any

import attrs
import tyro
from rich import print
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tinyhooks.config import CONFIG_FILENAME, TinyHooksConfig, get_config, set_config_instance
from tinyhooks.hookable import Hookable
from tinyhooks.operations import operations
from tinyhooks.visibility import is_public, visibility_of


# Subcommand definitions using attrs
@attrs.define
class Show:
    """Show the operations of a hookable class and their hook status."""

    target: Annotated[str, tyro.conf.Positional]
    """Class to inspect, as module:Class or module.Class."""

    json: Annotated[bool, tyro.conf.arg(aliases=["-j"])] = False
    """Output the operation list as JSON."""


@attrs.define
class ShowConfig:
    """Show the effective tinyhooks configuration."""

    json: Annotated[bool, tyro.conf.arg(aliases=["-j"])] = False
    """Output configuration as JSON."""


Command = Annotated[Show, tyro.conf.subcommand(name="show")] | Annotated[
    ShowConfig, tyro.conf.subcommand(name="config")
]


def setup_logging(level: str = "INFO") -> None:
    """Configure logging with 100-character text width."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)-20s - %(levelname)-8s - %(message).100s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def load_class(path: str) -> type[Hookable]:
    """Import a hookable class from ``module:Class`` or ``module.Class``.

    Nested classes are addressed with dots after the colon (``mod:Outer.Inner``).

    Raises:
        ValueError: If the path is malformed or does not name a Hookable subclass
    """
    if ":" in path:
        module_path, qualname = path.split(":", 1)
    elif "." in path:
        module_path, qualname = path.rsplit(".", 1)
    else:
        raise ValueError(f"Expected module:Class, got '{path}'")

    try:
        obj: Any = importlib.import_module(module_path)
    except ImportError as e:
        raise ValueError(f"Cannot import module '{module_path}': {e}") from e

    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ValueError(f"'{module_path}' has no attribute '{qualname}'") from None

    if not (isinstance(obj, type) and issubclass(obj, Hookable)):
        raise ValueError(f"'{path}' is not a Hookable class")
    return obj


def describe_operations(cls: type[Hookable]) -> list[dict[str, Any]]:
    """Collect hook status for every operation of ``cls``.

    Returns:
        One dict per operation with name, kind, visibility, hooked and eligible
    """
    state = cls.hook_state()
    rows = []
    for name, kind in operations(cls, skip=(object, Hookable)).items():
        registry = state.registry_for(kind.unit_level)
        current = inspect.getattr_static(cls, name)
        hooked = name in registry and current is not registry.lookup(name)
        rows.append(
            {
                "name": name,
                "kind": kind.value,
                "visibility": visibility_of(name).value,
                "hooked": hooked,
                "eligible": state.targets.allow(name) and (not state.public_only or is_public(name)),
            }
        )
    return rows


def show_class(path: str, json_output: bool = False) -> None:
    """Print the operation table for a hookable class."""
    try:
        cls = load_class(path)
    except ValueError as e:
        print(f"[red]Error: {e}[/red]", file=sys.stderr)
        sys.exit(1)

    rows = describe_operations(cls)
    state = cls.hook_state()

    if json_output:
        data = {
            "class": f"{cls.__module__}:{cls.__qualname__}",
            "public_only": state.public_only,
            "targets": list(state.targets.allowed) if state.targets.restricted else None,
            "operations": rows,
        }
        builtin_print(json.dumps(data, indent=2))
        return

    console = Console()
    console.print(Panel(f"[bold cyan]{cls.__module__}:{cls.__qualname__}[/bold cyan]", expand=False))
    console.print(f"Public only: {'[yellow]on[/yellow]' if state.public_only else '[dim]off[/dim]'}")
    if state.targets.restricted:
        console.print(f"Targets: {', '.join(state.targets.allowed or ()) or '[dim]none[/dim]'}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Operation", style="cyan")
    table.add_column("Kind")
    table.add_column("Visibility")
    table.add_column("Hooked", style="green")
    table.add_column("Eligible")

    for row in rows:
        table.add_row(
            row["name"],
            row["kind"],
            row["visibility"],
            "yes" if row["hooked"] else "-",
            "yes" if row["eligible"] else "[red]no[/red]",
        )

    console.print(table)


def show_config(config: TinyHooksConfig, json_output: bool = False) -> None:
    """Print the effective configuration."""
    data = {
        "config_path": str(config.config_path),
        "debug": config.debug,
        "log_level": config.effective_log_level,
        "default_terminator": config.default_terminator.value,
        "public_only": config.public_only,
    }

    if json_output:
        builtin_print(json.dumps(data, indent=2))
        return

    table = Table(show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, str(value))
    Console().print(Panel(table, title="tinyhooks config", expand=False))


def main(
    cmd: Annotated[Command, tyro.conf.arg(name="")],
    *,
    config_dir: Annotated[Path | None, tyro.conf.arg(help="Configuration directory")] = None,
) -> None:
    """tinyhooks - before/after/around hooks for Python classes.

    Inspect hookable classes and the configuration hooks are defined with.
    """
    if config_dir is not None:
        set_config_instance(TinyHooksConfig.from_yaml(config_dir / CONFIG_FILENAME))

    config = get_config()
    setup_logging(config.effective_log_level)

    if isinstance(cmd, Show):
        show_class(cmd.target, json_output=cmd.json)

    elif isinstance(cmd, ShowConfig):
        show_config(config, json_output=cmd.json)


def entry_point() -> None:
    """Entry point for the tinyhooks command."""
    tyro.cli(main)


if __name__ == "__main__":
    entry_point()
