"""
Fixtura CLI - Command-line interface for building fixtures.

Builds a fixture from a class and shows its run state and test cases.
"""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.tree import Tree

from fixtura.building.fixture_builder import FixtureBuilder
from fixtura.building.models import FixtureData, RunState, Test, TestFixture
from fixtura.building.type_info import TypeInfo, resolve_type
from fixtura.config import BuilderConfig, BuilderConfigLoader
from fixtura.logging import configure_logging

app = typer.Typer(
    name="fixtura",
    help="Fixture construction engine - build test fixtures from classes",
    add_completion=False,
)

console = Console()

RUN_STATE_STYLES = {
    RunState.RUNNABLE: "green",
    RunState.NOT_RUNNABLE: "red",
    RunState.SKIPPED: "yellow",
    RunState.EXPLICIT: "cyan",
    RunState.IGNORED: "yellow",
}


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        from fixtura import __version__

        console.print(f"[bold blue]Fixtura[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Fixtura - Fixture construction engine."""
    pass


def load_target(target: str) -> Any:
    """
    Import the object named by ``module:QualName``.

    Raises:
        ValueError: If the target is malformed or cannot be imported.
    """
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise ValueError(f"Target must look like 'module:Class', got '{target}'")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import module '{module_name}': {e}") from e

    for attr in qualname.split("."):
        if not hasattr(obj, attr):
            raise ValueError(f"'{module_name}' has no attribute '{qualname}'")
        obj = getattr(obj, attr)
    return obj


def _parse_argument(raw: str) -> Any:
    """Parse a command-line argument as a YAML scalar ("42" -> 42)."""
    value = yaml.safe_load(raw)
    if value is None and raw.strip() not in ("null", "~"):
        return raw
    return value


@app.command()
def build(
    target: str = typer.Argument(..., help="Fixture class as module:Class"),
    args: list[str] = typer.Option(
        None, "--arg", "-a", help="Constructor argument (YAML scalar), repeatable"
    ),
    type_args: list[str] = typer.Option(
        None, "--type-arg", "-t", help="Type argument name, repeatable"
    ),
    data: str = typer.Option(None, "--data", "-d", help="Fixture data YAML file"),
    config_path: str = typer.Option(None, "--config", "-c", help="Builder config YAML file"),
    format_: str = typer.Option("console", "--format", "-f", help="Output format: console, yaml, json"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Verbose output"),
) -> None:
    """
    Build a fixture from a class and display it.

    Without arguments, type arguments or a data file, the class is built
    as-is.
    """
    configure_logging(verbose=verbose)

    if format_ not in ("console", "yaml", "json"):
        console.print(f"[red]Error:[/red] Unknown format: {format_}")
        raise typer.Exit(1)

    try:
        config = BuilderConfigLoader.from_yaml(config_path) if config_path else BuilderConfig()
        type_info = TypeInfo.of(load_target(target))
        fixture_data = _load_fixture_data(args or [], type_args or [], data)
    except (FileNotFoundError, TypeError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    builder = FixtureBuilder(config=config)
    if fixture_data is None:
        fixture = builder.build_from(type_info)
    else:
        fixture = builder.build_from_data(type_info, fixture_data)

    if format_ == "json":
        console.print_json(json.dumps(fixture.to_dict()))
    elif format_ == "yaml":
        console.print(fixture.to_yaml(), markup=False, soft_wrap=True)
    else:
        _display_fixture(fixture)


@app.command("sample-config")
def sample_config() -> None:
    """Print a sample builder configuration."""
    console.print(BuilderConfigLoader.generate_sample_config(), markup=False, soft_wrap=True)


def _load_fixture_data(
    args: list[str], type_args: list[str], data_path: str | None
) -> FixtureData | None:
    if data_path:
        path = Path(data_path)
        if not path.exists():
            raise FileNotFoundError(f"Fixture data file not found: {path}")
        fixture_data = FixtureData.from_yaml(path.read_text())
        if not args and not type_args:
            return fixture_data
        return fixture_data.model_copy(
            update={
                "arguments": [_parse_argument(a) for a in args] or fixture_data.arguments,
                "type_args": [resolve_type(t) for t in type_args] or fixture_data.type_args,
            }
        )

    if not args and not type_args:
        return None

    return FixtureData(
        arguments=[_parse_argument(a) for a in args],
        type_args=[resolve_type(t) for t in type_args],
    )


def _label(test: Test) -> str:
    style = RUN_STATE_STYLES.get(test.run_state, "white")
    label = f"{escape(test.name)} [{style}]{test.run_state.value}[/{style}]"
    if test.skip_reason:
        label += f" [dim]- {escape(test.skip_reason)}[/dim]"
    return label


def _display_fixture(fixture: TestFixture) -> None:
    tree = Tree(f"[bold]{escape(fixture.full_name)}[/bold]")
    for test in fixture.tests:
        tree.add(_label(test))

    console.print(
        Panel(
            tree,
            title=f"🧪 {_label(fixture)}",
            border_style=RUN_STATE_STYLES.get(fixture.run_state, "blue"),
        )
    )
    console.print(f"[dim]{fixture.test_count} test(s)[/dim]")


if __name__ == "__main__":
    app()
