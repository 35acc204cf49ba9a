"""Command line interface for consolidate."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from ..config import dump_config, load_config
from ..exceptions import ConsolidateError
from ..renderer import Engines

console = Console()
err_console = Console(stderr=True)


def _setup_logging() -> None:
    """Send consolidate's debug logging to stderr through rich."""
    package_logger = logging.getLogger("consolidate")
    package_logger.setLevel(logging.DEBUG)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=err_console, show_path=False))


def _parse_value(raw: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _parse_assignments(assignments: Iterable[str]) -> Dict[str, Any]:
    """Turn ``key=value`` pairs into a dict; dotted keys create nested dicts."""
    result: Dict[str, Any] = {}
    for assignment in assignments:
        if "=" not in assignment:
            raise click.BadParameter(
                f"Expected key=value, got '{assignment}'", param_hint="--set"
            )
        key, raw = assignment.split("=", 1)
        target = result
        *parents, leaf = key.strip().split(".")
        for parent in parents:
            target = target.setdefault(parent, {})
            if not isinstance(target, dict):
                raise click.BadParameter(
                    f"'{parent}' is set both as a value and as a mapping",
                    param_hint="--set",
                )
        target[leaf] = _parse_value(raw)
    return result


def _parse_partials(partials: Iterable[str]) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for partial in partials:
        if "=" not in partial:
            raise click.BadParameter(
                f"Expected name=fragment, got '{partial}'", param_hint="--partial"
            )
        name, fragment = partial.split("=", 1)
        result[name.strip()] = fragment.strip()
    return result


def _load_data(data_file: Optional[Path]) -> Dict[str, Any]:
    """Read template locals from a JSON or YAML file."""
    if data_file is None:
        return {}
    with open(data_file, "r", encoding="utf-8") as f:
        try:
            if data_file.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise click.BadParameter(
                f"Failed to parse {data_file}: {e}", param_hint="--data"
            ) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise click.BadParameter(
            f"{data_file} must contain a mapping", param_hint="--data"
        )
    return data


def _build_options(
    data_file: Optional[Path],
    assignments: Iterable[str],
    views: Optional[str],
    cache: Optional[bool],
) -> Dict[str, Any]:
    options = _load_data(data_file)
    options.update(_parse_assignments(assignments))
    if views:
        options["views"] = views
    if cache is not None:
        options["cache"] = cache
    return options


def _emit(result: str, output: Optional[Path]) -> None:
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result, encoding="utf-8")
        console.print(f"[green]✓ Rendered output saved to {escape(str(output))}[/green]")
    else:
        click.echo(result, nl=not result.endswith("\n"))


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file (defaults to ./consolidate.yaml when present)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def consolidate(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """consolidate - render templates with any supported engine."""
    if verbose:
        _setup_logging()
    try:
        config = load_config(config_path)
    except ConsolidateError as e:
        console.print(f"❌ [red]Error:[/red] {escape(str(e))}")
        raise click.Abort()
    ctx.obj = Engines(config=config)


_data_options = [
    click.option("--engine", "-e", help="Engine name (inferred from extension if omitted)"),
    click.option(
        "--data",
        "-d",
        "data_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="JSON or YAML file with template locals",
    ),
    click.option(
        "--set", "-s", "assignments", multiple=True, help="Template local as key=value"
    ),
    click.option("--views", help="Directory for bare partial references"),
    click.option("--cache/--no-cache", default=None, help="Enable template caching"),
    click.option(
        "--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Output file"
    ),
]


def data_options(func):
    for option in reversed(_data_options):
        func = option(func)
    return func


@consolidate.command("render")
@click.argument("template", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@data_options
@click.option(
    "--partial", "-p", "partials", multiple=True, help="Partial as name=path-fragment"
)
@click.pass_obj
def render_command(
    engines: Engines,
    template: Path,
    engine: Optional[str],
    data_file: Optional[Path],
    assignments: Iterable[str],
    views: Optional[str],
    cache: Optional[bool],
    output: Optional[Path],
    partials: Iterable[str],
) -> None:
    """Render a template file."""
    try:
        options = _build_options(data_file, assignments, views, cache)
        parsed_partials = _parse_partials(partials)
        if parsed_partials:
            options["partials"] = parsed_partials
        result = engines.render_file(template, options, engine=engine)
    except ConsolidateError as e:
        console.print(f"❌ [red]Error:[/red] {escape(str(e))}")
        raise click.Abort()
    _emit(result, output)


@consolidate.command("string")
@click.argument("source", type=str)
@data_options
@click.pass_obj
def string_command(
    engines: Engines,
    source: str,
    engine: Optional[str],
    data_file: Optional[Path],
    assignments: Iterable[str],
    views: Optional[str],
    cache: Optional[bool],
    output: Optional[Path],
) -> None:
    """Render a template string."""
    try:
        options = _build_options(data_file, assignments, views, cache)
        result = engines.render(source, options, engine=engine)
    except ConsolidateError as e:
        console.print(f"❌ [red]Error:[/red] {escape(str(e))}")
        raise click.Abort()
    _emit(result, output)


@consolidate.command("engines")
@click.option("--installed", is_flag=True, help="Only list engines whose library is installed")
@click.pass_obj
def engines_command(engines: Engines, installed: bool) -> None:
    """List available template engines."""
    registry = engines.registry
    aliases: Dict[str, list] = {}
    for alias, name in registry.list_aliases().items():
        aliases.setdefault(name, []).append(alias)

    table = Table(title="Template Engines")
    table.add_column("Engine", style="cyan")
    table.add_column("Library", style="magenta")
    table.add_column("Extensions", style="green")
    table.add_column("Aliases", style="blue")
    table.add_column("Installed", justify="center")

    for name in registry.list_engines():
        adapter = registry.get(name)
        is_installed = adapter.is_installed()
        if installed and not is_installed:
            continue
        table.add_row(
            name,
            adapter.module,
            ", ".join(adapter.extensions) or "-",
            ", ".join(sorted(aliases.get(name, []))) or "-",
            "[green]✓[/green]" if is_installed else "[red]✗[/red]",
        )

    console.print(table)


@consolidate.command("config")
@click.pass_obj
def config_command(engines: Engines) -> None:
    """Show the effective configuration."""
    console.print(Syntax(dump_config(engines.config), "yaml", theme="monokai"))


if __name__ == "__main__":
    consolidate()
