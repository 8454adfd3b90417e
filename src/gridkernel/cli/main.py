"""gridkernel CLI.

Inspect the effective configuration and see how inbound HTTP headers or
message metadata would be mapped to a GridContext.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from gridkernel import __version__
from gridkernel.core.config import ConfigManager, GridKernelConfig, NodeConfig
from gridkernel.core.mappers.http import extract_from_headers
from gridkernel.core.mappers.messaging import extract_from_message
from gridkernel.exceptions import InvalidConfigurationError
from gridkernel.logging import LoggingConfig, configure_logging

from .errors import handle_cli_errors

console = Console()


def setup_logging(verbose: int = 0) -> None:
    level = logging.DEBUG if verbose > 1 else logging.INFO if verbose else logging.WARNING
    configure_logging(LoggingConfig(level=level, format_type="console", service_name="gridkernel-cli", version=__version__))


def _parse_pairs(values: Tuple[str, ...], separator: str, option: str) -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for raw in values:
        if separator not in raw:
            raise InvalidConfigurationError(option, raw, f"'name{separator}value'")
        name, value = raw.split(separator, 1)
        pairs[name.strip()] = value.strip()
    return pairs


def _values_table(title: str, values) -> Table:
    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    for field in ("correlation_id", "causation_id", "tenant_id", "project_id"):
        value = getattr(values, field)
        table.add_row(field, Text(value if value is not None else "-"))
    for key, value in sorted(values.baggage.items()):
        table.add_row(Text(f"baggage[{key}]"), Text(value))
    return table


@click.group()
@click.version_option(version=__version__, prog_name="gridkernel")
@click.option(
    "--config", "-c",
    type=click.Path(path_type=Path),
    help="Configuration file path"
)
@click.option(
    "--verbose", "-v",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG)"
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: int) -> None:
    """gridkernel: distributed context propagation for Grid nodes."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config


@cli.group()
def config() -> None:
    """Manage node configuration."""


@config.command("show")
@click.pass_context
@handle_cli_errors
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration (file plus environment)."""
    manager = ConfigManager(ctx.obj.get("config_file"))
    loaded = manager.load_config()

    table = Table(title=f"gridkernel configuration ({manager.config_file})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for section, values in loaded.model_dump(mode="json").items():
        for key, value in values.items():
            table.add_row(f"{section}.{key}", Text("-" if value is None else str(value)))

    console.print(table)


@config.command("init")
@click.option("--node-id", required=True, help="Kebab-case node identifier")
@click.option("--studio-id", required=True, help="Studio identifier")
@click.option("--environment", required=True, help="Deployment environment")
@click.pass_context
@handle_cli_errors
def config_init(ctx: click.Context, node_id: str, studio_id: str, environment: str) -> None:
    """Write a configuration file with the node identity."""
    manager = ConfigManager(ctx.obj.get("config_file"))
    try:
        node = NodeConfig(node_id=node_id, studio_id=studio_id, environment=environment)
    except ValueError as e:
        raise InvalidConfigurationError("node", node_id, str(e)) from e
    manager.save_config(GridKernelConfig(node=node))
    console.print(f"[green]✓ Configuration written to {manager.config_file}[/green]")


@cli.group()
def inspect() -> None:
    """Show how inbound metadata maps to a GridContext."""


@inspect.command("headers")
@click.option(
    "--header", "-H", "headers",
    multiple=True,
    help="HTTP header as 'Name: value' (repeatable)"
)
@click.pass_context
@handle_cli_errors
def inspect_headers(ctx: click.Context, headers: Tuple[str, ...]) -> None:
    """Map HTTP request headers.

    \b
    Examples:
        gridkernel inspect headers -H "X-Correlation-Id: abc" -H "baggage: a=1,b=2"
        gridkernel inspect headers -H "traceparent: 00-4bf92f35-00f067aa-01"
    """
    max_length = ConfigManager(ctx.obj.get("config_file")).load_config().context.max_header_length
    values = extract_from_headers(_parse_pairs(headers, ":", "--header"), max_value_length=max_length)
    console.print(_values_table("HTTP headers", values))


@inspect.command("message")
@click.option(
    "--metadata", "-m",
    multiple=True,
    help="Message property as 'key=value' (repeatable)"
)
@handle_cli_errors
def inspect_message(metadata: Tuple[str, ...]) -> None:
    """Map message metadata.

    \b
    Examples:
        gridkernel inspect message -m CorrelationId=abc -m baggage-region=eu
    """
    values = extract_from_message(_parse_pairs(metadata, "=", "--metadata"))
    console.print(_values_table("Message metadata", values))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
