"""Command line interface for ccseed.

Inspects the seeding configuration. Seeding itself needs a transport and
handshake supplied by the embedding node, so no command dials the network.
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.table import Table

from ccseed.config.config import ConfigManager
from ccseed.models import LogLevel
from ccseed.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _get_config_manager(ctx: click.Context) -> ConfigManager:
    """Load configuration for the invoked command."""
    try:
        cfg_mgr = ConfigManager(ctx.obj.get("config"), setup_log=False)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    observability = cfg_mgr.config.observability
    verbosity = ctx.obj.get("verbosity", 0)
    if verbosity >= 2:
        observability.log_level = LogLevel.DEBUG
    elif verbosity == 1:
        observability.log_level = LogLevel.INFO
    cfg_mgr._setup_logging()  # noqa: SLF001
    return cfg_mgr


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Configuration file path",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v: verbose, -vv: debug)",
)
@click.pass_context
def cli(ctx, config, verbose):
    """Ccseed - bootstrap a peer address book from seed nodes."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbosity"] = verbose


@cli.command()
@click.option("--testnet", is_flag=True, help="Show the testnet seed list")
@click.pass_context
def seeds(ctx, testnet):
    """List the seed endpoints a seeding run would contact."""
    cfg = _get_config_manager(ctx).config
    if testnet:
        cfg.seeder.testnet = True

    endpoints = cfg.seeder.endpoints()
    console = Console()
    if not endpoints:
        console.print("No seeds configured.")
        return

    network = "testnet" if cfg.seeder.testnet else "mainnet"
    table = Table(title=f"Seeds ({network})")
    table.add_column("#", justify="right")
    table.add_column("Host")
    table.add_column("Port", justify="right")
    for index, endpoint in enumerate(endpoints, start=1):
        table.add_row(str(index), endpoint.host, str(endpoint.port))
    console.print(table)

    timeout = cfg.seeder.attempt_timeout
    console.print(
        f"Per-seed timeout: {f'{timeout:g}s' if timeout is not None else 'none'}"
    )


@cli.group()
def config():
    """Configuration commands."""


@config.command("show")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["toml", "json"]),
    default="toml",
    show_default=True,
    help="Output format",
)
@click.pass_context
def show_config(ctx, fmt):
    """Print the effective configuration."""
    cfg_mgr = _get_config_manager(ctx)
    click.echo(cfg_mgr.export(fmt))


def main() -> None:
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
