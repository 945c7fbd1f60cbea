import logging
from pathlib import Path

import click

from invtrack.infrastructure.bootstrap import build_context
from invtrack.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_edit,
    product_list,
)
from invtrack.infrastructure.cli.session_commands import shell, watch
from invtrack.infrastructure.configuration import ConfigurationError, load_config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML settings file (default: $INVTRACK_CONFIG or ./config.yaml).",
)
@click.option(
    "--timeout",
    type=float,
    default=10.0,
    show_default=True,
    help="Seconds to wait for the first snapshot from the store.",
)
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None, timeout: float) -> None:
    """Inventory Tracker: real-time product inventory."""
    ctx.meta["timeout"] = timeout
    if ctx.obj is not None:
        # Store context injected by the caller
        return

    try:
        config = load_config(config_file=config_file)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))

    logging.basicConfig(level=config.logging.level, format=LOG_FORMAT)
    ctx.obj = build_context(config)


@cli.group()
def product() -> None:
    """Manage products."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_edit)
product.add_command(product_list)
cli.add_command(watch)
cli.add_command(shell)
