"""Table and form rendering shared by the CLI commands."""

from __future__ import annotations

import click

from invtrack.application.dto import ProductRowDTO
from invtrack.domain.model.draft import FormDraft


def render_table(rows: list[ProductRowDTO]) -> None:
    if not rows:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<22} {'Name':<20} {'Category':<14} {'Stock':>6} {'Price':>10}")
    click.echo("-" * 76)
    for row in rows:
        stock = "?" if row.stock is None else str(row.stock)
        line = (
            f"{row.id:<22} {row.name:<20} {row.category:<14} "
            f"{stock:>6} {row.price:>10}"
        )
        if row.unreadable:
            click.secho(f"{line}  UNREADABLE", fg="magenta", bold=True)
        elif row.low_stock:
            click.secho(f"{line}  LOW", fg="red", bold=True)
        else:
            click.echo(line)


def render_form(draft: FormDraft) -> None:
    if draft.is_editing:
        click.echo(f"Edit Product #{draft.editing_id}")
    else:
        click.echo("Add New Product")
    for label, value in (
        ("Name", draft.name),
        ("Category", draft.category),
        ("Stock", draft.stock),
        ("Price", draft.price),
    ):
        click.echo(f"  {label + ':':<10} {value}")
