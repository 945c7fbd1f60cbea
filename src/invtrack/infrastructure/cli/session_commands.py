"""Long-running CLI views: the live table and the interactive form."""

from __future__ import annotations

import click

from invtrack.application.inventory_view import InventoryViewController
from invtrack.domain.exceptions import DomainException
from invtrack.infrastructure.bootstrap import StoreContext
from invtrack.infrastructure.cli.prompter import ClickPrompter
from invtrack.infrastructure.cli.rendering import render_form, render_table

SHELL_HELP = (
    "[f] fill form and submit  [e] edit  [c] cancel edit  "
    "[d] delete  [r] refresh  [q] quit"
)


@click.command("watch")
@click.option("--clear/--no-clear", default=True, help="Clear the screen between updates.")
@click.option("--count", type=int, default=None, help="Stop after this many updates.")
@click.pass_context
def watch(ctx: click.Context, clear: bool, count: int | None) -> None:
    """Show the product table and redraw it whenever the store changes."""
    context: StoreContext = ctx.obj
    view = context.view(ClickPrompter())
    view.mount()
    try:
        for shown, rows in enumerate(view.follow(), start=1):
            if clear:
                click.clear()
            render_table(rows)
            if count is not None and shown >= count:
                break
    except KeyboardInterrupt:
        pass
    finally:
        view.unmount()


def _fill_form(view: InventoryViewController) -> None:
    draft = view.draft
    view.set_field("name", click.prompt("Product Name", default=draft.name, show_default=False))
    view.set_field("category", click.prompt("Category", default=draft.category, show_default=False))
    view.set_field("stock", click.prompt("Stock", default=draft.stock, show_default=False))
    view.set_field("price", click.prompt("Price", default=draft.price, show_default=False))
    if view.submit():
        click.echo("Saved.")


def _edit(view: InventoryViewController) -> None:
    product_id = click.prompt("Product ID")
    try:
        product = view.get_product(product_id)
    except DomainException as exc:
        click.secho(str(exc), fg="red", err=True)
        return
    view.request_edit(product)
    _fill_form(view)


def _delete(view: InventoryViewController) -> None:
    product_id = click.prompt("Product ID")
    if view.request_delete(product_id):
        click.echo("Deleted.")


@click.command("shell")
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Interactive inventory form with a live product table."""
    context: StoreContext = ctx.obj
    view = context.view(ClickPrompter())
    view.mount()
    try:
        view.wait_for_sync(timeout=ctx.meta.get("timeout"))
        while True:
            view.sync()
            click.echo()
            render_table(view.rows())
            click.echo()
            render_form(view.draft)
            click.echo(SHELL_HELP)
            action = click.prompt("Action", default="r", show_default=False).strip().lower()

            if action == "q":
                break
            if action == "f":
                _fill_form(view)
            elif action == "e":
                _edit(view)
            elif action == "c":
                view.cancel_edit()
            elif action == "d":
                _delete(view)
            elif action != "r":
                click.echo(f"Unknown action '{action}'.")
    except TimeoutError as exc:
        raise click.ClickException(str(exc))
    except (KeyboardInterrupt, click.Abort):
        click.echo()
    finally:
        view.unmount()
