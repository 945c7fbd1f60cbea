"""Terminal implementation of the Prompter port."""

from __future__ import annotations

import click

from invtrack.application.prompter import Prompter


class ClickPrompter(Prompter):

    def __init__(self, assume_yes: bool = False) -> None:
        self._assume_yes = assume_yes

    def warn(self, message: str) -> None:
        click.secho(f"Warning: {message}", fg="yellow", err=True)

    def confirm(self, message: str) -> bool:
        if self._assume_yes:
            return True
        return click.confirm(message, default=False)
