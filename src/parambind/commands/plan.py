"""Command: show the compiled field plan of a record."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from parambind.commands._base import ExamplesCommand

if TYPE_CHECKING:
    from parambind.commands._context import AppContext


@click.command(
    cls=ExamplesCommand,
    examples="""\
  parambind plan myapp.params:SearchQuery
  parambind --json plan myapp.params:SearchQuery""",
)
@click.argument("target")
@click.pass_obj
def plan(app: AppContext, target: str) -> None:
    """Compile and display the field plan for TARGET (module:Class)."""
    app.emit(app.service.plan(target))
