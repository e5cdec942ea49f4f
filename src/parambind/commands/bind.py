"""Command: bind a query string into a record and print the result."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from parambind.commands._base import ExamplesCommand

if TYPE_CHECKING:
    from parambind.commands._context import AppContext


@click.command(
    cls=ExamplesCommand,
    examples="""\
  parambind bind myapp.params:SearchQuery 'q=lamp&page=2'
  parambind --json bind myapp.params:SearchQuery 'tags=a,b,c'
  parambind -v bind myapp.params:SearchQuery 'page=0'""",
)
@click.argument("target")
@click.argument("query", default="")
@click.pass_obj
def bind(app: AppContext, target: str, query: str) -> None:
    """Bind QUERY (an URL query string) into a fresh TARGET (module:Class)."""
    app.emit(app.service.bind(target, query))
