"""Subcommand modules for parambind.

Provides register_commands() which uses deferred imports to keep
``parambind --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from parambind.commands.bind import bind
    from parambind.commands.plan import plan

    cli.add_command(plan)
    cli.add_command(bind)
