"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy BindService initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from parambind.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from parambind.config.settings import ParamBindSettings
    from parambind.services.bind import BindService
    from parambind.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The service is created on first use so ``--help`` and ``--version``
    never import record targets.
    """

    def __init__(self, settings: ParamBindSettings) -> None:
        self.settings = settings
        self._service: BindService | None = None

        from parambind.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def service(self) -> BindService:
        """The bind service, with ``[binder].preload`` targets registered."""
        if self._service is None:
            from parambind.services.bind import BindService

            service = BindService(self.settings)
            if self.settings.binder.preload:
                result = service.preload()
                if not result.ok:
                    self.emit(result)
            self._service = service
        return self._service

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            width=self.settings.output.width,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
