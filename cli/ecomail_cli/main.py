from __future__ import annotations

import typer

from .commands import call_cmd, campaigns_cmd, lists_cmd, settings_cmd
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="ecomail",
        help="ecomail CLI",
        no_args_is_help=True,
    )

    app.add_typer(settings_cmd.app, name="settings")
    app.add_typer(lists_cmd.app, name="lists")
    app.add_typer(campaigns_cmd.app, name="campaigns")
    app.command("operations")(call_cmd.list_operations)
    app.command("call")(call_cmd.call_operation)

    @app.callback()
    def _main(
            verbose: int = typer.Option(
                0, "-v", "--verbose", count=True, help="Verbose logs; repeat (-vv) for connection traces.",
            ),
    ):
        setup_logging(verbose)

    return app


app = _build_app()
