from __future__ import annotations

import typer

from .commands import messages_cmd, settings_cmd
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="sbq",
        help="Service Bus queue CLI",
        no_args_is_help=True,
    )

    app.add_typer(settings_cmd.app, name="settings")
    app.command("send")(messages_cmd.send)
    app.command("peek")(messages_cmd.peek)
    app.command("read")(messages_cmd.read)
    app.command("unlock")(messages_cmd.unlock)
    app.command("delete")(messages_cmd.delete)
    app.command("token")(messages_cmd.token)

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    return app


app = _build_app()
