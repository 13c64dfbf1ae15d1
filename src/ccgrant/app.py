"""Typer application and CLI entry point for ccgrant.

This module wires together the top-level Typer application and registers
the built-in commands (``token`` and the ``registration`` group).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Any :class:`~ccgrant.exceptions.CcgrantError` that
escapes a command is reported on stderr and turned into its exit code.
"""

from __future__ import annotations

import signal
import sys
from typing import Any, Optional

import typer

from ccgrant import __version__
from ccgrant.commands.registration import registration_app
from ccgrant.commands.token import token_command


app = typer.Typer(
    name="ccgrant",
    help="Request OAuth 2.0 access tokens with the Client Credentials grant.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("token")(token_command)
app.add_typer(registration_app, name="registration", help="Manage client registrations.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"ccgrant {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the token request without sending it."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~ccgrant.output.OutputManager` from the
    output flags and stores shared options in ``ctx.obj``.
    """
    from ccgrant.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["dry_run"] = dry_run
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point invoked by the ``ccgrant`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    from ccgrant.exceptions import CcgrantError
    from ccgrant.output import error

    _setup_signal_handlers()
    try:
        app(args=argv)
    except SystemExit:
        raise
    except CcgrantError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
