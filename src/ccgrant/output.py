"""Terminal output for ccgrant.

Token responses and registration listings are *data* and go to stdout, so
``ccgrant --json token billing | jq -r .access_token`` sees nothing else.
Status lines, errors, dry-run previews and ``--verbose`` traces of the token
exchange are *diagnostics* and go to stderr.

Rich styling is used when stdout is a terminal; piped output falls back to
plain text. ``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` switch styling off.

Library code (see :mod:`ccgrant.endpoint.client`) reports through the
module-level :func:`debug`, which is silent unless the installed
:class:`OutputManager` is verbose.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

import httpx
from rich.console import Console
from rich.markup import escape
from rich.table import Table

_MASK = "****"


class OutputFormat(str, Enum):
    """How data is written to stdout. ``AUTO`` picks ``RICH`` on a colour TTY, else ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Writes data to stdout and diagnostics to stderr.

    Args:
        format: Output format for data. ``AUTO`` is resolved once, here.
        no_color: Disable Rich styling on both streams.
        quiet: Drop status lines (info, success, suggestions).
        verbose: Show :meth:`debug` traces.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # -- data (stdout) -------------------------------------------------- #

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Print *data*, usually a flattened token response or a stored registration.

        JSON mode prints indented JSON, plain mode prints one ``key<TAB>value``
        line per entry, and rich mode prints a two-column table. ``None``
        values are printed as empty.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))
            return
        if not isinstance(data, dict):
            items = data if isinstance(data, list) else [data]
            for item in items:
                self.print_data(str(item))
            return
        rows = [[str(key), _display(value)] for key, value in data.items()]
        if self._format == OutputFormat.PLAIN:
            for key, value in rows:
                self.print_data(f"{key}\t{value}")
        else:
            self._stdout.print(_table(["Field", "Value"], rows, None))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a JSON array of objects, tab-separated lines, or a Rich table."""
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
        else:
            self._stdout.print(_table(headers, rows, title))

    # -- diagnostics (stderr) ------------------------------------------- #

    def print_request(self, request: httpx.Request) -> None:
        """Preview a token request on stderr without sending it.

        Basic credentials and a ``client_secret`` body field are masked.
        Shown even with ``--quiet``, since it is the only output of a dry run.
        """
        self._emit(f"[dry-run] {request.method} {request.url}", "dim")
        for name, value in request.headers.multi_items():
            if name.lower() == "authorization":
                value = f"{value.split(' ', 1)[0]} {_MASK}"
            self._emit(f"  Header: {name}: {value}", "dim")
        fields = [
            f"client_secret={_MASK}" if field.startswith("client_secret=") else field
            for field in request.content.decode("ascii").split("&")
        ]
        self._emit(f"  Body: {'&'.join(fields)}", "dim")

    def info(self, message: str) -> None:
        if not self._quiet:
            self._emit(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._emit(message, "green")

    def suggest(self, message: str) -> None:
        if not self._quiet:
            self._emit(f"→ {message}", "dim")

    def error(self, message: str) -> None:
        """Print ``Error: <message>``. Never suppressed."""
        self._emit(f"Error: {message}", "bold red")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit(f"[debug] {message}", "dim")

    def _emit(self, message: str, style: Optional[str] = None) -> None:
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        elif style:
            self._stderr.print(f"[{style}]{escape(message)}[/{style}]")
        else:
            self._stderr.print(escape(message))


def _display(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple, set, frozenset)):
        return " ".join(str(v) for v in value)
    return str(value)


def _table(headers: list[str], rows: list[list[str]], title: Optional[str]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*(escape(cell) for cell in row))
    return table


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to any value) or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# -- global instance, installed by ccgrant.app.main_callback ------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests call this between runs)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def print_request(request: httpx.Request) -> None:
    get_output().print_request(request)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
