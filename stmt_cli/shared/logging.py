"""Rich-based logging helpers shared across CLI commands."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.theme import Theme
from rich.traceback import install

install(show_locals=False)

_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "success": "bold green",
        "debug": "dim",
    }
)

# Payloads go to stdout through click; every log line goes to stderr.
# Highlighting is off so numbers inside messages never pick up ANSI styles.
_stderr_console = Console(stderr=True, theme=_THEME, highlight=False)


@dataclass(slots=True)
class Logger:
    """Lightweight logger facade backed by Rich consoles."""

    verbose: bool = False

    def info(self, message: str) -> None:
        _stderr_console.print(message, style="info", markup=False)

    def success(self, message: str) -> None:
        _stderr_console.print(message, style="success", markup=False)

    def warning(self, message: str) -> None:
        _stderr_console.print(message, style="warning", markup=False)

    def debug(self, message: str) -> None:
        if self.verbose:
            _stderr_console.print(message, style="debug", markup=False)


def get_logger(verbose: bool = False) -> Logger:
    """Return a configured Logger instance."""
    return Logger(verbose=verbose)
