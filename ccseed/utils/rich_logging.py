"""Rich logging integration for ccseed.

Provides a Rich-based console handler carrying correlation IDs and a file
formatter that strips Rich markup.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import TYPE_CHECKING, Any

from rich.console import Console as RichConsole
from rich.logging import RichHandler

if TYPE_CHECKING:
    from rich.console import Console

# Style tags only; bracketed endpoints such as [seed.example.org:8333] survive
_MARKUP_PATTERN = re.compile(r"\[/?[a-z][a-z0-9 #_]*\]|\[/\]")


class CorrelationRichHandler(RichHandler):
    """RichHandler with correlation ID support.

    Seed endpoints in log messages are written as ``[host:port]``; Rich
    markup is disabled so they are rendered verbatim.
    """

    def __init__(
        self,
        *args: Any,
        console: Console | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize RichHandler writing to stdout by default."""
        if console is None:
            console = RichConsole(file=sys.stdout)
        kwargs.setdefault("markup", False)
        super().__init__(*args, console=console, **kwargs)

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record with its correlation ID attached."""
        try:
            if not hasattr(record, "correlation_id"):
                from ccseed.utils.logging_config import correlation_id

                record.correlation_id = correlation_id.get() or "no-correlation-id"
            super().emit(record)
        except Exception:
            self.handleError(record)

    def handleError(self, record: logging.LogRecord) -> None:
        """Report logging failures on stderr without re-entering logging."""
        try:
            sys.stderr.write(
                f"Logging error (suppressed to prevent circular errors): "
                f"{record.levelname} {record.name}: {record.getMessage()}\n"
            )
            sys.stderr.flush()
        except Exception:  # nosec B110 - last resort, nothing left to report to
            pass


def strip_rich_markup(text: str) -> str:
    """Strip Rich markup tags like ``[red]`` or ``[/bold]`` from text."""
    return _MARKUP_PATTERN.sub("", text)


class FileFormatter(logging.Formatter):
    """Formatter for file output that strips Rich markup."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record, stripping Rich markup for file output."""
        return strip_rich_markup(super().format(record))


def create_rich_handler(
    console: Console | None = None,
    level: int | str = logging.INFO,
    show_path: bool = False,
    rich_tracebacks: bool = True,
) -> logging.Handler:
    """Create a RichHandler with correlation ID support.

    Args:
        console: Optional Rich Console instance
        level: Log level
        show_path: Whether to show file paths in log output
        rich_tracebacks: Whether to use rich tracebacks

    Returns:
        Configured RichHandler instance

    """
    return CorrelationRichHandler(
        console=console,
        level=level,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
    )
