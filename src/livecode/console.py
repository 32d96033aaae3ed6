"""Diagnostic output and logging setup."""

import logging
import sys
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler

from livecode.config import LivecodeConfig

console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Send livecode's own log records to stderr through rich.

    Hosts call this once at startup. Only the ``livecode`` logger is
    configured, so the host's logging setup is left alone; records still
    propagate to the root logger. Calling it again only changes the level.

    Args:
        verbose: Include debug records (reload and snapshot details).

    Returns:
        The configured ``livecode`` logger.
    """
    package_logger = logging.getLogger("livecode")
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not any(isinstance(handler, RichHandler) for handler in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=console, rich_tracebacks=True, show_path=verbose))
    return package_logger


class Diagnostics:
    """Line-oriented writer for the diagnostic stream.

    Fault reports and reload notices are written here verbatim, without rich
    markup, highlighting or wrapping, so hosts and editors can parse the
    file/line references they contain.
    """

    def __init__(self, config: LivecodeConfig, stream: TextIO | None = None):
        """Initialize the writer.

        Args:
            config: Live configuration; ``autoflush_output`` is read on every write.
            stream: Target text stream. Defaults to ``sys.stdout`` at write time.
        """
        self.config = config
        self._stream = stream
        self._console: Console | None = None

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def _get_console(self) -> Console:
        stream = self.stream
        if self._console is None or self._console.file is not stream:
            self._console = Console(
                file=stream,
                markup=False,
                highlight=False,
                emoji=False,
                color_system=None,
            )
        return self._console

    def write(self, text: str) -> None:
        """Write one message followed by a newline."""
        self._get_console().print(text, soft_wrap=True)
        if self.config.autoflush_output:
            self.stream.flush()
