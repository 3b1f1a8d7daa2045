"""Shared rich console and logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Route log records through the shared console."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)
    root.addHandler(
        RichHandler(console=console, show_path=False, rich_tracebacks=False)
    )
