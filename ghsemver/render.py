"""
Rendering functions for ghsemver output.

stdout carries only the version string; diagnostic tracing goes to
stderr so it never pollutes captured output.
"""

from rich.console import Console

err_console = Console(stderr=True)


def trace_to_stderr(message: str) -> None:
    """Trace sink for --log: one dimmed line per message on stderr."""
    err_console.print(message, style="dim", markup=False, highlight=False)
