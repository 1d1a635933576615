"""Rich console for output printed while the terminal UI is not running.

Startup progress and fatal errors are written to stderr so they never mix
with the full-screen UI.
"""

from rich.console import Console

_console: Console | None = None


def get_console() -> Console:
    """Shared stderr console, created on first use."""
    global _console
    if _console is None:
        _console = Console(stderr=True, highlight=False)
    return _console


def safe_print(message: str, style: str | None = None) -> None:
    """Print ``message``, optionally styled (e.g. ``"bold red"``)."""
    get_console().print(message, style=style)


def print_fatal(error: Exception) -> None:
    """Report an error that stops startup."""
    get_console().print(f"tapedeck: {error}", style="bold red")
