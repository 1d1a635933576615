"""Terminal user interface built on blessed."""

from .app import ConsoleUI

__all__ = ["ConsoleUI"]
