"""Keystroke parsing shared by the dispatcher and the binding loader."""

import re
from typing import Optional

from blessed.keyboard import Keystroke

# Named keys as they appear in binding strings
ENTER = "<enter>"
SPACE = "<space>"
UP = "<up>"
DOWN = "<down>"
LEFT = "<left>"
RIGHT = "<right>"
HOME = "<home>"
END = "<end>"
PAGE_UP = "<pgup>"
PAGE_DOWN = "<pgdn>"
ESCAPE = "<esc>"
BACKSPACE = "<backspace>"
CTRL_C = "<ctrl-c>"

MAX_SEQUENCE_LENGTH = 2

_NAMED_KEYS = {
    "KEY_ENTER": ENTER,
    "KEY_UP": UP,
    "KEY_DOWN": DOWN,
    "KEY_LEFT": LEFT,
    "KEY_RIGHT": RIGHT,
    "KEY_HOME": HOME,
    "KEY_END": END,
    "KEY_PGUP": PAGE_UP,
    "KEY_PGDOWN": PAGE_DOWN,
    "KEY_ESCAPE": ESCAPE,
    "KEY_BACKSPACE": BACKSPACE,
    "KEY_DELETE": BACKSPACE,
}

_TOKEN_PATTERN = re.compile(r"<[a-z-]+>|.", re.DOTALL)


def parse_key(key: Keystroke) -> Optional[str]:
    """
    Turn a blessed keystroke into a key token.

    Args:
        key: blessed Keystroke

    Returns:
        A single printable character, a named token such as ``<enter>``,
        or None for keys without a binding name
    """
    if key.name in _NAMED_KEYS:
        return _NAMED_KEYS[key.name]
    if key == "\x03":  # Ctrl+C
        return CTRL_C
    if key == "\x7f":
        return BACKSPACE
    if key in ("\r", "\n"):
        return ENTER
    if key == " ":
        return SPACE
    if key and key.isprintable():
        return str(key)
    return None


def parse_sequence(text: str) -> tuple[str, ...]:
    """
    Split a binding string into key tokens.

    ``"dd"`` becomes ``("d", "d")`` and ``"<space>"`` a single token.

    Raises:
        ValueError: If the string is empty or longer than two keys
    """
    tokens = tuple(_TOKEN_PATTERN.findall(text))
    if not tokens or len(tokens) > MAX_SEQUENCE_LENGTH:
        raise ValueError(f"Invalid key sequence: {text!r}")
    return tokens


def is_digit(token: str) -> bool:
    return len(token) == 1 and token in "0123456789"


def token_char(token: str) -> Optional[str]:
    """Character a token inserts while typing (None for control keys)."""
    if token == SPACE:
        return " "
    if len(token) == 1:
        return token
    return None
