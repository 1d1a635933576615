"""
Keyboard command dispatcher.

Turns key tokens into command invocations:

- Up to two keys are buffered and resolved against the binding table for the
  active view. A failed two-key combo retries its second key on its own; if
  that does not resolve either, the key stays buffered only when it can
  still start a two-key binding, otherwise it is dropped.
- Digits accumulate a repeat count that the next command receives. Fixed
  keys (Home, End, PgUp, PgDn, Ctrl+C) ignore it. The count and any buffered
  key are reset after every dispatched command.
- While typing (search, create playlist) keys edit a line instead; Enter
  submits it and Escape abandons it.

Runs only on the UI input thread, so it holds no locks.
"""

from enum import Enum
from typing import Callable, Optional

from loguru import logger

from .bindings import FIXED_KEYS, NAVIGABLE_VIEWS, BindingTable
from .utils import BACKSPACE, CTRL_C, ENTER, ESCAPE, MAX_SEQUENCE_LENGTH, is_digit, token_char

CommandHandler = Callable[[str, int], None]
SubmitHandler = Callable[[str, str], None]


class DispatcherState(Enum):
    IDLE = "idle"
    ONE_KEY_BUFFERED = "one_key_buffered"


class KeyDispatcher:
    """Stateful recognizer from key tokens to commands."""

    def __init__(
        self,
        table: BindingTable,
        handler: CommandHandler,
        on_submit: Optional[SubmitHandler] = None,
    ):
        self.table = table
        self.handler = handler
        self.on_submit = on_submit
        self._buffer: list[str] = []
        self._counter = 0
        self._typing_action: Optional[str] = None
        self._line: list[str] = []

    @property
    def state(self) -> DispatcherState:
        return DispatcherState.ONE_KEY_BUFFERED if self._buffer else DispatcherState.IDLE

    @property
    def counter(self) -> int:
        """Raw repeat counter (0 when no digits were typed)."""
        return self._counter

    @property
    def repeat_count(self) -> int:
        """Effective repeat count: the typed number, or 1."""
        return self._counter if self._counter > 0 else 1

    @property
    def buffer(self) -> tuple[str, ...]:
        return tuple(self._buffer)

    # Typing

    @property
    def typing(self) -> bool:
        return self._typing_action is not None

    @property
    def typing_action(self) -> Optional[str]:
        return self._typing_action

    @property
    def line(self) -> str:
        return "".join(self._line)

    def start_typing(self, action: str) -> None:
        """Route keys into a text line until Enter or Escape."""
        self._typing_action = action
        self._line = []
        self._buffer.clear()

    def _stop_typing(self) -> tuple[str, str]:
        action, text = self._typing_action, self.line.strip()
        self._typing_action = None
        self._line = []
        return action, text

    def _type(self, token: str) -> None:
        if token == ENTER or token == ESCAPE:
            action, text = self._stop_typing()
            if token == ESCAPE:
                text = ""
            if self.on_submit:
                self.on_submit(action, text)
        elif token == BACKSPACE:
            if self._line:
                self._line.pop()
        else:
            char = token_char(token)
            if char is not None:
                self._line.append(char)

    # Commands

    def dispatch(self, view: str, token: Optional[str]) -> Optional[str]:
        """
        Feed one key token.

        Args:
            view: Active view name
            token: Key token from ``parse_key`` (None is ignored)

        Returns:
            The command that ran, or None
        """
        if token is None:
            return None

        if token == CTRL_C:
            return self._run_fixed(CTRL_C)

        if self.typing:
            self._type(token)
            return None

        if view not in NAVIGABLE_VIEWS:
            return None

        if is_digit(token):
            digit = int(token)
            self._counter = digit if self._counter == 0 else self._counter * 10 + digit
            return None

        if token in FIXED_KEYS:
            return self._run_fixed(token)

        return self._press(view, token)

    def _press(self, view: str, token: str, retry: bool = False) -> Optional[str]:
        self._buffer.append(token)
        sequence = tuple(self._buffer)

        command = self.table.lookup(view, sequence)
        if command is not None:
            self._buffer.clear()
            try:
                self._run(command, self.repeat_count)
            finally:
                self._counter = 0
            return command

        if len(self._buffer) >= MAX_SEQUENCE_LENGTH:
            second = self._buffer[1]
            self._buffer.clear()
            logger.debug(f"No binding for {''.join(sequence)!r} in {view}, retrying {second!r}")
            return self._press(view, second, retry=True)

        if retry and not self.table.starts_sequence(view, token):
            self._buffer.clear()
        return None

    def _run_fixed(self, token: str) -> str:
        self._buffer.clear()
        try:
            return self._run(FIXED_KEYS[token], 1)
        finally:
            self._counter = 0

    def _run(self, command: str, count: int) -> str:
        logger.debug(f"Command {command} x{count}")
        self.handler(command, count)
        return command
