"""Terminal interface using Blessed for display and Curtsies for input."""

import blessed
from typing import Optional, TextIO
import logging
import sys
import select
import termios

from .constants import PagerConstants
from .errors import PagerIOError
from .state import TerminalSize

logger = logging.getLogger(__name__)


def _as_os_error(error: Exception) -> OSError:
    """termios.error carries (errno, message) but is not an OSError."""
    if isinstance(error, OSError):
        return error
    return OSError(*error.args)


class TerminalInterface:
    """Handles terminal I/O using Blessed.

    Output calls only queue text on the terminal stream; nothing reaches
    the screen until ``flush()``.
    """

    def __init__(self, terminal: Optional[blessed.Terminal] = None,
                 in_stream: Optional[TextIO] = None):
        """Initialize with a terminal instance (or create one).

        Args:
            terminal: Blessed terminal used for output and size queries
            in_stream: Keyboard stream, stdin by default
        """
        self.term = terminal or blessed.Terminal()
        self.in_stream = in_stream or sys.stdin
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        self._curtsies_active: bool = False

    @property
    def input_fd(self) -> int:
        """File descriptor to wait on for key input."""
        return self.in_stream.fileno()

    def setup(self):
        """Enter fullscreen mode, hide the cursor, clear once and start raw input."""
        self.is_fullscreen = True
        self.write(self.term.enter_fullscreen)
        self.write(self.term.hide_cursor)
        self.write(PagerConstants.DISABLE_LINE_WRAP)
        self.clear_screen()
        self.flush()
        if self._curtsies_input is None:
            from curtsies import Input  # type: ignore
            try:
                # Enter raw mode immediately so reads work
                self._curtsies_input = Input(in_stream=self.in_stream, keynames='curtsies')  # type: ignore
                self._curtsies_input.__enter__()
            except (OSError, termios.error) as e:
                self._curtsies_input = None
                raise PagerIOError("cannot switch terminal to raw mode", _as_os_error(e)) from e
            self._curtsies_active = True
        logger.debug("terminal setup complete (%dx%d)", self.term.width, self.term.height)

    def cleanup(self):
        """Exit fullscreen mode and restore terminal.

        Every restore step is attempted even if an earlier one fails; the
        first failure is raised afterwards.
        """
        failure: Optional[PagerIOError] = None
        if self.is_fullscreen:
            self.is_fullscreen = False
            try:
                self.write(self.term.exit_fullscreen)
                self.write(self.term.normal_cursor)
                self.write(PagerConstants.ENABLE_LINE_WRAP)
                self.flush()
            except PagerIOError as e:
                failure = e
        # Close curtsies input if in use
        if self._curtsies_input is not None:
            try:
                if self._curtsies_active:
                    # Exit raw mode context
                    self._curtsies_input.__exit__(None, None, None)  # type: ignore
            except (OSError, termios.error) as e:
                if failure is None:
                    failure = PagerIOError("cannot restore terminal mode", _as_os_error(e))
                    failure.__cause__ = e
            finally:
                self._curtsies_input = None
                self._curtsies_active = False
        if failure is not None:
            raise failure
        logger.debug("terminal restored")

    def write(self, text: str) -> None:
        """Queue raw text at the current cursor position."""
        try:
            self.term.stream.write(text)
        except OSError as e:
            raise PagerIOError("terminal write failed", e) from e

    def flush(self) -> None:
        """Send all queued output to the terminal."""
        try:
            self.term.stream.flush()
        except OSError as e:
            raise PagerIOError("terminal flush failed", e) from e

    def clear_screen(self):
        """Clear the entire screen."""
        self.write(self.term.home + self.term.clear)

    def clear_row(self):
        """Clear the row under the cursor; the cursor must be in column 0."""
        self.write(self.term.clear_eol)

    def move_to(self, x: int, y: int):
        """Move the cursor to an absolute column and row."""
        self.write(self.term.move_xy(x, y))

    def move_right(self, n: int):
        """Move the cursor right by n columns."""
        if n > 0:
            self.write(self.term.move_right(n))

    def has_pending_input(self) -> bool:
        """True if curtsies already holds bytes read from the keyboard.

        Those bytes no longer make the input descriptor readable, so
        ``select`` alone would not notice them.
        """
        return self._curtsies_input is not None and bool(self._curtsies_input.unprocessed_bytes)

    def get_key(self, timeout: float = 0):
        """Get a single keypress from the user.

        Args:
            timeout: Seconds to wait for input (0 for non-blocking)

        Returns:
            The curtsies key token as a string, or None if nothing arrived.
        """
        if self._curtsies_input is None:
            return None
        if not self.has_pending_input():
            r, _, _ = select.select([self.in_stream], [], [], timeout)
            if not r:
                return None
        evt = self._curtsies_input.send(timeout)
        if evt is None:
            return None
        return str(evt)

    @property
    def size(self) -> TerminalSize:
        """Current terminal dimensions; a reported 0 is treated as 1."""
        return TerminalSize(max(1, self.term.width), max(1, self.term.height))
