"""Main pager controller: event loop, signals and terminal lifetime."""

import logging
import os
import select
import signal
from typing import Optional
from .terminal import TerminalInterface
from .line_source import LineSource
from .keyboard import InputEvent, KeyboardHandler, KeyEvent, KeyType, ResizeEvent
from .commands import EventDispatcher, Outcome
from .constants import PagerConstants
from .errors import PagerError, PagerIOError
from .redraw import RedrawController
from .state import ScrollState

logger = logging.getLogger(__name__)


class Pager:
    """Centered, scrollable view of one file.

    Owns the line source and the terminal for the whole session. The loop
    is single-threaded: signal handlers only write a marker byte to a pipe
    so that ``select`` wakes up, and every redraw finishes before the next
    event is read.
    """

    def __init__(self, filename: str, terminal: Optional[TerminalInterface] = None):
        """Open the file and prepare the pager components.

        Raises:
            PagerIOError: If the file cannot be opened
        """
        self.filename = filename
        self.terminal = terminal or TerminalInterface()
        # Opened last: nothing after it can fail and leak the handle
        self.line_source = LineSource.open(filename)
        self.keyboard = KeyboardHandler(self.terminal)
        self.dispatcher = EventDispatcher()
        self.redraw_controller = RedrawController(self.line_source, self.terminal)
        self.state: Optional[ScrollState] = None
        # Pipe for resize and Ctrl-C signaling; only exists while run() is active
        self._signal_pipe_r: Optional[int] = None
        self._signal_pipe_w: Optional[int] = None

    @property
    def running(self) -> bool:
        return self.dispatcher.running

    def _open_signal_pipe(self):
        try:
            self._signal_pipe_r, self._signal_pipe_w = os.pipe()
        except OSError as e:
            raise PagerIOError("cannot create signal pipe", e) from e

    def _close_signal_pipe(self):
        for fd in (self._signal_pipe_r, self._signal_pipe_w):
            if fd is not None:
                os.close(fd)
        self._signal_pipe_r = self._signal_pipe_w = None

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        os.write(self._signal_pipe_w, PagerConstants.RESIZE_PIPE_MARKER)

    def _handle_sigint(self, signum, frame):
        """Handle SIGINT (Ctrl-C) by turning it into a key event."""
        del signum, frame  # Unused
        os.write(self._signal_pipe_w, PagerConstants.SIGINT_PIPE_MARKER)

    def run(self):
        """Run the pager until the user quits.

        The terminal is restored on every exit path. If restoring it fails
        while another error is propagating, the restore failure is logged
        and the original error is re-raised.
        """
        handlers = None
        try:
            self._open_signal_pipe()
            original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)
            original_int_handler = signal.signal(signal.SIGINT, self._handle_sigint)
            handlers = (original_winch_handler, original_int_handler)

            self.terminal.setup()
            with self.terminal.term.raw():
                self._event_loop()
        except BaseException:
            self._teardown(handlers, original_error=True)
            raise
        self._teardown(handlers, original_error=False)

    def _event_loop(self):
        self.state = ScrollState(size=self.terminal.size)
        # Initial draw, before any input arrives
        self.redraw_controller.redraw(self.state)

        while self.running:
            event = self._next_event()
            if event is None:
                continue
            outcome = self.dispatcher.dispatch(event, self.state)
            if outcome is Outcome.REDRAW:
                self.redraw_controller.redraw(self.state)

    def _next_event(self) -> Optional[InputEvent]:
        """Block until a key or a signal arrives and convert it to an event."""
        # Keys already read into the input buffer don't wake select
        if self.terminal.has_pending_input():
            event = self.keyboard.get_key_event(timeout=0)
            if event is not None:
                return event

        input_fd = self.terminal.input_fd
        ready, _, _ = select.select([input_fd, self._signal_pipe_r], [], [])

        if self._signal_pipe_r in ready:
            data = os.read(self._signal_pipe_r, PagerConstants.PIPE_READ_SIZE)
            if PagerConstants.SIGINT_PIPE_MARKER in data:
                return KeyEvent(key_type=KeyType.CTRL, value='c', raw='\x03')
            size = self.terminal.size
            return ResizeEvent(size.width, size.height)
        if input_fd in ready:
            # Non-blocking since select says it's ready
            return self.keyboard.get_key_event(timeout=0)
        return None

    def _teardown(self, handlers, original_error: bool):
        """Release signals, pipe, terminal and file."""
        if handlers is not None:
            original_winch_handler, original_int_handler = handlers
            signal.signal(signal.SIGWINCH, original_winch_handler)
            signal.signal(signal.SIGINT, original_int_handler)
        self._close_signal_pipe()
        try:
            self.terminal.cleanup()
        except PagerError as e:
            if not original_error:
                raise
            logger.error("could not restore terminal: %s", e)
        finally:
            self.line_source.close()
