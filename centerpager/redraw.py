"""Repaints the visible window of the file."""

import itertools
import logging
from typing import TYPE_CHECKING, List

from .layout import CenteredLine, layout, strip_line_ending

if TYPE_CHECKING:
    from .line_source import LineSource
    from .state import ScrollState
    from .terminal import TerminalInterface

logger = logging.getLogger(__name__)


class RedrawController:
    """Paints every row of the screen from the line source.

    Only the rows themselves are cleared, one at a time, right before they
    are repainted; the whole screen is cleared once at session start. All
    output for one frame is flushed together.
    """

    def __init__(self, line_source: 'LineSource', terminal: 'TerminalInterface'):
        self.line_source = line_source
        self.terminal = terminal

    def visible_lines(self, state: 'ScrollState') -> List[str]:
        """Return exactly ``height`` raw lines for the current scroll offset.

        Rows past the end of the file are empty strings.
        """
        height = state.size.height
        self.line_source.rewind()
        remaining = itertools.islice(self.line_source.lines(), state.offset, None)
        rows = list(itertools.islice(remaining, height))
        rows.extend([''] * (height - len(rows)))
        return rows

    def redraw(self, state: 'ScrollState') -> List[CenteredLine]:
        """Repaint all rows for the given scroll state.

        Args:
            state: Current offset and terminal size

        Returns:
            The laid-out line painted on each row, top to bottom

        Raises:
            PagerIOError: If reading the file or writing to the terminal fails
        """
        width = state.size.width
        painted = []
        for row, line in enumerate(self.visible_lines(state)):
            centered = layout(strip_line_ending(line), width)
            self.terminal.move_to(0, row)
            self.terminal.clear_row()
            if centered.left_pad:
                self.terminal.move_right(centered.left_pad)
            if centered.graphemes:
                self.terminal.write(centered.text)
            painted.append(centered)
        self.terminal.flush()
        logger.debug("redrew %d rows at offset %d, width %d",
                     len(painted), state.offset, width)
        return painted
