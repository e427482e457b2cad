"""Scroll position and terminal dimensions."""

import sys
from dataclasses import dataclass
from typing import NamedTuple


class TerminalSize(NamedTuple):
    """Terminal dimensions in columns and rows."""
    width: int
    height: int


MAX_OFFSET = sys.maxsize


@dataclass
class ScrollState:
    """Lines skipped from the top of the file and the current terminal size.

    The offset has no upper bound tied to the file length: scrolling past
    the end simply shows blank rows.
    """
    size: TerminalSize
    offset: int = 0

    def scroll_down(self) -> bool:
        """Advance one line. Returns True if the offset changed."""
        if self.offset >= MAX_OFFSET:
            return False
        self.offset += 1
        return True

    def scroll_up(self) -> bool:
        """Go back one line, stopping at the top. Returns True if the offset changed."""
        if self.offset <= 0:
            return False
        self.offset -= 1
        return True

    def resize(self, size: TerminalSize) -> bool:
        """Replace the terminal size. Returns True if it differs from the old one."""
        if size == self.size:
            return False
        self.size = size
        return True
