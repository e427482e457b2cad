"""Horizontal centering and clipping of a single line of text.

Widths are measured in grapheme clusters (user-perceived characters), not
bytes or code points. Every cluster is assumed to occupy exactly one
terminal column; double-width glyphs are not treated specially.
"""

from dataclasses import dataclass
from typing import List, Tuple

import grapheme


@dataclass(frozen=True)
class CenteredLine:
    """The visible part of a line and how far to indent it."""
    graphemes: Tuple[str, ...]
    left_pad: int

    @property
    def text(self) -> str:
        return ''.join(self.graphemes)

    @property
    def width(self) -> int:
        """Number of columns the visible text occupies."""
        return len(self.graphemes)


def split_graphemes(text: str) -> List[str]:
    """Split text into extended grapheme clusters."""
    return list(grapheme.graphemes(text))


def strip_line_ending(line: str) -> str:
    """Remove a single trailing line terminator (\\n, \\r\\n or \\r)."""
    if line.endswith('\r\n'):
        return line[:-2]
    if line.endswith('\n') or line.endswith('\r'):
        return line[:-1]
    return line


def layout(line: str, max_width: int) -> CenteredLine:
    """Center a line within max_width columns, clipping it if it is too long.

    A line shorter than the row is indented by half the free space and never
    padded on the right. A line at least as long as the row is clipped on
    both sides so exactly max_width clusters remain. When the difference is
    odd the extra column goes to the right side: the left pad (or left skip)
    is rounded down.

    Args:
        line: Text to lay out, without its line terminator
        max_width: Row width in columns

    Returns:
        CenteredLine with the visible clusters and the left padding

    Raises:
        ValueError: If max_width is negative
    """
    if max_width < 0:
        raise ValueError(f"max_width must be non-negative, got {max_width}")

    clusters = split_graphemes(line)
    width = len(clusters)
    half_diff = abs(max_width - width) // 2

    if width < max_width:
        return CenteredLine(graphemes=tuple(clusters), left_pad=half_diff)

    visible = clusters[half_diff:half_diff + max_width]
    return CenteredLine(graphemes=tuple(visible), left_pad=0)
