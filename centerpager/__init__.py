"""Centerpager - a terminal pager that centers every line."""

from .layout import CenteredLine, layout
from .line_source import LineSource
from .state import ScrollState, TerminalSize
from .redraw import RedrawController
from .errors import PagerError, PagerIOError

__all__ = [
    'CenteredLine',
    'layout',
    'LineSource',
    'ScrollState',
    'TerminalSize',
    'RedrawController',
    'PagerError',
    'PagerIOError',
]
