"""Input events and parsing of curtsies-style key tokens."""

from typing import Optional, Union
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    CTRL = "ctrl"
    SPECIAL = "special"


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'q', 'up', 'down')
    raw: str  # The raw key token
    is_release: bool = False  # Key-up report; only terminals with extended keyboard protocols send these


@dataclass(frozen=True)
class ResizeEvent:
    """The terminal now has the given dimensions."""
    width: int
    height: int


InputEvent = Union[KeyEvent, ResizeEvent]


class KeyboardHandler:
    """Handles keyboard input using curtsies-style key names."""

    def __init__(self, terminal_interface):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface

    def get_key_event(self, timeout: float = 0) -> Optional[KeyEvent]:
        """Get next key event and map curtsies-style names to KeyEvent."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies key token into a KeyEvent.

        Only the arrows, Ctrl-<letter> and plain characters are told apart.
        Any other named key comes back as a SPECIAL event carrying its whole
        lowercased name (e.g. 'esc-down'), which no command is bound to.

        Args:
            key: Token such as '<DOWN>', '<Ctrl-c>', '\\x03' or 'q'
        """
        key_str = str(key)

        # Curtsies-style key names like '<UP>', '<Ctrl-c>', '<Esc+q>'
        if key_str.startswith('<') and key_str.endswith('>') and len(key_str) > 2:
            name = key_str[1:-1].lower().replace('+', '-')
            mods, _, base = name.rpartition('-')
            if mods == 'ctrl' and len(base) == 1:
                return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key_str)
            return KeyEvent(key_type=KeyType.SPECIAL, value=name, raw=key_str)

        # Single-byte ASCII control chars (Ctrl-A .. Ctrl-Z)
        if len(key_str) == 1 and 1 <= ord(key_str) <= 26:
            return KeyEvent(key_type=KeyType.CTRL, value=chr(ord('a') + ord(key_str) - 1), raw=key_str)

        return KeyEvent(key_type=KeyType.REGULAR, value=key_str, raw=key_str)
