"""Command pattern mapping input events to scroll state changes."""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional, Tuple, TYPE_CHECKING
from .keyboard import InputEvent, KeyEvent, KeyType, ResizeEvent
from .state import TerminalSize

if TYPE_CHECKING:
    from .state import ScrollState

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """What the main loop must do after an event."""
    NONE = "none"
    REDRAW = "redraw"
    QUIT = "quit"


class PagerCommand(ABC):
    """Base class for pager commands."""

    # Whether the command also fires on key-release reports
    on_release = False

    @abstractmethod
    def execute(self, state: 'ScrollState', key_event: KeyEvent) -> Outcome:
        """Execute the command.

        Args:
            state: Scroll state to mutate
            key_event: The key event that triggered this command

        Returns:
            What the main loop should do next
        """
        pass


class ScrollDownCommand(PagerCommand):
    def execute(self, state, key_event):
        state.scroll_down()
        return Outcome.REDRAW


class ScrollUpCommand(PagerCommand):
    def execute(self, state, key_event):
        state.scroll_up()
        return Outcome.REDRAW


class QuitCommand(PagerCommand):
    on_release = True

    def execute(self, state, key_event):
        return Outcome.QUIT


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], PagerCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        self.register((KeyType.SPECIAL, 'down'), ScrollDownCommand())
        self.register((KeyType.SPECIAL, 'up'), ScrollUpCommand())

        quit_command = QuitCommand()
        self.register((KeyType.CTRL, 'c'), quit_command)
        self.register((KeyType.REGULAR, 'q'), quit_command)
        self.register((KeyType.REGULAR, 'Q'), quit_command)

    def register(self, key: Tuple[KeyType, str], command: PagerCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[PagerCommand]:
        """Get command for a key combination."""
        return self._commands.get((key_type, value))

    def execute(self, state: 'ScrollState', key_event: KeyEvent) -> Outcome:
        """Execute the command bound to a key event, if any."""
        command = self.get_command(key_event.key_type, key_event.value)
        if command is None:
            return Outcome.NONE
        if key_event.is_release and not command.on_release:
            return Outcome.NONE
        return command.execute(state, key_event)


class EventDispatcher:
    """Applies input events to the scroll state.

    The pager is either running or terminated; a QUIT outcome moves it to
    terminated and nothing is dispatched afterwards.
    """

    def __init__(self, registry: Optional[CommandRegistry] = None):
        self.registry = registry or CommandRegistry()
        self.running = True

    def dispatch(self, event: InputEvent, state: 'ScrollState') -> Outcome:
        if not self.running:
            return Outcome.NONE
        if isinstance(event, ResizeEvent):
            size = TerminalSize(max(1, event.width), max(1, event.height))
            if not state.resize(size):
                return Outcome.NONE
            logger.debug("resized to %dx%d", size.width, size.height)
            return Outcome.REDRAW
        outcome = self.registry.execute(state, event)
        if outcome is Outcome.QUIT:
            self.running = False
        return outcome
