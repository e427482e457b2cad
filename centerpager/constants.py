"""Constants and configuration for the pager."""


class PagerConstants:
    """Central configuration constants for the pager."""

    # Input file
    FILE_ENCODING = "utf-8"  # Lines are decoded strictly; bad bytes abort the session

    # Terminal modes (DEC private mode 7, auto-wrap)
    DISABLE_LINE_WRAP = "\x1b[?7l"
    ENABLE_LINE_WRAP = "\x1b[?7h"

    # Signal handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize
    SIGINT_PIPE_MARKER = b'C'  # Byte written to pipe when Ctrl-C arrives as SIGINT
    PIPE_READ_SIZE = 1024

    # CLI
    PROGRAM_NAME = "centerpager"
    USAGE = "usage: centerpager [--version] FILE"
    EXIT_OK = 0
    EXIT_ERROR = 1
    EXIT_USAGE = 2
