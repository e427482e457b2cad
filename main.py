#!/usr/bin/env python3
"""Centerpager - show a text file with every line centered.

Usage:
    python main.py FILE

Controls:
    Up/Down arrows: Scroll one line
    q, Q or Ctrl-C: Quit
"""

from centerpager.__main__ import run


if __name__ == "__main__":
    run()
