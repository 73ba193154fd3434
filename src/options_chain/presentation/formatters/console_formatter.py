"""
Console formatting utilities for the options chain CLI.
"""

import json
import sys
from typing import Any, Dict, Optional
from enum import Enum


class Color(Enum):
    """ANSI color codes for terminal output."""
    RESET = '\033[0m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'


class ConsoleFormatter:
    """
    Console output formatter with color support.

    Results go to stdout; errors go to stderr. Colors are only used when
    stdout is a terminal.
    """

    def __init__(self, use_colors: bool = True):
        self.use_colors = use_colors and self._supports_color()

    def _supports_color(self) -> bool:
        """Check if terminal supports color output."""
        return (
            hasattr(sys.stdout, 'isatty') and
            sys.stdout.isatty() and
            sys.platform != 'win32'
        )

    def _colorize(self, text: str, color: Color) -> str:
        """Apply color to text if colors are enabled."""
        if not self.use_colors:
            return text
        return f"{color.value}{text}{Color.RESET.value}"

    def print_success(self, message: str):
        """Print success message in green."""
        print(self._colorize(f"✓ {message}", Color.GREEN))

    def print_error(self, message: str):
        """Print error message in red."""
        print(self._colorize(f"✗ {message}", Color.RED), file=sys.stderr)

    def print_warning(self, message: str):
        """Print warning message in yellow."""
        print(self._colorize(f"⚠ {message}", Color.YELLOW))

    def print_json(self, data: Dict[str, Any], indent: Optional[int] = 2):
        """Print JSON data; never colorized so the output stays parseable."""
        print(json.dumps(data, indent=indent, default=str, ensure_ascii=False))
