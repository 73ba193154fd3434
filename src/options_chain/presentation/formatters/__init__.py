"""
Output formatters for the command-line interface.
"""

from .console_formatter import ConsoleFormatter, Color
from .table_formatter import TableFormatter, TableStyle, TableAlignment

__all__ = [
    'ConsoleFormatter',
    'Color',
    'TableFormatter',
    'TableStyle',
    'TableAlignment'
]
