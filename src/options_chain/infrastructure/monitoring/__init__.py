"""
Logging infrastructure for the options chain codec.
"""

from .logger import (
    setup_logging,
    ColoredFormatter,
    JsonFormatter,
    ContextLogger,
    ChainLogger,
    LogCategory
)

__all__ = [
    'setup_logging',
    'ColoredFormatter',
    'JsonFormatter',
    'ContextLogger',
    'ChainLogger',
    'LogCategory'
]
