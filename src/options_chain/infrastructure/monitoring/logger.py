"""
Structured logging for the options chain codec.

Library code logs through ``logging.getLogger(__name__)`` and never installs
handlers; applications (the CLI) call ``setup_logging`` once.
"""

import logging
import json
import sys
from datetime import datetime
from typing import Any, Dict, Optional, TextIO
from enum import Enum

import structlog
from structlog.stdlib import LoggerFactory
import colorama
from colorama import Fore, Back, Style


class LogCategory(str, Enum):
    """Log category enumeration."""
    DECODE = "decode"
    ENCODE = "encode"
    SANITY = "sanity"


def setup_logging(
    log_level: str = "INFO",
    enable_json: bool = False,
    stream: Optional[TextIO] = None
) -> None:
    """
    Setup structured logging configuration.

    Args:
        log_level: Logging level
        enable_json: Emit one JSON object per record instead of coloured text
        stream: Output stream, stderr by default
    """
    stream = stream or sys.stderr
    colorama.just_fix_windows_console()

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if enable_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter() if enable_json else ColoredFormatter(use_colors=stream.isatty()))
    handler.setLevel(level)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


class ColoredFormatter(logging.Formatter):
    """Colored console formatter."""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Back.WHITE + Style.BRIGHT,
    }

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record):
        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S.%f')[:-3]
        message = super().format(record)

        if not self.use_colors:
            return f"[{timestamp}] {record.levelname:<8} {record.name:<20} {message}"

        log_color = self.COLORS.get(record.levelname, '')
        reset = Style.RESET_ALL
        return (
            f"{Fore.WHITE}[{timestamp}]{reset} {log_color}{record.levelname:<8}{reset} "
            f"{Fore.BLUE}{record.name:<20}{reset} {message}"
        )


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class ContextLogger:
    """Logger with context management."""

    def __init__(self, name: str):
        # Bound to a stdlib logger; handlers come from setup_logging().
        self.logger = structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)
        self._context: Dict[str, Any] = {}

    def add_context(self, **kwargs):
        """Add context to all subsequent log messages."""
        self._context.update(kwargs)
        return self

    def _log_with_context(self, level: str, message: str, **kwargs):
        log_data = {**self._context, **kwargs}
        getattr(self.logger, level)(message, **log_data)

    def info(self, message: str, **kwargs):
        self._log_with_context('info', message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log_with_context('warning', message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log_with_context('error', message, **kwargs)


class ChainLogger(ContextLogger):
    """Specialized logger for chain document processing."""

    def __init__(self, source: str):
        super().__init__("options_chain.documents")
        self.add_context(source=source, category=LogCategory.DECODE.value)

    def log_decoded(self, symbol: str, expirations: int, rows: int, **kwargs):
        self.info("Chain decoded", symbol=symbol, expirations=expirations, rows=rows, **kwargs)

    def log_rejected(self, error_count: int, **kwargs):
        self.warning("Chain rejected", error_count=error_count, **kwargs)

    def log_malformed(self, error: Exception, **kwargs):
        self.error(
            "Malformed input",
            error_type=type(error).__name__,
            error_message=str(error),
            **kwargs
        )

    def log_sanity(self, summary: str, errors: int, warnings: int, **kwargs):
        level = 'warning' if errors else 'info'
        self._log_with_context(
            level,
            "Sanity check",
            category=LogCategory.SANITY.value,
            summary=summary,
            errors=errors,
            warnings=warnings,
            **kwargs
        )

    def log_encoded(self, symbol: str, size_bytes: int, **kwargs):
        self.info(
            "Chain encoded",
            category=LogCategory.ENCODE.value,
            symbol=symbol,
            size_bytes=size_bytes,
            **kwargs
        )
