"""
Configuration management for the options chain codec.
"""

from .settings import (
    ConfigManager,
    CodecConfig,
    DecoderConfig,
    SanityConfig,
    EncoderConfig,
    LoggingConfig,
    load_config
)

__all__ = [
    'ConfigManager',
    'CodecConfig',
    'DecoderConfig',
    'SanityConfig',
    'EncoderConfig',
    'LoggingConfig',
    'load_config'
]
