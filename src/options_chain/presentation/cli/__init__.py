"""
Command-line interface for the options chain codec.
"""

from .main import OptionsChainCLI, main

__all__ = ['OptionsChainCLI', 'main']
