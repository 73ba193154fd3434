"""
Use cases for the options chain codec.
"""

from .process_chain import ProcessChainUseCase, ChainProcessingResult

__all__ = [
    'ProcessChainUseCase',
    'ChainProcessingResult'
]
