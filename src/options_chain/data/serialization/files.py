"""
File helpers around the chain codec.
"""

from pathlib import Path
from typing import Optional, Union

from ..models.chain import OptionsChain
from .decoder import ChainDecoder
from .encoder import ChainEncoder

PathLike = Union[str, Path]


def load_chain(path: PathLike, decoder: Optional[ChainDecoder] = None) -> OptionsChain:
    """
    Read and decode a chain document.

    Raises:
        OSError: the file cannot be read.
        MalformedInputError: the file is not UTF-8 JSON.
        ChainValidationError: the document is not a valid chain.
    """
    decoder = decoder or ChainDecoder()
    return decoder.decode(Path(path).read_bytes())


def dump_chain(chain: OptionsChain, path: PathLike, encoder: Optional[ChainEncoder] = None) -> int:
    """Encode ``chain`` to ``path``; returns the number of bytes written."""
    encoder = encoder or ChainEncoder()
    data = encoder.encode(chain)
    Path(path).write_bytes(data)
    return len(data)
