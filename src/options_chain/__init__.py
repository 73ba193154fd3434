"""
Options Chain Codec - validating JSON parser and serializer for options chains.

An options chain document is a snapshot of one underlying: its last price,
the snapshot time, and every listed call/put pair grouped by expiration date
and strike. The package is organized into layers:

- data: Entity models, primitive validators, the decoder and the encoder
- application: Configuration and file-oriented use cases
- infrastructure: Error types and structured logging
- presentation: The ``options-chain`` command-line interface
"""

from pathlib import Path
from typing import Optional, Union

from .application.config.settings import CodecConfig
from .data.models import (
    ContractSide,
    ExpirationGroup,
    Greeks,
    OptionSymbol,
    OptionType,
    OptionsChain,
    StrikeRow,
)
from .data.serialization import ChainDecoder, ChainEncoder, DecodeResult, dump_chain, load_chain
from .data.validators import ErrorKind, SanityChecker, ValidationIssue, ValidationReport, ValidationSeverity
from .infrastructure.error_handling import (
    ChainCodecError,
    ChainValidationError,
    ConfigurationError,
    EncodingError,
    MalformedInputError,
)

__version__ = "0.1.0"
__author__ = "Options Chain Team"

# Package metadata
__title__ = "options-chain-codec"
__description__ = "Validating JSON parser and serializer for options chain snapshots"
__license__ = "MIT"

# Version info tuple
VERSION = tuple(map(int, __version__.split('.')))


def decode(data: Union[bytes, bytearray, str], config: Optional[CodecConfig] = None) -> OptionsChain:
    """
    Decode a chain document.

    Raises:
        MalformedInputError: the input is not UTF-8 JSON.
        ChainValidationError: the document is not a valid chain; the error
            carries every structural issue found.
    """
    config = config or CodecConfig()
    return ChainDecoder.from_config(config.decoder).decode(data)


def try_decode(data: Union[bytes, bytearray, str], config: Optional[CodecConfig] = None) -> DecodeResult:
    """Like ``decode`` but returns structural issues instead of raising them."""
    config = config or CodecConfig()
    return ChainDecoder.from_config(config.decoder).try_decode(data)


def encode(chain: OptionsChain, indent: Optional[int] = None) -> bytes:
    """Encode ``chain`` as canonical UTF-8 JSON."""
    return ChainEncoder(indent=indent).encode(chain)


def load(path: Union[str, Path], config: Optional[CodecConfig] = None) -> OptionsChain:
    """Read and decode the chain document at ``path``."""
    config = config or CodecConfig()
    return load_chain(path, ChainDecoder.from_config(config.decoder))


def dump(chain: OptionsChain, path: Union[str, Path], indent: Optional[int] = None) -> int:
    """Encode ``chain`` to ``path``; returns the number of bytes written."""
    return dump_chain(chain, path, ChainEncoder(indent=indent))


def check_sanity(chain: OptionsChain, config: Optional[CodecConfig] = None) -> ValidationReport:
    """Run the plausibility checks configured in ``config.sanity`` over ``chain``."""
    config = config or CodecConfig()
    return SanityChecker.from_config(config.sanity).check(chain)


__all__ = [
    "__version__",
    "VERSION",
    "decode",
    "try_decode",
    "encode",
    "load",
    "dump",
    "check_sanity",
    "CodecConfig",
    "DecodeResult",
    "OptionsChain",
    "ExpirationGroup",
    "StrikeRow",
    "ContractSide",
    "Greeks",
    "OptionSymbol",
    "OptionType",
    "ErrorKind",
    "ValidationIssue",
    "ValidationReport",
    "ValidationSeverity",
    "ChainCodecError",
    "ChainValidationError",
    "ConfigurationError",
    "EncodingError",
    "MalformedInputError",
]
