"""JSON decoding and encoding of options chain documents."""

from .decoder import (
    ChainDecoder,
    DecodeContext,
    DecodeResult,
    GreeksDecoder,
    ContractSideDecoder,
    StrikeRowDecoder,
    ExpirationGroupDecoder,
    decode_chain,
    try_decode_chain,
)
from .encoder import ChainEncoder, chain_to_dict, encode_chain, format_date, format_datetime
from .files import dump_chain, load_chain
from .raw import RawObject, parse_raw

__all__ = [
    "ChainDecoder", "DecodeContext", "DecodeResult",
    "GreeksDecoder", "ContractSideDecoder", "StrikeRowDecoder", "ExpirationGroupDecoder",
    "decode_chain", "try_decode_chain",
    "ChainEncoder", "chain_to_dict", "encode_chain", "format_date", "format_datetime",
    "dump_chain", "load_chain",
    "RawObject", "parse_raw",
]
