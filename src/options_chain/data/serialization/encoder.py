"""
Canonical JSON encoder for options chains.

Output mirrors the document schema exactly: same key set, same nesting, keys
in schema order, arrays in their original order. Floats use the shortest
repr that round-trips; integer fields never carry a fractional part.
"""

import json
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional

from ..models.chain import ContractSide, ExpirationGroup, Greeks, OptionsChain, StrikeRow
from ...infrastructure.error_handling import EncodingError


def format_date(value: date) -> str:
    # isoformat pads years below 1000 to four digits; strftime does not everywhere.
    return value.isoformat()


def format_datetime(value: datetime) -> str:
    """RFC 3339 text; UTC renders with a ``Z`` suffix."""
    offset = value.utcoffset()
    if offset is None:
        raise EncodingError("lastUpdate must be timezone-aware", value_type="datetime")
    if offset % timedelta(minutes=1):
        raise EncodingError(
            f"UTC offset {offset} is not a whole number of minutes and has no RFC 3339 form",
            value_type="datetime"
        )

    text = value.replace(tzinfo=None).isoformat()
    if offset == timedelta(0):
        return f"{text}Z"

    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(offset) // timedelta(minutes=1)
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def greeks_to_dict(greeks: Greeks) -> Dict[str, Any]:
    return {
        "delta": greeks.delta,
        "gamma": greeks.gamma,
        "theta": greeks.theta,
        "vega": greeks.vega,
        "rho": greeks.rho,
    }


def contract_side_to_dict(side: ContractSide) -> Dict[str, Any]:
    return {
        "symbol": side.symbol,
        "bid": side.bid,
        "ask": side.ask,
        "bidSize": side.bid_size,
        "askSize": side.ask_size,
        "volume": side.volume,
        "openInterest": side.open_interest,
        "greeks": greeks_to_dict(side.greeks),
    }


def strike_row_to_dict(row: StrikeRow) -> Dict[str, Any]:
    return {
        "strike": row.strike,
        "call": contract_side_to_dict(row.call),
        "put": contract_side_to_dict(row.put),
    }


def expiration_to_dict(group: ExpirationGroup) -> Dict[str, Any]:
    return {
        "date": format_date(group.date),
        "options": [strike_row_to_dict(row) for row in group.options],
    }


def chain_to_dict(chain: OptionsChain) -> Dict[str, Any]:
    """Plain JSON-ready structure for ``chain``."""
    if not isinstance(chain, OptionsChain):
        raise EncodingError(
            f"Expected OptionsChain, got {type(chain).__name__}",
            value_type=type(chain).__name__
        )
    return {
        "symbol": chain.symbol,
        "lastPrice": chain.last_price,
        "lastUpdate": format_datetime(chain.last_update),
        "expirations": [expiration_to_dict(group) for group in chain.expirations],
    }


class ChainEncoder:
    """
    Serializes ``OptionsChain`` values to UTF-8 JSON.

    Args:
        indent: pretty-print indentation; ``None`` gives compact output.
        ensure_ascii: escape non-ASCII characters.
    """

    def __init__(self, indent: Optional[int] = None, ensure_ascii: bool = False):
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    @classmethod
    def from_config(cls, config) -> "ChainEncoder":
        return cls(indent=config.indent, ensure_ascii=config.ensure_ascii)

    def encode_text(self, chain: OptionsChain) -> str:
        separators = (",", ":") if self.indent is None else (",", ": ")
        return json.dumps(
            chain_to_dict(chain),
            indent=self.indent,
            separators=separators,
            ensure_ascii=self.ensure_ascii,
            allow_nan=False,
        )

    def encode(self, chain: OptionsChain) -> bytes:
        return self.encode_text(chain).encode("utf-8")


def encode_chain(chain: OptionsChain, indent: Optional[int] = None) -> bytes:
    """Encode with default settings; see ``ChainEncoder``."""
    return ChainEncoder(indent=indent).encode(chain)
