"""Data models for options chain snapshots."""

from .chain import Greeks, ContractSide, StrikeRow, ExpirationGroup, OptionsChain
from .symbols import OptionSymbol, OptionType

__all__ = [
    "Greeks", "ContractSide", "StrikeRow", "ExpirationGroup", "OptionsChain",
    "OptionSymbol", "OptionType",
]
