"""
Core data models for an options chain snapshot.

Models are immutable once constructed. Attribute names are snake_case; the
camelCase names used on the wire are declared as aliases.
"""

import datetime as dt
import math
from typing import Optional, Tuple

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, StrictInt, field_validator

from .symbols import OptionType


class ChainModel(BaseModel):
    """Shared configuration for chain models."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        allow_inf_nan=False,
        extra="forbid",
    )


def _check_symbol(value: str) -> str:
    if not value.strip():
        raise ValueError("symbol must be non-empty")
    return value


class Greeks(ChainModel):
    """Pre-computed risk sensitivities for one contract side."""
    delta: float = Field(..., description="Price sensitivity to underlying")
    gamma: float = Field(..., description="Delta sensitivity to underlying")
    theta: float = Field(..., description="Time decay")
    vega: float = Field(..., description="Volatility sensitivity")
    rho: float = Field(..., description="Interest rate sensitivity")


class ContractSide(ChainModel):
    """One leg (call or put) quoted at a strike."""
    symbol: str = Field(..., min_length=1, description="Option contract symbol")
    bid: float = Field(..., ge=0, description="Best bid")
    ask: float = Field(..., ge=0, description="Best ask")
    bid_size: StrictInt = Field(..., ge=0, alias="bidSize")
    ask_size: StrictInt = Field(..., ge=0, alias="askSize")
    volume: StrictInt = Field(..., ge=0, description="Daily volume")
    open_interest: StrictInt = Field(..., ge=0, alias="openInterest")
    greeks: Greeks

    @field_validator("symbol")
    @classmethod
    def symbol_not_blank(cls, value: str) -> str:
        return _check_symbol(value)

    @property
    def mid_price(self) -> float:
        """Midpoint of bid and ask."""
        return (self.bid + self.ask) / 2

    @property
    def spread(self) -> float:
        """Ask minus bid."""
        return self.ask - self.bid

    @property
    def spread_pct(self) -> Optional[float]:
        """Spread as a fraction of the mid price, None when mid is zero."""
        mid = self.mid_price
        if mid > 0:
            return self.spread / mid
        return None


class StrikeRow(ChainModel):
    """A strike with its call and put sides."""
    strike: float = Field(..., gt=0, description="Strike price")
    call: ContractSide
    put: ContractSide

    def side(self, option_type: OptionType) -> ContractSide:
        return self.call if option_type == OptionType.CALL else self.put

    def moneyness(self, last_price: float) -> str:
        """
        Moneyness of the call at this strike: ``"itm"``, ``"atm"`` or ``"otm"``.

        The put is the mirror image.
        """
        if math.isclose(self.strike, last_price):
            return "atm"
        return "itm" if self.strike < last_price else "otm"


class ExpirationGroup(ChainModel):
    """Strike rows sharing an expiration date, in provider order."""
    date: dt.date
    options: Tuple[StrikeRow, ...] = Field(..., min_length=1)

    @property
    def strikes(self) -> Tuple[float, ...]:
        return tuple(row.strike for row in self.options)

    def find_strike(self, strike: float) -> Optional[StrikeRow]:
        """First row quoted at ``strike``."""
        for row in self.options:
            if math.isclose(row.strike, strike):
                return row
        return None

    def atm_row(self, last_price: float) -> StrikeRow:
        """Row whose strike is closest to ``last_price``."""
        return min(self.options, key=lambda row: abs(row.strike - last_price))


class OptionsChain(ChainModel):
    """Complete options chain snapshot for one underlying."""
    symbol: str = Field(..., min_length=1, description="Underlying ticker")
    last_price: float = Field(..., alias="lastPrice", description="Underlying last price")
    last_update: AwareDatetime = Field(..., alias="lastUpdate", description="Snapshot timestamp")
    expirations: Tuple[ExpirationGroup, ...] = Field(..., min_length=1)

    @field_validator("symbol")
    @classmethod
    def symbol_not_blank(cls, value: str) -> str:
        return _check_symbol(value)

    @property
    def expiration_dates(self) -> Tuple[dt.date, ...]:
        return tuple(group.date for group in self.expirations)

    @property
    def row_count(self) -> int:
        return sum(len(group.options) for group in self.expirations)

    def find_expiration(self, expiration: dt.date) -> Optional[ExpirationGroup]:
        """First group for ``expiration``."""
        for group in self.expirations:
            if group.date == expiration:
                return group
        return None
