"""
Unit tests for the options chain data models.
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from pydantic import ValidationError

from options_chain.data.models import (
    ContractSide,
    ExpirationGroup,
    Greeks,
    OptionSymbol,
    OptionType,
    OptionsChain,
    StrikeRow,
)


def build_side(symbol="ABC240216C00100000", **overrides):
    values = dict(
        symbol=symbol,
        bid=5.0,
        ask=5.2,
        bid_size=10,
        ask_size=12,
        volume=500,
        open_interest=1000,
        greeks=Greeks(delta=0.55, gamma=0.02, theta=-0.05, vega=0.10, rho=0.01),
    )
    values.update(overrides)
    return ContractSide(**values)


def build_row(strike=100.0):
    return StrikeRow(strike=strike, call=build_side(), put=build_side("ABC240216P00100000"))


class TestContractSide:
    """Test ContractSide model."""

    def test_creation(self):
        side = build_side()
        assert side.bid_size == 10
        assert side.open_interest == 1000

    def test_populate_by_alias(self):
        side = ContractSide(
            symbol="X",
            bid=1.0,
            ask=1.1,
            bidSize=1,
            askSize=2,
            volume=3,
            openInterest=4,
            greeks=Greeks(delta=0.5, gamma=0.0, theta=0.0, vega=0.0, rho=0.0),
        )
        assert side.ask_size == 2

    def test_derived_prices(self):
        side = build_side(bid=4.0, ask=5.0)
        assert side.mid_price == 4.5
        assert side.spread == 1.0
        assert side.spread_pct == pytest.approx(1.0 / 4.5)

    def test_spread_pct_without_quote(self):
        assert build_side(bid=0.0, ask=0.0).spread_pct is None

    def test_is_immutable(self):
        side = build_side()
        with pytest.raises(ValidationError):
            side.bid = 1.0

    @pytest.mark.parametrize("overrides", [
        {"bid": -1.0},
        {"ask": float("nan")},
        {"volume": -1},
        {"bid_size": 10.0},
        {"open_interest": "5"},
        {"symbol": ""},
        {"symbol": "   "},
    ])
    def test_rejects_invalid_values(self, overrides):
        with pytest.raises(ValidationError):
            build_side(**overrides)

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            build_side(implied_volatility=0.3)


class TestStrikeRowAndGroup:
    """Test StrikeRow and ExpirationGroup models."""

    def test_strike_must_be_positive(self):
        with pytest.raises(ValidationError):
            build_row(strike=0.0)

    def test_side_lookup(self):
        row = build_row()
        assert row.side(OptionType.CALL) is row.call
        assert row.side(OptionType.PUT) is row.put

    def test_moneyness(self):
        assert build_row(95.0).moneyness(100.0) == "itm"
        assert build_row(100.0).moneyness(100.0) == "atm"
        assert build_row(105.0).moneyness(100.0) == "otm"

    def test_group_requires_rows(self):
        with pytest.raises(ValidationError):
            ExpirationGroup(date=date(2024, 2, 16), options=())

    def test_group_helpers(self):
        group = ExpirationGroup(date=date(2024, 2, 16), options=(build_row(95.0), build_row(100.0), build_row(110.0)))
        assert group.strikes == (95.0, 100.0, 110.0)
        assert group.find_strike(100.0).strike == 100.0
        assert group.find_strike(101.0) is None
        assert group.atm_row(103.0).strike == 100.0

    def test_options_stored_as_tuple(self):
        group = ExpirationGroup(date=date(2024, 2, 16), options=[build_row()])
        assert isinstance(group.options, tuple)


class TestOptionsChain:
    """Test OptionsChain model."""

    def build_chain(self, **overrides):
        values = dict(
            symbol="ABC",
            last_price=100.5,
            last_update=datetime(2024, 1, 1, tzinfo=timezone.utc),
            expirations=(
                ExpirationGroup(date=date(2024, 2, 16), options=(build_row(),)),
                ExpirationGroup(date=date(2024, 3, 15), options=(build_row(), build_row(105.0))),
            ),
        )
        values.update(overrides)
        return OptionsChain(**values)

    def test_helpers(self):
        chain = self.build_chain()
        assert chain.expiration_dates == (date(2024, 2, 16), date(2024, 3, 15))
        assert chain.row_count == 3
        assert chain.find_expiration(date(2024, 3, 15)).strikes == (100.0, 105.0)
        assert chain.find_expiration(date(2024, 4, 19)) is None

    def test_structural_equality(self):
        assert self.build_chain() == self.build_chain()
        assert self.build_chain() != self.build_chain(last_price=101.0)

    def test_requires_aware_timestamp(self):
        with pytest.raises(ValidationError):
            self.build_chain(last_update=datetime(2024, 1, 1))

    def test_requires_expirations(self):
        with pytest.raises(ValidationError):
            self.build_chain(expirations=())

    def test_rejects_infinite_price(self):
        with pytest.raises(ValidationError):
            self.build_chain(last_price=float("inf"))


class TestOptionSymbol:
    """Test OCC option symbol parsing."""

    def test_parse_compact(self):
        symbol = OptionSymbol.from_string("ABC240216C00100000")
        assert symbol.underlying == "ABC"
        assert symbol.expiration == date(2024, 2, 16)
        assert symbol.option_type == OptionType.CALL
        assert symbol.strike == Decimal("100")

    def test_parse_padded(self):
        symbol = OptionSymbol.from_string("SPY   240419P00502500")
        assert symbol.underlying == "SPY"
        assert symbol.option_type == OptionType.PUT
        assert symbol.strike == Decimal("502.5")

    def test_format(self):
        symbol = OptionSymbol("SPY", date(2024, 4, 19), Decimal("502.5"), OptionType.PUT)
        assert str(symbol) == "SPY   240419P00502500"
        assert symbol.compact() == "SPY240419P00502500"

    @pytest.mark.parametrize("text", ["ABC", "ABC240216X00100000", "ABC240216C100", "TOOLONGROOT240216C00100000"])
    def test_rejects_non_occ(self, text):
        with pytest.raises(ValueError):
            OptionSymbol.from_string(text)
