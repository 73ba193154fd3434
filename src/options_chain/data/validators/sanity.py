"""
Domain plausibility checks for decoded options chains.

These rules are not part of the document structure: a chain can decode
cleanly and still quote a bid above its ask. The checker runs on an already
validated ``OptionsChain`` and only reports; it never alters the chain.
"""

import logging
import math
from enum import Enum
from typing import Optional, Sequence, Tuple

from ..models.chain import ContractSide, ExpirationGroup, Greeks, OptionsChain, StrikeRow
from ..models.symbols import OptionSymbol, OptionType
from .results import ErrorKind, FieldPath, ValidationReport, ValidationSeverity

logger = logging.getLogger(__name__)


class OrderingPolicy(str, Enum):
    """How to treat non-ascending or duplicated expirations and strikes."""
    IGNORE = "ignore"
    WARN = "warn"
    ERROR = "error"


class GreeksSanityValidator:
    """Range checks for greeks."""

    @staticmethod
    def validate(
        greeks: Greeks,
        option_type: OptionType,
        path: FieldPath,
        result: ValidationReport,
        delta_range: Tuple[float, float]
    ):
        low, high = delta_range
        if not low <= greeks.delta <= high:
            result.add_error(
                ErrorKind.SANITY,
                f"{option_type.value} delta {greeks.delta} out of range [{low}, {high}]",
                path + ("delta",)
            )

        if greeks.gamma < 0:
            result.add_error(ErrorKind.SANITY, f"Gamma {greeks.gamma} cannot be negative", path + ("gamma",))

        if greeks.vega < 0:
            result.add_error(ErrorKind.SANITY, f"Vega {greeks.vega} cannot be negative", path + ("vega",))


class ContractSideSanityValidator:
    """Quote and symbol checks for one contract side."""

    @staticmethod
    def validate_quote(side: ContractSide, path: FieldPath, result: ValidationReport):
        # A zero on either side means no quote, not a crossed market.
        if side.bid > 0 and side.ask > 0 and side.bid > side.ask:
            result.add_error(
                ErrorKind.SANITY,
                f"Bid {side.bid} cannot be greater than ask {side.ask}",
                path + ("bid",)
            )

    @staticmethod
    def validate_symbol(
        side: ContractSide,
        option_type: OptionType,
        row: StrikeRow,
        group: ExpirationGroup,
        path: FieldPath,
        result: ValidationReport
    ):
        """Compare an OCC-style contract symbol against where it is listed."""
        symbol_path = path + ("symbol",)
        try:
            parsed = OptionSymbol.from_string(side.symbol)
        except ValueError:
            result.add_warning(ErrorKind.SANITY, f"{side.symbol!r} is not an OCC option symbol", symbol_path)
            return

        if parsed.option_type != option_type:
            result.add_warning(
                ErrorKind.SANITY,
                f"Symbol {side.symbol} is a {parsed.option_type.value} listed as a {option_type.value}",
                symbol_path
            )
        if parsed.expiration != group.date:
            result.add_warning(
                ErrorKind.SANITY,
                f"Symbol {side.symbol} expires {parsed.expiration}, listed under {group.date}",
                symbol_path
            )
        if not math.isclose(float(parsed.strike), row.strike, abs_tol=1e-6):
            result.add_warning(
                ErrorKind.SANITY,
                f"Symbol {side.symbol} has strike {parsed.strike}, listed at {row.strike}",
                symbol_path
            )


class SanityChecker:
    """
    Opt-in plausibility pass layered on top of structural decoding.

    Args:
        ordering_policy: treatment of non-ascending or duplicated
            expiration dates and strikes.
        check_bid_ask: report ``bid > ask`` when both are positive.
        call_delta_range: inclusive bounds for call delta.
        put_delta_range: inclusive bounds for put delta.
        check_occ_symbols: compare contract symbols with their listing.
        strict: treat warnings as errors.
    """

    def __init__(
        self,
        ordering_policy: OrderingPolicy = OrderingPolicy.WARN,
        check_bid_ask: bool = True,
        call_delta_range: Tuple[float, float] = (0.0, 1.0),
        put_delta_range: Tuple[float, float] = (-1.0, 1.0),
        check_occ_symbols: bool = False,
        strict: bool = False
    ):
        self.ordering_policy = OrderingPolicy(ordering_policy)
        self.check_bid_ask = check_bid_ask
        self.call_delta_range = tuple(call_delta_range)
        self.put_delta_range = tuple(put_delta_range)
        self.check_occ_symbols = check_occ_symbols
        self.strict = strict

    @classmethod
    def from_config(cls, config) -> "SanityChecker":
        """Build a checker from a ``SanityConfig``."""
        return cls(
            ordering_policy=config.ordering_policy,
            check_bid_ask=config.check_bid_ask,
            call_delta_range=config.call_delta_range,
            put_delta_range=config.put_delta_range,
            check_occ_symbols=config.check_occ_symbols,
            strict=config.strict,
        )

    def check(self, chain: OptionsChain) -> ValidationReport:
        """Run every enabled check over ``chain``."""
        result = ValidationReport()

        if chain.last_price <= 0:
            result.add_error(
                ErrorKind.SANITY,
                f"Underlying price {chain.last_price} must be positive",
                ("lastPrice",)
            )

        self._check_ordering(
            [group.date for group in chain.expirations],
            ("expirations",),
            "date",
            "expiration date",
            result
        )

        for i, group in enumerate(chain.expirations):
            group_path = ("expirations", i)
            self._check_ordering(
                [row.strike for row in group.options],
                group_path + ("options",),
                "strike",
                "strike",
                result
            )
            for j, row in enumerate(group.options):
                row_path = group_path + ("options", j)
                self._check_side(row.call, OptionType.CALL, row, group, row_path + ("call",), result)
                self._check_side(row.put, OptionType.PUT, row, group, row_path + ("put",), result)

        if self.strict:
            result.promote_warnings()

        logger.debug(f"Sanity check for {chain.symbol}: {result.summary()}")
        return result

    def _check_side(
        self,
        side: ContractSide,
        option_type: OptionType,
        row: StrikeRow,
        group: ExpirationGroup,
        path: FieldPath,
        result: ValidationReport
    ):
        if self.check_bid_ask:
            ContractSideSanityValidator.validate_quote(side, path, result)

        delta_range = self.call_delta_range if option_type == OptionType.CALL else self.put_delta_range
        GreeksSanityValidator.validate(side.greeks, option_type, path + ("greeks",), result, delta_range)

        if self.check_occ_symbols:
            ContractSideSanityValidator.validate_symbol(side, option_type, row, group, path, result)

    def _check_ordering(
        self,
        keys: Sequence,
        path: FieldPath,
        key_name: str,
        label: str,
        result: ValidationReport
    ):
        """Report each element that does not strictly follow its predecessor."""
        if self.ordering_policy == OrderingPolicy.IGNORE:
            return

        severity = (
            ValidationSeverity.ERROR
            if self.ordering_policy == OrderingPolicy.ERROR
            else ValidationSeverity.WARNING
        )
        previous: Optional[object] = None
        for index, key in enumerate(keys):
            if previous is not None:
                if key == previous:
                    result.add_issue(ErrorKind.SANITY, f"Duplicate {label} {key}", path + (index, key_name), severity)
                elif key < previous:
                    result.add_issue(
                        ErrorKind.SANITY,
                        f"{label.capitalize()} {key} follows {previous}; expected ascending order",
                        path + (index, key_name),
                        severity
                    )
            previous = key


def check_sanity(chain: OptionsChain, **kwargs) -> ValidationReport:
    """Run a one-off ``SanityChecker``; see its arguments."""
    return SanityChecker(**kwargs).check(chain)
