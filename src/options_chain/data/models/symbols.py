"""
OCC option symbol parsing.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

OCC_PATTERN = re.compile(r"^([A-Z0-9.]{1,6})\s*(\d{6})([CP])(\d{8})$")


class OptionType(str, Enum):
    """Option type enumeration."""
    CALL = "call"
    PUT = "put"


@dataclass(frozen=True)
class OptionSymbol:
    """Standardized option symbol representation."""
    underlying: str
    expiration: date
    strike: Decimal
    option_type: OptionType

    def __str__(self) -> str:
        """Generate OCC standard option symbol (root padded to six characters)."""
        return f"{self.underlying:<6}{self._suffix()}"

    def compact(self) -> str:
        """OCC symbol without root padding, as most data feeds print it."""
        return f"{self.underlying}{self._suffix()}"

    def _suffix(self) -> str:
        exp_str = self.expiration.strftime("%y%m%d")
        type_code = "C" if self.option_type == OptionType.CALL else "P"
        strike_str = f"{int(self.strike * 1000):08d}"
        return f"{exp_str}{type_code}{strike_str}"

    @classmethod
    def from_string(cls, symbol: str) -> "OptionSymbol":
        """Parse option symbol from OCC format, padded or compact."""
        match = OCC_PATTERN.match(symbol.strip())
        if not match:
            raise ValueError(f"Invalid option symbol format: {symbol}")

        underlying, exp_str, type_code, strike_str = match.groups()
        exp_date = datetime.strptime(exp_str, "%y%m%d").date()
        option_type = OptionType.CALL if type_code == "C" else OptionType.PUT
        strike = Decimal(strike_str) / 1000

        return cls(
            underlying=underlying,
            expiration=exp_date,
            strike=strike,
            option_type=option_type
        )
