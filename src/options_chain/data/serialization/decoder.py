"""
Validating decoder for options chain documents.

Decoding never stops at the first defect. Every level records its problems
into a shared ``ValidationReport`` keyed by field path and hands back either
a fully validated model or ``None``; a level that saw any error below it
returns ``None`` so no partially populated value escapes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..models.chain import ContractSide, ExpirationGroup, Greeks, OptionsChain, StrikeRow
from ..validators.primitives import (
    PrimitiveError,
    json_type_name,
    require_date,
    require_datetime,
    require_finite_number,
    require_non_negative_integer,
    require_non_negative_number,
    require_positive_number,
    require_string,
)
from ..validators.results import ErrorKind, FieldPath, ROOT_PATH, ValidationReport
from .raw import parse_raw
from ...infrastructure.error_handling import ChainValidationError

logger = logging.getLogger(__name__)

_INVALID = object()

ModelT = TypeVar("ModelT", bound=BaseModel)


class DecodeContext:
    """Error accumulator and policy shared by every decoder level."""

    def __init__(self, reject_unknown_fields: bool = False):
        self.report = ValidationReport()
        self.reject_unknown_fields = reject_unknown_fields

    @property
    def error_count(self) -> int:
        return len(self.report.issues)

    def error(self, kind: ErrorKind, message: str, path: FieldPath) -> None:
        self.report.add_error(kind, message, path)

    def build(self, model: Type[ModelT], path: FieldPath, **values) -> Optional[ModelT]:
        """
        Construct ``model`` from already validated values.

        Model constraints that the field checks did not anticipate are
        recorded as ``InvalidValue`` at the offending field instead of
        escaping as a pydantic error.
        """
        try:
            return model(**values)
        except ValidationError as e:
            for detail in e.errors():
                self.error(ErrorKind.INVALID_VALUE, detail["msg"], path + tuple(detail["loc"]))
            return None

    def expect_object(self, raw: Any, path: FieldPath, known_keys: Iterable[str]) -> Optional[dict]:
        """Return ``raw`` if it is a JSON object, recording key-level defects."""
        if not isinstance(raw, dict):
            self.error(ErrorKind.TYPE_MISMATCH, f"expected object, got {json_type_name(raw)}", path)
            return None

        for key in getattr(raw, "duplicate_keys", ()):
            self.error(ErrorKind.INVALID_VALUE, f"duplicate key '{key}'", path + (key,))

        if self.reject_unknown_fields:
            known = set(known_keys)
            for key in raw:
                if key not in known:
                    self.error(ErrorKind.INVALID_VALUE, f"unexpected field '{key}'", path + (key,))
        return raw

    def scalar(self, obj: dict, key: str, path: FieldPath, validator: Callable[[Any], Any]) -> Any:
        """Validate a required scalar field."""
        field_path = path + (key,)
        if key not in obj:
            self.error(ErrorKind.MISSING_FIELD, f"required field '{key}' is missing", field_path)
            return _INVALID
        try:
            return validator(obj[key])
        except PrimitiveError as e:
            self.error(e.kind, e.message, field_path)
            return _INVALID

    def nested(self, obj: dict, key: str, path: FieldPath, decode: Callable) -> Any:
        """Decode a required object field with a lower-level decoder."""
        field_path = path + (key,)
        if key not in obj:
            self.error(ErrorKind.MISSING_FIELD, f"required field '{key}' is missing", field_path)
            return _INVALID
        value = decode(obj[key], field_path, self)
        return _INVALID if value is None else value

    def sequence(self, obj: dict, key: str, path: FieldPath, decode: Callable, item_name: str) -> Any:
        """Decode a required, non-empty array field, preserving element order."""
        field_path = path + (key,)
        if key not in obj:
            self.error(ErrorKind.MISSING_FIELD, f"required field '{key}' is missing", field_path)
            return _INVALID

        raw = obj[key]
        if not isinstance(raw, list):
            self.error(ErrorKind.TYPE_MISMATCH, f"expected array, got {json_type_name(raw)}", field_path)
            return _INVALID
        if not raw:
            self.error(ErrorKind.INVALID_VALUE, f"must contain at least one {item_name}", field_path)
            return _INVALID

        items = [decode(item, field_path + (index,), self) for index, item in enumerate(raw)]
        if any(item is None for item in items):
            return _INVALID
        return tuple(items)


class GreeksDecoder:
    """Decoder for the five greeks of one contract side."""

    FIELDS = ("delta", "gamma", "theta", "vega", "rho")

    @staticmethod
    def decode(raw: Any, path: FieldPath, ctx: DecodeContext) -> Optional[Greeks]:
        start = ctx.error_count
        obj = ctx.expect_object(raw, path, GreeksDecoder.FIELDS)
        if obj is None:
            return None

        values = {name: ctx.scalar(obj, name, path, require_finite_number) for name in GreeksDecoder.FIELDS}

        if ctx.error_count > start:
            return None
        return ctx.build(Greeks, path, **values)


class ContractSideDecoder:
    """Decoder for one call or put leg."""

    FIELDS = ("symbol", "bid", "ask", "bidSize", "askSize", "volume", "openInterest", "greeks")

    @staticmethod
    def decode(raw: Any, path: FieldPath, ctx: DecodeContext) -> Optional[ContractSide]:
        start = ctx.error_count
        obj = ctx.expect_object(raw, path, ContractSideDecoder.FIELDS)
        if obj is None:
            return None

        symbol = ctx.scalar(obj, "symbol", path, require_string)
        bid = ctx.scalar(obj, "bid", path, require_non_negative_number)
        ask = ctx.scalar(obj, "ask", path, require_non_negative_number)
        bid_size = ctx.scalar(obj, "bidSize", path, require_non_negative_integer)
        ask_size = ctx.scalar(obj, "askSize", path, require_non_negative_integer)
        volume = ctx.scalar(obj, "volume", path, require_non_negative_integer)
        open_interest = ctx.scalar(obj, "openInterest", path, require_non_negative_integer)
        greeks = ctx.nested(obj, "greeks", path, GreeksDecoder.decode)

        if ctx.error_count > start:
            return None
        return ctx.build(
            ContractSide,
            path,
            symbol=symbol,
            bid=bid,
            ask=ask,
            bid_size=bid_size,
            ask_size=ask_size,
            volume=volume,
            open_interest=open_interest,
            greeks=greeks,
        )


class StrikeRowDecoder:
    """Decoder for a strike with both of its sides."""

    FIELDS = ("strike", "call", "put")

    @staticmethod
    def decode(raw: Any, path: FieldPath, ctx: DecodeContext) -> Optional[StrikeRow]:
        start = ctx.error_count
        obj = ctx.expect_object(raw, path, StrikeRowDecoder.FIELDS)
        if obj is None:
            return None

        strike = ctx.scalar(obj, "strike", path, require_positive_number)
        call = ctx.nested(obj, "call", path, ContractSideDecoder.decode)
        put = ctx.nested(obj, "put", path, ContractSideDecoder.decode)

        if ctx.error_count > start:
            return None
        return ctx.build(StrikeRow, path, strike=strike, call=call, put=put)


class ExpirationGroupDecoder:
    """Decoder for one expiration date and its strike rows."""

    FIELDS = ("date", "options")

    @staticmethod
    def decode(raw: Any, path: FieldPath, ctx: DecodeContext) -> Optional[ExpirationGroup]:
        start = ctx.error_count
        obj = ctx.expect_object(raw, path, ExpirationGroupDecoder.FIELDS)
        if obj is None:
            return None

        expiration = ctx.scalar(obj, "date", path, require_date)
        options = ctx.sequence(obj, "options", path, StrikeRowDecoder.decode, "strike row")

        if ctx.error_count > start:
            return None
        return ctx.build(ExpirationGroup, path, date=expiration, options=options)


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of a decode: a chain, or the report explaining why not."""
    chain: Optional[OptionsChain]
    report: ValidationReport

    @property
    def ok(self) -> bool:
        return self.chain is not None

    def unwrap(self) -> OptionsChain:
        """Return the chain or raise ``ChainValidationError``."""
        if self.chain is None:
            raise ChainValidationError(self.report)
        return self.chain


class ChainDecoder:
    """
    Top-level decoder: raw JSON text in, validated ``OptionsChain`` out.

    Args:
        reject_unknown_fields: report keys outside the chain schema as
            ``InvalidValue`` instead of ignoring them.
        max_input_bytes: reject larger inputs before parsing.
    """

    FIELDS = ("symbol", "lastPrice", "lastUpdate", "expirations")

    def __init__(self, reject_unknown_fields: bool = False, max_input_bytes: Optional[int] = None):
        self.reject_unknown_fields = reject_unknown_fields
        self.max_input_bytes = max_input_bytes

    @classmethod
    def from_config(cls, config) -> "ChainDecoder":
        """Build a decoder from a ``DecoderConfig``."""
        return cls(
            reject_unknown_fields=config.reject_unknown_fields,
            max_input_bytes=config.max_input_bytes,
        )

    def decode(self, data: Union[bytes, bytearray, str]) -> OptionsChain:
        """
        Decode JSON text into an ``OptionsChain``.

        Raises:
            MalformedInputError: the input is not UTF-8 JSON.
            ChainValidationError: the document violates the chain structure;
                ``error.report`` lists every defect found.
        """
        return self.try_decode(data).unwrap()

    def try_decode(self, data: Union[bytes, bytearray, str]) -> DecodeResult:
        """Decode without raising on structural defects (malformed input still raises)."""
        raw = parse_raw(data, max_input_bytes=self.max_input_bytes)
        return self.decode_raw(raw)

    def decode_raw(self, raw: Any) -> DecodeResult:
        """Decode an already parsed JSON value."""
        ctx = DecodeContext(reject_unknown_fields=self.reject_unknown_fields)
        chain = self._decode_chain(raw, ROOT_PATH, ctx)

        if chain is None:
            symbol = raw.get("symbol") if isinstance(raw, dict) else None
            logger.info(
                f"Rejected options chain {symbol!r}: {len(ctx.report.errors())} structural errors"
            )
            return DecodeResult(chain=None, report=ctx.report)

        logger.debug(
            f"Decoded options chain {chain.symbol}: "
            f"{len(chain.expirations)} expirations, {chain.row_count} strike rows"
        )
        return DecodeResult(chain=chain, report=ctx.report)

    def _decode_chain(self, raw: Any, path: FieldPath, ctx: DecodeContext) -> Optional[OptionsChain]:
        start = ctx.error_count
        obj = ctx.expect_object(raw, path, self.FIELDS)
        if obj is None:
            return None

        symbol = ctx.scalar(obj, "symbol", path, require_string)
        last_price = ctx.scalar(obj, "lastPrice", path, require_finite_number)
        last_update = ctx.scalar(obj, "lastUpdate", path, require_datetime)
        expirations = ctx.sequence(obj, "expirations", path, ExpirationGroupDecoder.decode, "expiration")

        if ctx.error_count > start:
            return None
        return ctx.build(
            OptionsChain,
            path,
            symbol=symbol,
            last_price=last_price,
            last_update=last_update,
            expirations=expirations,
        )


def decode_chain(data: Union[bytes, bytearray, str], **kwargs) -> OptionsChain:
    """Decode with a one-off ``ChainDecoder``; see ``ChainDecoder.decode``."""
    return ChainDecoder(**kwargs).decode(data)


def try_decode_chain(data: Union[bytes, bytearray, str], **kwargs) -> DecodeResult:
    return ChainDecoder(**kwargs).try_decode(data)
