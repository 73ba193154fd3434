"""
Raw JSON value layer.

Input text is parsed into plain Python values (None, bool, int, float, str,
list, RawObject). These are consumed only by the decoders and never escape
past the validated model boundary.
"""

import codecs
import json
from typing import Any, List, Optional, Tuple, Union

from ...infrastructure.error_handling import MalformedInputError


class RawObject(dict):
    """JSON object that remembers keys which appeared more than once."""

    def __init__(self, pairs: List[Tuple[str, Any]]):
        super().__init__()
        self.duplicate_keys: List[str] = []
        for key, value in pairs:
            if key in self and key not in self.duplicate_keys:
                self.duplicate_keys.append(key)
            self[key] = value


def _decode_text(data: Union[bytes, bytearray, str]) -> str:
    if isinstance(data, str):
        return data
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError(f"expected bytes or str, got {type(data).__name__}")

    raw = bytes(data)
    if raw.startswith(codecs.BOM_UTF8):
        raw = raw[len(codecs.BOM_UTF8):]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedInputError(
            f"Input is not valid UTF-8 at byte {e.start}: {e.reason}",
            offset=e.start
        )


def parse_raw(data: Union[bytes, bytearray, str], max_input_bytes: Optional[int] = None) -> Any:
    """
    Parse JSON text into raw values.

    Raises:
        MalformedInputError: if the input is not UTF-8 JSON, or exceeds
            ``max_input_bytes``.
    """
    if max_input_bytes is not None:
        size = len(data.encode("utf-8", "surrogatepass")) if isinstance(data, str) else len(data)
        if size > max_input_bytes:
            raise MalformedInputError(
                f"Input is {size} bytes, exceeding the limit of {max_input_bytes}",
                error_code="INPUT_TOO_LARGE"
            )

    text = _decode_text(data)
    if text.startswith("\ufeff"):
        text = text[1:]

    try:
        return json.loads(text, object_pairs_hook=RawObject)
    except json.JSONDecodeError as e:
        byte_offset = len(text[:e.pos].encode("utf-8", "surrogatepass"))
        raise MalformedInputError(
            f"Invalid JSON at line {e.lineno} column {e.colno} (byte {byte_offset}): {e.msg}",
            offset=byte_offset,
            line=e.lineno,
            column=e.colno
        )
    except ValueError as e:
        # Raised for numeric literals json cannot convert, such as integers
        # over the interpreter's digit limit.
        raise MalformedInputError(f"Invalid JSON value: {e}")
    except RecursionError:
        raise MalformedInputError("Input nesting is too deep to parse")
