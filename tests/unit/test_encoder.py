"""
Unit tests for the canonical chain encoder.
"""

import json

import jsonschema
import pytest
from datetime import date, datetime, timedelta, timezone

from options_chain.application.config.settings import EncoderConfig
from options_chain.data.schemas import load_chain_schema
from options_chain.data.serialization.decoder import ChainDecoder
from options_chain.data.serialization.encoder import (
    ChainEncoder,
    chain_to_dict,
    encode_chain,
    format_date,
    format_datetime,
)
from options_chain.infrastructure.error_handling import EncodingError

from conftest import to_bytes


class TestFormatting:
    """Test date and timestamp rendering."""

    def test_format_date(self):
        assert format_date(date(2024, 2, 6)) == "2024-02-06"

    def test_utc_uses_z_suffix(self):
        assert format_datetime(datetime(2024, 1, 1, tzinfo=timezone.utc)) == "2024-01-01T00:00:00Z"

    def test_offset_is_kept(self):
        value = datetime(2024, 3, 15, 15, 45, 30, tzinfo=timezone(timedelta(hours=-4)))
        assert format_datetime(value) == "2024-03-15T15:45:30-04:00"

    def test_half_hour_offset(self):
        value = datetime(2024, 3, 15, 9, 0, tzinfo=timezone(timedelta(hours=5, minutes=30)))
        assert format_datetime(value) == "2024-03-15T09:00:00+05:30"

    def test_microseconds(self):
        value = datetime(2024, 1, 1, 0, 0, 0, 250000, tzinfo=timezone.utc)
        assert format_datetime(value) == "2024-01-01T00:00:00.250000Z"

    def test_naive_datetime_rejected(self):
        with pytest.raises(EncodingError):
            format_datetime(datetime(2024, 1, 1))

    def test_year_below_1000_is_zero_padded(self):
        assert format_date(date(999, 2, 16)) == "0999-02-16"
        assert format_datetime(datetime(5, 1, 1, tzinfo=timezone.utc)) == "0005-01-01T00:00:00Z"

    @pytest.mark.parametrize("offset", [timedelta(seconds=30), timedelta(hours=-5, seconds=-1), timedelta(microseconds=1)])
    def test_sub_minute_offset_rejected(self, offset):
        value = datetime(2024, 1, 1, tzinfo=timezone(offset))
        with pytest.raises(EncodingError) as exc_info:
            format_datetime(value)
        assert exc_info.value.context["value_type"] == "datetime"


class TestChainEncoder:
    """Test encoding whole chains."""

    def test_key_order_follows_schema(self, valid_chain):
        document = json.loads(ChainEncoder().encode(valid_chain))

        assert list(document) == ["symbol", "lastPrice", "lastUpdate", "expirations"]
        group = document["expirations"][0]
        assert list(group) == ["date", "options"]
        row = group["options"][0]
        assert list(row) == ["strike", "call", "put"]
        assert list(row["call"]) == [
            "symbol", "bid", "ask", "bidSize", "askSize", "volume", "openInterest", "greeks"
        ]
        assert list(row["call"]["greeks"]) == ["delta", "gamma", "theta", "vega", "rho"]

    def test_compact_output(self, valid_chain):
        text = ChainEncoder().encode(valid_chain).decode("utf-8")
        assert text.startswith('{"symbol":"ABC","lastPrice":100.5,"lastUpdate":"2024-01-01T00:00:00Z",')
        assert " " not in text

    def test_integers_have_no_fraction(self, valid_chain):
        text = encode_chain(valid_chain).decode("utf-8")
        assert '"bidSize":10,' in text
        assert '"openInterest":1000,' in text

    def test_indent(self, valid_chain):
        text = ChainEncoder(indent=2).encode_text(valid_chain)
        assert text.startswith('{\n  "symbol": "ABC",')

    def test_non_ascii_symbols(self, decoder, valid_chain_dict):
        valid_chain_dict["symbol"] = "ÄBC"
        chain = decoder.decode(to_bytes(valid_chain_dict))

        assert "ÄBC".encode("utf-8") in ChainEncoder().encode(chain)
        assert b"\\u00c4BC" in ChainEncoder(ensure_ascii=True).encode(chain)

    def test_round_trip(self, decoder, sample_chain):
        """Test decode(encode(x)) == x."""
        assert decoder.decode(ChainEncoder().encode(sample_chain)) == sample_chain
        assert decoder.decode(ChainEncoder(indent=4).encode(sample_chain)) == sample_chain

    def test_encoding_is_stable(self, decoder, sample_chain):
        first = encode_chain(sample_chain)
        assert encode_chain(decoder.decode(first)) == first

    def test_round_trip_keeps_offset_and_fraction(self, decoder, valid_chain_dict):
        valid_chain_dict["lastUpdate"] = "2024-03-15T15:45:30.123456-04:00"
        chain = decoder.decode(to_bytes(valid_chain_dict))

        encoded = json.loads(encode_chain(chain))

        assert encoded["lastUpdate"] == "2024-03-15T15:45:30.123456-04:00"
        assert decoder.decode(encode_chain(chain)) == chain

    def test_preserves_order(self, decoder, multi_expiration_dict):
        multi_expiration_dict["expirations"].reverse()
        multi_expiration_dict["expirations"][1]["options"].reverse()
        chain = decoder.decode(to_bytes(multi_expiration_dict))

        document = json.loads(encode_chain(chain))

        assert [g["date"] for g in document["expirations"]] == ["2024-03-15", "2024-02-16"]
        assert [r["strike"] for r in document["expirations"][1]["options"]] == [105.0, 100.0, 95.0]

    def test_output_matches_packaged_schema(self, sample_chain):
        document = json.loads(encode_chain(sample_chain))
        jsonschema.validate(document, load_chain_schema())

    def test_chain_to_dict_rejects_other_values(self, valid_chain_dict):
        with pytest.raises(EncodingError) as exc_info:
            chain_to_dict(valid_chain_dict)
        assert exc_info.value.context["value_type"] == "dict"

    def test_from_config(self):
        encoder = ChainEncoder.from_config(EncoderConfig(indent=3, ensure_ascii=True))
        assert encoder.indent == 3
        assert encoder.ensure_ascii is True


class TestBoundaryRoundTrip:
    """Test decode(encode(x)) == x at the edges of what the decoder accepts."""

    @pytest.mark.parametrize("expiration, last_update", [
        ("0999-02-16", "0999-01-01T00:00:00Z"),
        ("0001-01-01", "0001-01-01T12:00:00+23:59"),
        ("9999-12-31", "9999-12-31T00:00:00-23:59"),
        ("2024-02-29", "2024-02-29T23:59:59.999999+00:01"),
    ])
    def test_dates_and_offsets(self, decoder, valid_chain_dict, expiration, last_update):
        valid_chain_dict["expirations"][0]["date"] = expiration
        valid_chain_dict["lastUpdate"] = last_update
        chain = decoder.decode(to_bytes(valid_chain_dict))

        document = json.loads(encode_chain(chain))

        assert document["expirations"][0]["date"] == expiration
        assert decoder.decode(encode_chain(chain)) == chain

    @pytest.mark.parametrize("ensure_ascii", [False, True])
    def test_non_bmp_symbols(self, decoder, valid_chain_dict, ensure_ascii):
        valid_chain_dict["symbol"] = "\U0001d538BC"
        valid_chain_dict["expirations"][0]["options"][0]["call"]["symbol"] = "\U0001f4c8240216C00100000"
        chain = decoder.decode(to_bytes(valid_chain_dict))

        encoded = ChainEncoder(ensure_ascii=ensure_ascii).encode(chain)

        assert decoder.decode(encoded) == chain
        assert decoder.decode(encoded).symbol == "\U0001d538BC"

    def test_extreme_numbers(self, decoder, valid_chain_dict):
        side = valid_chain_dict["expirations"][0]["options"][0]["call"]
        side.update(bid=5e-324, ask=1.7976931348623157e308, volume=2 ** 63 - 1, openInterest=2 ** 53 + 1)
        chain = decoder.decode(to_bytes(valid_chain_dict))

        assert decoder.decode(encode_chain(chain)) == chain
        assert b'"openInterest":9007199254740993,' in encode_chain(chain)

    def test_sub_minute_offset_chain_is_not_encoded(self, valid_chain):
        odd = valid_chain.model_copy(
            update={"last_update": datetime(2024, 1, 1, tzinfo=timezone(timedelta(seconds=45)))}
        )
        with pytest.raises(EncodingError):
            encode_chain(odd)


class TestSchemaAgreement:
    """Test the packaged schema agrees with the decoder on sample documents."""

    def test_fixture_validates(self, sample_chain_path):
        jsonschema.validate(json.loads(sample_chain_path.read_text()), load_chain_schema())

    def test_schema_rejects_missing_greek(self, valid_chain_dict):
        del valid_chain_dict["expirations"][0]["options"][0]["call"]["greeks"]["rho"]
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate(valid_chain_dict, load_chain_schema())

    def test_decoder_agrees(self, valid_chain_dict):
        del valid_chain_dict["expirations"][0]["options"][0]["call"]["greeks"]["rho"]
        assert not ChainDecoder().try_decode(to_bytes(valid_chain_dict)).ok
