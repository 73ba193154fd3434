"""
pytest configuration file for the options chain codec tests.
Provides shared fixtures and test configuration.
"""

import copy
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

import pytest
import structlog

# Add src to Python path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from options_chain.data.serialization.decoder import ChainDecoder  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def make_greeks(**overrides) -> Dict[str, Any]:
    greeks = {"delta": 0.55, "gamma": 0.02, "theta": -0.05, "vega": 0.10, "rho": 0.01}
    greeks.update(overrides)
    return greeks


def make_side(symbol: str = "ABC240216C00100000", **overrides) -> Dict[str, Any]:
    side = {
        "symbol": symbol,
        "bid": 5.0,
        "ask": 5.2,
        "bidSize": 10,
        "askSize": 12,
        "volume": 500,
        "openInterest": 1000,
        "greeks": make_greeks(),
    }
    side.update(overrides)
    return side


def make_row(strike: float = 100, **overrides) -> Dict[str, Any]:
    code = f"{int(strike * 1000):08d}"
    row = {
        "strike": strike,
        "call": make_side(f"ABC240216C{code}"),
        "put": make_side(
            f"ABC240216P{code}",
            bid=4.1,
            ask=4.3,
            greeks=make_greeks(delta=-0.45, rho=-0.02),
        ),
    }
    row.update(overrides)
    return row


def to_bytes(document: Any) -> bytes:
    return json.dumps(document).encode("utf-8")


# Data fixtures
@pytest.fixture
def valid_chain_dict() -> Dict[str, Any]:
    """Single-expiration, single-strike chain for ABC."""
    return {
        "symbol": "ABC",
        "lastPrice": 100.5,
        "lastUpdate": "2024-01-01T00:00:00Z",
        "expirations": [
            {"date": "2024-02-16", "options": [make_row(100)]}
        ],
    }


@pytest.fixture
def multi_expiration_dict(valid_chain_dict) -> Dict[str, Any]:
    """Two expirations with three strikes each, in ascending order."""
    document = copy.deepcopy(valid_chain_dict)
    document["expirations"] = [
        {"date": "2024-02-16", "options": [make_row(95), make_row(100), make_row(105)]},
        {"date": "2024-03-15", "options": [make_row(95), make_row(100), make_row(105)]},
    ]
    return document


@pytest.fixture
def valid_chain_bytes(valid_chain_dict) -> bytes:
    return to_bytes(valid_chain_dict)


@pytest.fixture
def decoder() -> ChainDecoder:
    return ChainDecoder()


@pytest.fixture
def valid_chain(decoder, valid_chain_bytes):
    """Decoded ABC chain."""
    return decoder.decode(valid_chain_bytes)


@pytest.fixture
def sample_chain_path() -> Path:
    """Path of the checked-in XYZ sample document."""
    return FIXTURES_DIR / "sample_chain.json"


@pytest.fixture
def sample_chain(decoder, sample_chain_path):
    return decoder.decode(sample_chain_path.read_bytes())


@pytest.fixture
def write_chain(tmp_path):
    """Write a document (dict, str or bytes) to a temporary file and return its path."""
    def _write(document: Any, name: str = "chain.json") -> Path:
        path = tmp_path / name
        if isinstance(document, bytes):
            path.write_bytes(document)
        elif isinstance(document, str):
            path.write_text(document, encoding="utf-8")
        else:
            path.write_bytes(to_bytes(document))
        return path
    return _write


@pytest.fixture
def clean_environ(monkeypatch):
    """Remove configuration overrides that may be set in the calling shell."""
    for name in (
        "OPTIONS_CHAIN_LOG_LEVEL",
        "OPTIONS_CHAIN_ORDERING_POLICY",
        "OPTIONS_CHAIN_REJECT_UNKNOWN_FIELDS",
        "OPTIONS_CHAIN_STRICT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo handler changes made by setup_logging between tests."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level

    yield

    for handler in list(root_logger.handlers):
        if handler not in handlers:
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)
    structlog.reset_defaults()
