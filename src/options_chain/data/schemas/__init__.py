"""Packaged JSON Schema describing the chain document."""

import json
from pathlib import Path
from typing import Any, Dict

CHAIN_SCHEMA_PATH = Path(__file__).parent / "options_chain.schema.json"


def load_chain_schema() -> Dict[str, Any]:
    with open(CHAIN_SCHEMA_PATH, "r", encoding="utf-8") as f:
        return json.load(f)
