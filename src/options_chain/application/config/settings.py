"""
Configuration management for the options chain codec.
Handles loading, validation, and environment variable overrides.
"""

import os
import json
import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import jsonschema
import yaml

from ...data.validators.sanity import OrderingPolicy
from ...infrastructure.error_handling import ConfigurationError

SCHEMA_PATH = Path(__file__).parent / "settings.schema.json"

DEFAULTS: Dict[str, Any] = {
    "decoder": {
        "reject_unknown_fields": False,
        "max_input_bytes": None,
    },
    "sanity": {
        "ordering_policy": "warn",
        "check_bid_ask": True,
        "call_delta_range": [0.0, 1.0],
        "put_delta_range": [-1.0, 1.0],
        "check_occ_symbols": False,
        "strict": False,
    },
    "encoder": {
        "indent": None,
        "ensure_ascii": False,
    },
    "logging": {
        "level": "INFO",
        "json": False,
    },
}

# Environment variable -> config path
ENV_OVERRIDES = {
    "OPTIONS_CHAIN_LOG_LEVEL": ["logging", "level"],
    "OPTIONS_CHAIN_ORDERING_POLICY": ["sanity", "ordering_policy"],
    "OPTIONS_CHAIN_REJECT_UNKNOWN_FIELDS": ["decoder", "reject_unknown_fields"],
    "OPTIONS_CHAIN_STRICT": ["sanity", "strict"],
}


@dataclass(frozen=True)
class DecoderConfig:
    """Decoder configuration."""
    reject_unknown_fields: bool = False
    max_input_bytes: Optional[int] = None


@dataclass(frozen=True)
class SanityConfig:
    """Sanity check configuration."""
    ordering_policy: OrderingPolicy = OrderingPolicy.WARN
    check_bid_ask: bool = True
    call_delta_range: Tuple[float, float] = (0.0, 1.0)
    put_delta_range: Tuple[float, float] = (-1.0, 1.0)
    check_occ_symbols: bool = False
    strict: bool = False

    def __post_init__(self):
        for name in ("call_delta_range", "put_delta_range"):
            low, high = getattr(self, name)
            if low > high:
                raise ConfigurationError(f"{name} lower bound exceeds upper bound", config_key=f"sanity.{name}")


@dataclass(frozen=True)
class EncoderConfig:
    """Encoder configuration."""
    indent: Optional[int] = None
    ensure_ascii: bool = False


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    json: bool = False


@dataclass(frozen=True)
class CodecConfig:
    """Complete codec configuration."""
    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    sanity: SanityConfig = field(default_factory=SanityConfig)
    encoder: EncoderConfig = field(default_factory=EncoderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigManager:
    """
    Configuration manager with validation and environment variable support.

    Features:
    - YAML configuration loading, merged over built-in defaults
    - JSON schema validation
    - Environment variable overrides
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None, environ: Optional[Dict[str, str]] = None):
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")
        self.config_path = Path(config_path) if config_path is not None else None
        self.environ = os.environ if environ is None else environ

        self._schema = self._load_schema()
        self._config = self._load_and_validate_config()

        if self.config_path is not None:
            self.logger.debug(f"Configuration loaded from {self.config_path}")

    def _load_schema(self) -> Dict[str, Any]:
        """Load JSON schema for validation."""
        try:
            return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Failed to load schema: {str(e)}")

    def _load_and_validate_config(self) -> Dict[str, Any]:
        """Load defaults, overlay the YAML file and environment, then validate."""
        config_data = deepcopy(DEFAULTS)

        if self.config_path is not None:
            file_data = self._read_yaml()
            self._validate_config(file_data)
            config_data = self._merge(config_data, file_data)

        config_data = self._apply_env_overrides(config_data)
        self._validate_config(config_data)
        return config_data

    def _read_yaml(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML configuration: {str(e)}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration root must be a mapping")
        return data

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        merged = deepcopy(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = self._merge(merged[key], value)
            else:
                merged[key] = deepcopy(value)
        return merged

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        config_copy = deepcopy(config)

        for env_var, config_path in ENV_OVERRIDES.items():
            env_value = self.environ.get(env_var)
            if env_value is not None:
                self._set_nested_value(config_copy, config_path, self._convert_env_value(env_value, config_path))

        return config_copy

    def _convert_env_value(self, value: str, config_path: list) -> Any:
        """Convert environment variable string to appropriate type."""
        if value.lower() in ("true", "false"):
            return value.lower() == "true"
        if config_path[-1] == "level":
            return value.upper()
        return value.lower()

    def _set_nested_value(self, config: Dict[str, Any], path: list, value: Any):
        """Set nested dictionary value using path list."""
        current = config
        for key in path[:-1]:
            current = current.setdefault(key, {})
        current[path[-1]] = value

    def _validate_config(self, config: Dict[str, Any]):
        """Validate configuration against JSON schema."""
        try:
            jsonschema.validate(config, self._schema)
        except jsonschema.ValidationError as e:
            location = ".".join(str(part) for part in e.absolute_path) or None
            raise ConfigurationError(f"Configuration validation failed: {e.message}", config_key=location)
        except jsonschema.SchemaError as e:
            raise ConfigurationError(f"Invalid schema: {e.message}")

    def get_config(self) -> Dict[str, Any]:
        """Get complete configuration as a dictionary."""
        return deepcopy(self._config)

    def get_decoder_config(self) -> DecoderConfig:
        return DecoderConfig(**self._config["decoder"])

    def get_sanity_config(self) -> SanityConfig:
        sanity = dict(self._config["sanity"])
        sanity["ordering_policy"] = OrderingPolicy(sanity["ordering_policy"])
        sanity["call_delta_range"] = tuple(sanity["call_delta_range"])
        sanity["put_delta_range"] = tuple(sanity["put_delta_range"])
        return SanityConfig(**sanity)

    def get_encoder_config(self) -> EncoderConfig:
        return EncoderConfig(**self._config["encoder"])

    def get_logging_config(self) -> LoggingConfig:
        return LoggingConfig(**self._config["logging"])

    def get_codec_config(self) -> CodecConfig:
        """Get the complete typed configuration."""
        return CodecConfig(
            decoder=self.get_decoder_config(),
            sanity=self.get_sanity_config(),
            encoder=self.get_encoder_config(),
            logging=self.get_logging_config(),
        )

    def get_value(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value by dot-separated path."""
        current = self._config
        try:
            for key in key_path.split("."):
                current = current[key]
            return current
        except (KeyError, TypeError):
            return default

    def __repr__(self) -> str:
        return f"ConfigManager(config_path={self.config_path})"


def load_config(config_path: Optional[Union[str, Path]] = None) -> CodecConfig:
    """Load typed configuration from ``config_path`` (defaults when None)."""
    return ConfigManager(config_path).get_codec_config()
