"""
Validator configuration management

Provides the configuration dataclass used to build validators, along with
loaders for dictionaries, JSON documents, files and environment variables.
"""

import codecs
import json
import os
import re
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..exceptions import ConfigurationError
from ..types import DEFAULT_ENCODING, DEFAULT_HOST_PATTERN

ENV_PREFIX = "SNS_VALIDATOR_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ValidatorConfig:
    """Configuration for SNS message validation."""
    host_pattern: str = DEFAULT_HOST_PATTERN
    encoding: str = DEFAULT_ENCODING
    timeout: Optional[float] = 10.0
    verify_ssl: bool = True
    user_agent: str = "SNS-Message-Validator/1.0.0"

    def __post_init__(self):
        """Validate configuration values."""
        if not self.host_pattern:
            raise ConfigurationError("Host pattern cannot be empty")

        try:
            re.compile(self.host_pattern)
        except re.error as e:
            raise ConfigurationError(f"Invalid host pattern {self.host_pattern!r}: {e}")

        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ConfigurationError(f"Unknown encoding: {self.encoding}")

        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("Timeout must be positive")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ValidatorConfig':
        """
        Build a configuration from a mapping.

        Args:
            data: Mapping of field names to values; unknown keys are rejected

        Returns:
            ValidatorConfig: Validated configuration

        Raises:
            ConfigurationError: If keys are unknown or values are invalid
        """
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                details={'unknown_keys': unknown}
            )
        return cls(**dict(data))

    @classmethod
    def from_json(cls, json_string: str) -> 'ValidatorConfig':
        """Load configuration from a JSON object string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse configuration JSON: {e}")
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'ValidatorConfig':
        """Load configuration from a JSON file"""
        try:
            with open(Path(file_path), 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}")
        return cls.from_json(json_string)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ValidatorConfig':
        """
        Load configuration from SNS_VALIDATOR_* environment variables.

        Recognised variables are HOST_PATTERN, ENCODING, TIMEOUT and
        VERIFY_SSL. Unset variables keep their defaults.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Returns:
            ValidatorConfig: Validated configuration
        """
        env = os.environ if environ is None else environ
        data: Dict[str, Any] = {}

        if f"{ENV_PREFIX}HOST_PATTERN" in env:
            data['host_pattern'] = env[f"{ENV_PREFIX}HOST_PATTERN"]
        if f"{ENV_PREFIX}ENCODING" in env:
            data['encoding'] = env[f"{ENV_PREFIX}ENCODING"]
        if f"{ENV_PREFIX}TIMEOUT" in env:
            data['timeout'] = _parse_timeout(env[f"{ENV_PREFIX}TIMEOUT"])
        if f"{ENV_PREFIX}VERIFY_SSL" in env:
            data['verify_ssl'] = _parse_bool(env[f"{ENV_PREFIX}VERIFY_SSL"])

        return cls(**data)


def _parse_timeout(value: str) -> Optional[float]:
    if value.strip().lower() in ("", "none"):
        return None
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"Invalid timeout value: {value!r}")


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean value: {value!r}")


def load_default_config() -> ValidatorConfig:
    """Load configuration from the process environment"""
    return ValidatorConfig.from_env()
