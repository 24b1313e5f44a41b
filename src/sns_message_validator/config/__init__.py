"""
Configuration management for the SNS message validator
"""

from .validator_config import (
    ENV_PREFIX,
    ValidatorConfig,
    load_default_config,
)

__all__ = [
    'ENV_PREFIX',
    'ValidatorConfig',
    'load_default_config',
]
