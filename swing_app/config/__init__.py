"""Configuration: parameter defaults, strategy profiles, loading and validation."""

from .defaults import DefaultConfig, get_default_config
from .loader import ConfigLoader
from .strategies import DEFAULT_PROFILES, WEIGHT_KEYS, ProfileLookup, StrategyProfile, StrategyRegistry
from .validation import ConfigValidator, ValidationError

__all__ = [
    "DefaultConfig",
    "get_default_config",
    "ConfigLoader",
    "DEFAULT_PROFILES",
    "WEIGHT_KEYS",
    "ProfileLookup",
    "StrategyProfile",
    "StrategyRegistry",
    "ConfigValidator",
    "ValidationError",
]
