"""Configuration loader with 3-tier parameter precedence."""

import copy
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigInvalidError
from .defaults import (
    AnalysisParams,
    DefaultConfig,
    IndicatorParams,
    PatternParams,
    RegressionParams,
    ScanParams,
    ScoringParams,
    TradeSetupParams,
    get_default_config,
)
from .strategies import DEFAULT_PROFILES, StrategyProfile, StrategyRegistry
from .validation import ConfigValidator

STRATEGIES_FILE = "strategies.yaml"

_SECTION_TYPES = {
    "indicators": IndicatorParams,
    "patterns": PatternParams,
    "regression": RegressionParams,
    "scoring": ScoringParams,
    "trade_setup": TradeSetupParams,
    "analysis": AnalysisParams,
    "scan": ScanParams,
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load the optional strategies.yaml overrides file."""
        config_file = self.config_dir / STRATEGIES_FILE

        if not config_file.exists():
            return {}

        with open(config_file) as f:
            file_config = yaml.safe_load(f)

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigInvalidError(
                f"{config_file} must contain a mapping at the top level",
                field=STRATEGIES_FILE,
                value=type(file_config).__name__,
            )
        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge engine parameters with 3-tier precedence.

        Priority order:
        1. Per-call overrides (highest priority)
        2. ``parameters`` section of strategies.yaml
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        file_params = self.load_file_config().get("parameters") or {}
        config = self._deep_merge(config, file_params)

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def build_config(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """Merge, validate and materialize engine parameters."""
        merged = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(merged)
        if errors:
            summary = "; ".join(f"{err.field}: {err.message} (got: {err.value})" for err in errors)
            raise ConfigInvalidError(f"Invalid engine configuration: {summary}",
                                     field=errors[0].field, value=errors[0].value)

        sections = {}
        for section, params_type in _SECTION_TYPES.items():
            values = merged.get(section, {})
            known = {f.name for f in fields(params_type)}
            unknown = set(values) - known
            if unknown:
                raise ConfigInvalidError(
                    f"Unknown {section} parameters: {', '.join(sorted(unknown))}",
                    field=section,
                    value=sorted(unknown),
                )
            sections[section] = params_type(**values)

        return DefaultConfig(**sections)

    def merge_profiles(self, profile_overrides: Optional[dict[str, Any]] = None) -> dict[str, dict[str, Any]]:
        """
        Merge strategy profile definitions with the same 3-tier precedence.

        Overrides for an existing id are partial; a new id must be complete.
        """
        profiles = copy.deepcopy(DEFAULT_PROFILES)

        file_profiles = self.load_file_config().get("strategies") or {}
        profiles = self._deep_merge(profiles, file_profiles)

        if profile_overrides:
            profiles = self._deep_merge(profiles, profile_overrides)

        for profile_id, data in profiles.items():
            data.setdefault("id", profile_id)

        return profiles

    def load_registry(
        self,
        profile_overrides: Optional[dict[str, Any]] = None,
        fallback_id: Optional[str] = None,
    ) -> StrategyRegistry:
        """Build a validated StrategyRegistry from defaults, file and overrides."""
        profiles = self.merge_profiles(profile_overrides)

        if fallback_id is None:
            fallback_id = self.load_file_config().get("fallback_strategy")

        return StrategyRegistry(
            (StrategyProfile.from_dict(data) for data in profiles.values()),
            fallback_id=fallback_id,
        )

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
