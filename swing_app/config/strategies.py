"""Strategy profiles and the registry that serves them."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional

import structlog

from ..errors import ConfigInvalidError, UnknownStrategyError
from .validation import ConfigValidator

logger = structlog.get_logger(__name__)

# Scorer sources; every profile must weight each of them.
WEIGHT_KEYS = (
    "macd",
    "rsi",
    "stochastic",
    "bollinger",
    "bollinger_squeeze",
    "ma_alignment",
    "long_term_trend",
    "adx",
    "adx_weak",
    "vwap",
    "pattern",
    "trend",
    "regression",
    "divergence",
)

PROFILE_FIELDS = (
    "id",
    "name",
    "timeframe_label",
    "holding_period_label",
    "min_risk_reward",
    "stop_loss_percent",
    "target_percent",
    "min_confidence",
    "min_indicator_align",
    "max_volatility_percent",
    "indicator_weights",
)



def _check_profile(data: dict[str, Any]) -> None:
    errors = ConfigValidator.validate_strategy_profile(data, PROFILE_FIELDS, WEIGHT_KEYS)
    if errors:
        summary = "; ".join(f"{err.field}: {err.message} (got: {err.value})" for err in errors)
        raise ConfigInvalidError(
            f"Invalid strategy profile '{data.get('id', '?')}': {summary}",
            field=errors[0].field,
            value=errors[0].value,
        )


@dataclass(frozen=True)
class StrategyProfile:
    """Named parameter set that tunes scoring weights and gate thresholds."""
    id: str
    name: str
    timeframe_label: str
    holding_period_label: str
    min_risk_reward: float
    stop_loss_percent: float
    target_percent: float
    min_confidence: float
    min_indicator_align: int
    max_volatility_percent: float
    indicator_weights: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        weights = self.indicator_weights
        data = {name: getattr(self, name) for name in PROFILE_FIELDS}
        data["indicator_weights"] = dict(weights) if isinstance(weights, Mapping) else weights
        _check_profile(data)
        # Freeze the weight table so profiles stay immutable after construction
        object.__setattr__(self, "indicator_weights", MappingProxyType(data["indicator_weights"]))

    def weight(self, source: str) -> float:
        return self.indicator_weights[source]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StrategyProfile":
        """
        Build a profile from a plain mapping (YAML or per-call overrides).

        Raises:
            ConfigInvalidError: If fields are missing, unknown or out of range
        """
        _check_profile(dict(data))
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            timeframe_label=str(data["timeframe_label"]),
            holding_period_label=str(data["holding_period_label"]),
            min_risk_reward=float(data["min_risk_reward"]),
            stop_loss_percent=float(data["stop_loss_percent"]),
            target_percent=float(data["target_percent"]),
            min_confidence=float(data["min_confidence"]),
            min_indicator_align=int(data["min_indicator_align"]),
            max_volatility_percent=float(data["max_volatility_percent"]),
            indicator_weights={k: float(v) for k, v in data["indicator_weights"].items()},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "timeframe_label": self.timeframe_label,
            "holding_period_label": self.holding_period_label,
            "min_risk_reward": self.min_risk_reward,
            "stop_loss_percent": self.stop_loss_percent,
            "target_percent": self.target_percent,
            "min_confidence": self.min_confidence,
            "min_indicator_align": self.min_indicator_align,
            "max_volatility_percent": self.max_volatility_percent,
            "indicator_weights": dict(self.indicator_weights),
        }


SWING_WEIGHTS = {
    "macd": 15.0,
    "rsi": 12.0,
    "stochastic": 10.0,
    "bollinger": 10.0,
    "bollinger_squeeze": 0.0,
    "ma_alignment": 15.0,
    "long_term_trend": 8.0,
    "adx": 10.0,
    "adx_weak": 0.0,
    "vwap": 5.0,
    "pattern": 0.2,                                  # Multiplier on pattern confidence
    "trend": 12.0,
    "regression": 8.0,
    "divergence": 8.0,
}

DEFAULT_PROFILES: dict[str, dict[str, Any]] = {
    "intraday": {
        "id": "intraday",
        "name": "Intraday",
        "timeframe_label": "5m-1h",
        "holding_period_label": "Same day",
        "min_risk_reward": 1.5,
        "stop_loss_percent": 1.5,
        "target_percent": 2.5,
        "min_confidence": 75,
        "min_indicator_align": 3,
        "max_volatility_percent": 3.0,
        "indicator_weights": {
            **SWING_WEIGHTS,
            "macd": 12.0,
            "rsi": 15.0,
            "stochastic": 12.0,
            "ma_alignment": 10.0,
            "long_term_trend": 4.0,
            "adx": 8.0,
            "vwap": 12.0,
            "pattern": 0.18,
            "trend": 8.0,
            "regression": 6.0,
        },
    },
    "swing": {
        "id": "swing",
        "name": "Swing",
        "timeframe_label": "4h-1d",
        "holding_period_label": "2-10 days",
        "min_risk_reward": 2.0,
        "stop_loss_percent": 3.0,
        "target_percent": 6.0,
        "min_confidence": 70,
        "min_indicator_align": 3,
        "max_volatility_percent": 4.0,
        "indicator_weights": dict(SWING_WEIGHTS),
    },
    "short_term": {
        "id": "short_term",
        "name": "Short Term",
        "timeframe_label": "1d",
        "holding_period_label": "2-6 weeks",
        "min_risk_reward": 2.5,
        "stop_loss_percent": 4.0,
        "target_percent": 10.0,
        "min_confidence": 65,
        "min_indicator_align": 3,
        "max_volatility_percent": 5.0,
        "indicator_weights": {
            **SWING_WEIGHTS,
            "rsi": 10.0,
            "stochastic": 8.0,
            "bollinger": 8.0,
            "long_term_trend": 10.0,
            "adx": 12.0,
            "vwap": 4.0,
            "trend": 14.0,
            "regression": 10.0,
            "divergence": 6.0,
        },
    },
    "long_term": {
        "id": "long_term",
        "name": "Long Term",
        "timeframe_label": "1d-1w",
        "holding_period_label": "3-12 months",
        "min_risk_reward": 3.0,
        "stop_loss_percent": 15.0,
        "target_percent": 45.0,
        "min_confidence": 60,
        "min_indicator_align": 2,
        "max_volatility_percent": 6.0,
        "indicator_weights": {
            **SWING_WEIGHTS,
            "macd": 12.0,
            "rsi": 8.0,
            "stochastic": 5.0,
            "bollinger": 6.0,
            "long_term_trend": 15.0,
            "adx": 12.0,
            "vwap": 2.0,
            "pattern": 0.15,
            "trend": 15.0,
            "regression": 12.0,
            "divergence": 5.0,
        },
    },
}


@dataclass(frozen=True)
class ProfileLookup:
    """Result of resolving a strategy id, flagging fallback substitution."""
    profile: StrategyProfile
    requested_id: str
    substituted: bool = False


class StrategyRegistry:
    """Immutable id -> profile lookup shared by the scorer, gate and setup builder."""

    def __init__(self, profiles: Iterable[StrategyProfile], fallback_id: Optional[str] = None):
        table: dict[str, StrategyProfile] = {}
        for profile in profiles:
            if profile.id in table:
                raise ConfigInvalidError(f"Duplicate strategy id '{profile.id}'", field="id", value=profile.id)
            table[profile.id] = profile

        if not table:
            raise ConfigInvalidError("Strategy registry requires at least one profile", field="profiles", value=[])

        if fallback_id is not None and fallback_id not in table:
            raise UnknownStrategyError(fallback_id, available=sorted(table))

        self._profiles = MappingProxyType(table)
        self.fallback_id = fallback_id

    @classmethod
    def with_defaults(cls, fallback_id: Optional[str] = None) -> "StrategyRegistry":
        return cls((StrategyProfile.from_dict(data) for data in DEFAULT_PROFILES.values()), fallback_id=fallback_id)

    def get(self, strategy_id: str) -> StrategyProfile:
        """Strict lookup."""
        try:
            return self._profiles[strategy_id]
        except KeyError:
            raise UnknownStrategyError(strategy_id, available=self.ids()) from None

    def resolve(self, strategy_id: str) -> ProfileLookup:
        """
        Lookup that may substitute the configured fallback profile.

        Substitution is logged and flagged on the returned lookup; without a
        fallback an unknown id raises UnknownStrategyError.
        """
        if strategy_id in self._profiles:
            return ProfileLookup(profile=self._profiles[strategy_id], requested_id=strategy_id)

        if self.fallback_id is None:
            raise UnknownStrategyError(strategy_id, available=self.ids())

        logger.warning(
            "Unknown strategy requested, substituting fallback profile",
            requested_id=strategy_id,
            fallback_id=self.fallback_id,
        )
        return ProfileLookup(
            profile=self._profiles[self.fallback_id],
            requested_id=strategy_id,
            substituted=True,
        )

    def ids(self) -> list[str]:
        return list(self._profiles)

    def __contains__(self, strategy_id: object) -> bool:
        return strategy_id in self._profiles

    def __iter__(self) -> Iterator[StrategyProfile]:
        return iter(self._profiles.values())

    def __len__(self) -> int:
        return len(self._profiles)
