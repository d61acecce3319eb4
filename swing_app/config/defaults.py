"""Default configuration parameters for the signal scoring system."""

from dataclasses import dataclass


@dataclass(frozen=True)
class IndicatorParams:
    """Indicator lookback periods and thresholds."""
    rsi_period: int = 14
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9
    bollinger_period: int = 20
    bollinger_std: float = 2.0
    squeeze_ratio: float = 0.7                       # Width vs average width
    atr_period: int = 14
    stochastic_k: int = 14
    stochastic_d: int = 3
    williams_period: int = 14
    adx_period: int = 14
    fib_lookback: int = 20
    sma_short: int = 20
    sma_medium: int = 50
    sma_long: int = 200
    volume_period: int = 20
    divergence_lookback: int = 10
    roc_period: int = 10


@dataclass(frozen=True)
class PatternParams:
    """Chart and candlestick pattern detection parameters."""
    chart_min_bars: int = 30
    candlestick_window: int = 10
    double_tolerance: float = 0.03                   # Max gap between twin extremes
    double_confirm_pct: float = 0.05                 # Move away from the twin extreme
    flag_min_pole_move: float = 0.05
    flag_max_range: float = 0.08
    triangle_lookback: int = 20
    triangle_band_pct: float = 0.02
    breakout_lookback: int = 25
    breakout_exclude_recent: int = 5
    breakout_margin: float = 0.02
    doji_threshold: float = 0.1
    sr_buckets: int = 20
    sr_top_levels: int = 6


@dataclass(frozen=True)
class RegressionParams:
    """Linear-regression projection parameters."""
    regression_length: int = 20
    prediction_bars: int = 10
    confidence_level: float = 0.68
    atr_average_window: int = 50
    high_vol_threshold: float = 1.2                  # ATR ratio above which the regime is high
    low_vol_threshold: float = 0.8
    high_vol_factor: float = 1.2                     # Projected move multiplier in a high regime
    low_vol_factor: float = 0.8


@dataclass(frozen=True)
class ScoringParams:
    """Composite score parameters."""
    neutral_margin: float = 10.0                     # Required accumulator gap
    min_score: int = 30
    max_score: int = 95
    strength_cap: float = 50.0                       # Dominant points for full strength


@dataclass(frozen=True)
class TradeSetupParams:
    """Entry, stop and target derivation parameters."""
    atr_multiplier: float = 1.5
    structure_buffer_atr: float = 0.5
    risk_reward_minimum: float = 1.5
    default_capital: float = 100000.0
    max_risk_percent: float = 2.0


@dataclass(frozen=True)
class AnalysisParams:
    """Top-level analysis guards."""
    min_bars: int = 30


@dataclass(frozen=True)
class ScanParams:
    """Universe scanning parameters."""
    batch_size: int = 5
    batch_delay_seconds: float = 0.2


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    indicators: IndicatorParams
    patterns: PatternParams
    regression: RegressionParams
    scoring: ScoringParams
    trade_setup: TradeSetupParams
    analysis: AnalysisParams
    scan: ScanParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        indicators=IndicatorParams(),
        patterns=PatternParams(),
        regression=RegressionParams(),
        scoring=ScoringParams(),
        trade_setup=TradeSetupParams(),
        analysis=AnalysisParams(),
        scan=ScanParams(),
    )
