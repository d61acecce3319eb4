"""Data models for indicator calculations"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class MACDResult:
    """MACD line, signal line and momentum labels"""
    line: float
    signal: float
    histogram: float
    trend: str = "neutral"               # bullish, bearish, weakening_bullish, weakening_bearish, neutral
    crossover: Optional[str] = None      # 'bullish' or 'bearish' when the line crossed the signal
    histogram_growing: bool = False
    momentum: str = "flat"               # accelerating, decelerating, flat


@dataclass(frozen=True)
class BollingerResult:
    """Bollinger bands with position and compression flags"""
    upper: float
    middle: float
    lower: float
    width: float
    position: float                      # 0 at lower band, 1 at upper band
    squeeze: bool = False
    signal: str = "neutral"
    volatility: str = "normal"           # high, normal, low


@dataclass(frozen=True)
class ATRResult:
    value: float
    percent_of_price: float
    volatility_level: str = "low"        # high, medium, low


@dataclass(frozen=True)
class StochasticResult:
    k: float
    d: float
    zone: str = "neutral"                # overbought, oversold, neutral
    signal: str = "neutral"


@dataclass(frozen=True)
class WilliamsResult:
    value: float
    zone: str = "neutral"


@dataclass(frozen=True)
class ADXResult:
    """Directional movement summary (single-period DX approximation)"""
    value: float
    di_plus: float
    di_minus: float
    strength: str = "weak"               # weak, moderate, strong, very_strong
    direction: str = "neutral"


@dataclass(frozen=True)
class VWAPResult:
    value: float
    deviation_percent: float
    signal: str = "neutral"              # overbought, oversold, bullish, bearish, neutral


@dataclass(frozen=True)
class FibonacciLevels:
    high: float
    low: float
    retracements: dict[str, float] = field(default_factory=dict)
    extensions: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class PivotPoints:
    pivot: float
    r1: float
    r2: float
    r3: float
    s1: float
    s2: float
    s3: float


@dataclass(frozen=True)
class SupportResistance:
    """Price-cluster levels around the current price"""
    supports: tuple[float, ...]
    resistances: tuple[float, ...]
    nearest_support: float
    nearest_resistance: float


@dataclass(frozen=True)
class TrendAnalysis:
    direction: str
    strength: float
    bullish_points: int
    bearish_points: int
    sma5: float
    sma20: float
    sma50: float
    momentum5: float
    momentum20: float


@dataclass(frozen=True)
class MovingAverageSignal:
    sma_short: float
    sma_medium: float
    golden_cross: bool = False
    death_cross: bool = False
    price_cross: Optional[str] = None      # above, below
    signal: str = "neutral"


@dataclass(frozen=True)
class VolumeAnalysis:
    volume_ratio: float
    recent_volume_ratio: float
    price_change_percent: float
    vpt_trend: str = "flat"
    signal: str = "neutral"


@dataclass(frozen=True)
class DivergenceResult:
    kind: Optional[str] = None           # 'bullish' or 'bearish'
    description: str = "No divergence"


@dataclass(frozen=True)
class MomentumResult:
    roc_short: float
    roc_medium: float
    roc_long: float
    acceleration: float
    score: float
    label: str = "neutral"


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Complete indicator snapshot for one bar window"""
    bar_count: int
    current_price: float
    sma20: float
    sma50: float
    sma200: Optional[float]
    ema12: float
    ema26: float
    rsi: float
    macd: MACDResult
    bollinger: BollingerResult
    atr: ATRResult
    stochastic: StochasticResult
    williams_r: WilliamsResult
    adx: ADXResult
    vwap: VWAPResult
    fibonacci: FibonacciLevels
    pivots: PivotPoints
    divergence: DivergenceResult
    momentum: MomentumResult

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
