"""
Moving averages for price prediction

SMA gives equal weight to every period in the window, EMA gives more
weight to recent data.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from pricecast.core.enums import (
    DEFAULT_EMA_LONG,
    DEFAULT_EMA_SHORT,
    DEFAULT_MA_PERIODS,
    TrendDirection,
)
from pricecast.core.models import DataPoint, MovingAverageResult, series_values
from .safe_math import mean


def calculate_sma(values: Sequence[float], period: int) -> float:
    """Simple Moving Average over the last min(period, len) values"""
    if not values:
        return 0.0
    return mean(values[-period:])


def calculate_ema(values: Sequence[float], period: int) -> float:
    """
    Exponential Moving Average

    EMA = price * k + previous EMA * (1 - k), k = 2 / (period + 1),
    seeded with the SMA of the first period.
    """
    if not values:
        return 0.0
    if len(values) == 1:
        return values[0]

    multiplier = 2 / (period + 1)
    seed_length = min(period, len(values))
    ema_value = mean(values[:seed_length])

    for price in values[seed_length:]:
        ema_value = (price * multiplier) + (ema_value * (1 - multiplier))

    return ema_value


def calculate_multiple_smas(
    values: Sequence[float],
    periods: Optional[List[int]] = None
) -> Dict[int, float]:
    """SMA for several periods at once"""
    return {period: calculate_sma(values, period) for period in periods or DEFAULT_MA_PERIODS}


def calculate_multiple_emas(
    values: Sequence[float],
    periods: Optional[List[int]] = None
) -> Dict[int, float]:
    """EMA for several periods at once"""
    return {period: calculate_ema(values, period) for period in periods or DEFAULT_MA_PERIODS}


def determine_trend(
    short_ma: float,
    long_ma: float,
    threshold: float = 0.02
) -> Tuple[TrendDirection, float]:
    """
    Trend from a short/long moving average pair

    Returns (trend, strength) where strength is 0-100. Averages within
    `threshold` of each other are STABLE.
    """
    if long_ma == 0:
        return TrendDirection.STABLE, 0.0

    diff = (short_ma - long_ma) / long_ma

    if abs(diff) < threshold:
        return TrendDirection.STABLE, abs(diff) * 100 / threshold

    trend = TrendDirection.UP if diff > 0 else TrendDirection.DOWN
    return trend, min(abs(diff) * 100, 100.0)


def project_price_with_ema(
    values: Sequence[float],
    days_ahead: int,
    short_period: int = DEFAULT_EMA_SHORT,
    long_period: int = DEFAULT_EMA_LONG
) -> float:
    """Project a future price from the EMA crossover momentum"""
    if len(values) < 2:
        return values[-1] if values else 0.0

    current_price = values[-1]
    short_ema = calculate_ema(values, short_period)
    long_ema = calculate_ema(values, long_period)

    # Daily momentum of the crossover
    momentum = (short_ema - long_ema) / long_period
    projected = current_price + momentum * days_ahead

    return max(projected, current_price * 0.5)


def analyze_moving_averages(series: Sequence[DataPoint]) -> MovingAverageResult:
    """7-period SMA/EMA with the EMA7 vs EMA21 trend"""
    values = series_values(series)

    ema_short = calculate_ema(values, DEFAULT_EMA_SHORT)
    ema_long = calculate_ema(values, DEFAULT_EMA_LONG)
    trend, strength = determine_trend(ema_short, ema_long)

    return MovingAverageResult(
        sma=calculate_sma(values, DEFAULT_EMA_SHORT),
        ema=ema_short,
        trend=trend,
        trend_strength=strength,
    )
