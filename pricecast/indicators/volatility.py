"""
Volatility analysis for price prediction

Measures price variability to assess prediction confidence and
identify potential risk levels.
"""

import logging
import math
from typing import List, Sequence

from pricecast.core.enums import (
    CV_HIGH_THRESHOLD,
    CV_LOW_THRESHOLD,
    DEFAULT_ATR_PERIOD,
    VOLATILITY_CONFIDENCE_MULTIPLIERS,
    Z_SCORE_90,
    Z_SCORE_95,
    VolatilityLevel,
)
from pricecast.core.models import (
    DataPoint,
    PredictionBounds,
    PriceRange,
    VolatilityResult,
    series_values,
)
from .safe_math import mean, safe_divide, sample_std

logger = logging.getLogger(__name__)


def calculate_standard_deviation(values: Sequence[float]) -> float:
    """Sample standard deviation"""
    return sample_std(values)


def calculate_coefficient_of_variation(values: Sequence[float]) -> float:
    """CV = (StdDev / Mean) * 100, comparable across price levels"""
    if not values:
        return 0.0
    return safe_divide(calculate_standard_deviation(values), mean(values)) * 100


def calculate_daily_returns(values: Sequence[float]) -> List[float]:
    """Daily percentage changes, skipping days whose previous price is zero"""
    returns = []
    for i in range(1, len(values)):
        if values[i - 1] != 0:
            returns.append((values[i] - values[i - 1]) / values[i - 1] * 100)
    return returns


def calculate_returns_volatility(values: Sequence[float]) -> float:
    """Standard deviation of daily returns"""
    returns = calculate_daily_returns(values)
    if not returns:
        return 0.0
    return calculate_standard_deviation(returns)


def calculate_atr(values: Sequence[float], period: int = DEFAULT_ATR_PERIOD) -> float:
    """
    Average True Range approximation for close-only daily data

    Without high/low prices the true range of a day is the absolute
    change from the previous close.
    """
    if len(values) < 2:
        return 0.0

    true_ranges = [abs(values[i] - values[i - 1]) for i in range(1, len(values))]
    return mean(true_ranges[-period:])


def determine_volatility_level(cv: float) -> VolatilityLevel:
    """Classify volatility from the coefficient of variation (%)"""
    # Agricultural commodities typically have CV between 2 and 15%
    if cv < CV_LOW_THRESHOLD:
        return VolatilityLevel.LOW
    if cv < CV_HIGH_THRESHOLD:
        return VolatilityLevel.MEDIUM
    return VolatilityLevel.HIGH


def calculate_price_range(values: Sequence[float]) -> PriceRange:
    """Min/max/range statistics of the whole window"""
    if not values:
        return PriceRange()

    low = min(values)
    high = max(values)
    spread = high - low
    return PriceRange(
        min=low,
        max=high,
        range=spread,
        range_percent=safe_divide(spread, mean(values)) * 100,
    )


def calculate_confidence_adjustment(level: VolatilityLevel) -> float:
    """Confidence multiplier: higher volatility means lower confidence"""
    return VOLATILITY_CONFIDENCE_MULTIPLIERS[level]


def analyze_volatility(series: Sequence[DataPoint]) -> VolatilityResult:
    """Full volatility analysis of a (possibly unsorted) series"""
    values = series_values(series)

    cv = calculate_coefficient_of_variation(values)
    result = VolatilityResult(
        standard_deviation=calculate_standard_deviation(values),
        coefficient_of_variation=cv,
        average_true_range=calculate_atr(values),
        volatility_level=determine_volatility_level(cv),
        price_range=calculate_price_range(values),
    )

    logger.debug(
        f"Volatility: std={result.standard_deviation:.4f} cv={cv:.2f}% "
        f"level={result.volatility_level.value}"
    )
    return result


def calculate_prediction_bounds(
    predicted_price: float,
    volatility: VolatilityResult,
    days_ahead: int,
    confidence_level: float = 0.95
) -> PredictionBounds:
    """
    Confidence interval around a predicted price

    Volatility grows with the square root of time, so the margin is
    z * stddev * sqrt(days_ahead). The lower bound never goes below zero.
    """
    z_score = Z_SCORE_95 if confidence_level == 0.95 else Z_SCORE_90
    adjusted_std = volatility.standard_deviation * math.sqrt(max(days_ahead, 0))
    margin = z_score * adjusted_std

    return PredictionBounds(
        lower=max(0.0, predicted_price - margin),
        upper=predicted_price + margin,
    )
