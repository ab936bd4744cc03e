"""
Trend analysis using linear regression

Fits a least-squares line through the price window (day index as x)
to identify trends and project future prices.
"""

import logging
from typing import Dict, Sequence, Tuple

import numpy as np

from pricecast.core.enums import (
    DEFAULT_ROC_PERIOD,
    LONG_TERM_WINDOW,
    MEDIUM_TERM_WINDOW,
    SHORT_TERM_WINDOW,
    TrendDirection,
)
from pricecast.core.models import (
    DataPoint,
    LinearRegressionResult,
    TrendAnalysis,
    series_values,
)
from .safe_math import clamp, safe_divide

logger = logging.getLogger(__name__)

# Weight of each window's vote in the overall trend
WINDOW_WEIGHTS = {"short": 0.5, "medium": 0.3, "long": 0.2}


def linear_regression(values: Sequence[float]) -> Tuple[float, float, float]:
    """Least squares fit y = slope * x + intercept, returns (slope, intercept, r_squared)"""
    n = len(values)
    if n < 2:
        return 0.0, (values[0] if n else 0.0), 0.0

    y = np.asarray(values, dtype=float)
    x = np.arange(n, dtype=float)
    x_mean = x.mean()
    y_mean = y.mean()

    numerator = float(np.sum((x - x_mean) * (y - y_mean)))
    denominator = float(np.sum((x - x_mean) ** 2))

    slope = safe_divide(numerator, denominator)
    intercept = float(y_mean - slope * x_mean)

    predicted = slope * x + intercept
    ss_res = float(np.sum((y - predicted) ** 2))
    ss_tot = float(np.sum((y - y_mean) ** 2))
    r_squared = 1 - ss_res / ss_tot if ss_tot != 0 else 0.0

    return slope, intercept, clamp(r_squared, 0.0, 1.0)


def project_price(values: Sequence[float], days_ahead: int) -> float:
    """Extrapolate the regression line, bounded to [-50%, +100%] of the current price"""
    if not values:
        return 0.0

    slope, intercept, _ = linear_regression(values)
    projected = slope * (len(values) - 1 + days_ahead) + intercept

    current_price = values[-1]
    return clamp(projected, current_price * 0.5, current_price * 2.0)


def determine_trend_from_slope(
    slope: float,
    current_price: float,
    threshold: float = 0.001
) -> TrendDirection:
    """Trend direction from the slope relative to the price (0.1%/day by default)"""
    relative_slope = safe_divide(slope, current_price)

    if abs(relative_slope) < threshold:
        return TrendDirection.STABLE

    return TrendDirection.UP if slope > 0 else TrendDirection.DOWN


def analyze_period(values: Sequence[float]) -> LinearRegressionResult:
    """Regression trend of a single window"""
    if not values:
        return LinearRegressionResult()

    slope, intercept, r_squared = linear_regression(values)

    return LinearRegressionResult(
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
        trend=determine_trend_from_slope(slope, values[-1]),
        predicted_price=slope * (len(values) - 1) + intercept,
    )


def analyze_trends(series: Sequence[DataPoint]) -> TrendAnalysis:
    """Trend analysis across the short, medium and long windows"""
    values = series_values(series)

    short_term = analyze_period(values[-SHORT_TERM_WINDOW:])
    medium_term = analyze_period(values[-MEDIUM_TERM_WINDOW:])
    long_term = analyze_period(values[-LONG_TERM_WINDOW:])

    votes = [
        (short_term.trend, short_term.r_squared * WINDOW_WEIGHTS["short"]),
        (medium_term.trend, medium_term.r_squared * WINDOW_WEIGHTS["medium"]),
        (long_term.trend, long_term.r_squared * WINDOW_WEIGHTS["long"]),
    ]

    scores: Dict[TrendDirection, float] = {direction: 0.0 for direction in TrendDirection}
    for direction, weight in votes:
        scores[direction] += weight

    # max() keeps the first of equal scores: UP, DOWN, STABLE
    if any(scores.values()):
        overall_trend = max(scores, key=lambda direction: scores[direction])
    else:
        overall_trend = TrendDirection.STABLE

    agreement = sum(1 for direction, _ in votes if direction == overall_trend) / len(votes)
    avg_r_squared = (short_term.r_squared + medium_term.r_squared + long_term.r_squared) / 3
    confidence = clamp(agreement * 50 + avg_r_squared * 50, 0.0, 100.0)

    logger.debug(
        f"Trends: short={short_term.trend.value} medium={medium_term.trend.value} "
        f"long={long_term.trend.value} -> {overall_trend.value} ({confidence:.1f})"
    )

    return TrendAnalysis(
        short_term=short_term,
        medium_term=medium_term,
        long_term=long_term,
        overall_trend=overall_trend,
        confidence=confidence,
    )


def calculate_roc(values: Sequence[float], period: int = DEFAULT_ROC_PERIOD) -> float:
    """Rate of change (%) between the latest value and the one `period` points back"""
    if period <= 0 or len(values) < period:
        return 0.0

    current = values[-1]
    previous = values[-period]
    return safe_divide(current - previous, previous) * 100
