"""
Numeric guards shared by the indicator and forecasting modules

Every division by a quantity that can legitimately be zero (mean, stddev,
previous price, regression denominator, seasonal factor) goes through
safe_divide so degenerate series yield 0/defaults instead of NaN or inf.
"""

import math
import statistics
from typing import Sequence


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning `default` when the denominator is zero or not finite"""
    if denominator == 0 or not math.isfinite(denominator):
        return default
    return numerator / denominator


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0 for an empty sequence"""
    if not values:
        return 0.0
    return sum(values) / len(values)


def sample_std(values: Sequence[float]) -> float:
    """Sample standard deviation (n - 1), 0 for fewer than 2 values"""
    if len(values) < 2:
        return 0.0
    return statistics.stdev(values)


def population_variance(values: Sequence[float]) -> float:
    """Population variance (n), 0 for fewer than 2 values"""
    if len(values) < 2:
        return 0.0
    return statistics.pvariance(values)


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation (n), 0 for fewer than 2 values"""
    return math.sqrt(population_variance(values))


def coefficient_of_variation(values: Sequence[float], sample: bool = True) -> float:
    """Standard deviation relative to the mean, as a plain ratio"""
    std = sample_std(values) if sample else population_std(values)
    return safe_divide(std, mean(values))


def clamp(value: float, lower: float, upper: float) -> float:
    """Bound value to [lower, upper]"""
    return max(lower, min(upper, value))
