"""
Holt-Winters exponential smoothing (triple exponential smoothing)

Multiplicative model with:
- Level (alpha)
- Trend (beta)
- Seasonality (gamma), weekly cycle by default for daily commodity prices
"""

import logging
import math
from typing import List, Optional, Sequence

from pricecast.core.models import (
    DataPoint,
    HoltWintersParams,
    HoltWintersResult,
    series_values,
)
from pricecast.indicators.safe_math import clamp, mean, safe_divide

logger = logging.getLogger(__name__)

MIN_FORECAST_POINTS = 3
MIN_OPTIMIZATION_POINTS = 14

# Parameter grid for optimize_holt_winters
ALPHA_RANGE = [0.1, 0.2, 0.3, 0.4, 0.5]
BETA_RANGE = [0.05, 0.1, 0.15, 0.2]
GAMMA_RANGE = [0.1, 0.2, 0.3]


def initialize_seasonal_factors(values: Sequence[float], period: int) -> List[float]:
    """
    Seasonal indices via the ratio-to-period-average method

    Factors are normalised to sum to `period`; with fewer than two full
    seasons every factor is neutral (1).
    """
    if len(values) < period * 2:
        return [1.0] * period

    n_periods = len(values) // period
    period_averages = [
        mean(values[j * period:(j + 1) * period]) for j in range(n_periods)
    ]

    seasonal = []
    for i in range(period):
        ratios = [
            values[j * period + i] / period_averages[j]
            for j in range(n_periods)
            if period_averages[j] > 0
        ]
        seasonal.append(mean(ratios) if ratios else 1.0)

    seasonal_sum = sum(seasonal)
    if seasonal_sum == 0:
        return [1.0] * period
    return [s / seasonal_sum * period for s in seasonal]


def fit_holt_winters(
    values: Sequence[float],
    params: Optional[HoltWintersParams] = None
) -> HoltWintersResult:
    """Fit the model in a single pass over the data"""
    params = params or HoltWintersParams()
    alpha, beta, gamma = params.alpha, params.beta, params.gamma
    period = params.seasonal_period
    n = len(values)

    if n < period:
        average = mean(values)
        return HoltWintersResult(
            level=average,
            trend=0.0,
            seasonal=[1.0] * period,
            fitted=[average] * n,
            params=params,
            mse=0.0,
        )

    level = mean(values[:period])

    trend = 0.0
    if n >= period * 2:
        trend = (mean(values[period:period * 2]) - level) / period

    seasonal = initialize_seasonal_factors(values, period)

    fitted = []
    sse = 0.0

    for i, value in enumerate(values):
        season_idx = i % period
        seasonal_factor = seasonal[season_idx]

        # One-step forecast
        forecast = (level + trend) * seasonal_factor
        fitted.append(forecast)

        if i >= period:
            sse += (value - forecast) ** 2

        previous_level = level
        level = alpha * safe_divide(value, seasonal_factor, value) + (1 - alpha) * (level + trend)
        trend = beta * (level - previous_level) + (1 - beta) * trend
        seasonal[season_idx] = (
            gamma * safe_divide(value, level, seasonal_factor) + (1 - gamma) * seasonal_factor
        )

    mse = sse / (n - period) if n > period else 0.0

    return HoltWintersResult(
        level=level,
        trend=trend,
        seasonal=list(seasonal),
        fitted=fitted,
        params=params,
        mse=mse,
    )


def predict_with_holt_winters(
    series: Sequence[DataPoint],
    days_ahead: int,
    params: Optional[HoltWintersParams] = None
) -> List[float]:
    """Multi-step forecast, each step bounded to [-50%, +50%] of the current price"""
    params = params or HoltWintersParams()
    values = series_values(series)

    if len(values) < MIN_FORECAST_POINTS:
        last_value = values[-1] if values else 0.0
        return [last_value] * days_ahead

    result = fit_holt_winters(values, params)
    current_price = values[-1]
    last_index = len(values) - 1

    predictions = []
    for h in range(1, days_ahead + 1):
        seasonal_factor = result.seasonal[(last_index + h) % params.seasonal_period]
        forecast = (result.level + result.trend * h) * seasonal_factor
        predictions.append(clamp(forecast, current_price * 0.5, current_price * 1.5))

    return predictions


def predict_holt_winters(
    series: Sequence[DataPoint],
    days_ahead: int,
    params: Optional[HoltWintersParams] = None
) -> float:
    """Single-point Holt-Winters prediction for a specific horizon"""
    predictions = predict_with_holt_winters(series, days_ahead, params)
    if predictions and predictions[-1]:
        return predictions[-1]

    values = series_values(series)
    return values[-1] if values else 0.0


def optimize_holt_winters(values: Sequence[float], seasonal_period: int = 7) -> HoltWintersParams:
    """Grid search for the smoothing constants with the lowest in-sample MSE"""
    best_mse = math.inf
    best_params = HoltWintersParams(seasonal_period=seasonal_period)

    for alpha in ALPHA_RANGE:
        for beta in BETA_RANGE:
            for gamma in GAMMA_RANGE:
                params = HoltWintersParams(
                    alpha=alpha, beta=beta, gamma=gamma, seasonal_period=seasonal_period
                )
                result = fit_holt_winters(values, params)

                if math.isfinite(result.mse) and result.mse < best_mse:
                    best_mse = result.mse
                    best_params = params

    logger.debug(f"Holt-Winters optimum {best_params.to_dict()} (mse={best_mse:.4f})")
    return best_params


def auto_holt_winters(
    series: Sequence[DataPoint],
    days_ahead: int,
    seasonal_period: int = 7
) -> List[float]:
    """Holt-Winters forecast with grid-searched parameters (defaults below 14 points)"""
    values = series_values(series)

    if len(values) < MIN_OPTIMIZATION_POINTS:
        params = HoltWintersParams(seasonal_period=seasonal_period)
    else:
        params = optimize_holt_winters(values, seasonal_period)

    return predict_with_holt_winters(series, days_ahead, params)
