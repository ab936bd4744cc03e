"""
Simplified ARIMA (Autoregressive Integrated Moving Average)

AR(p), I(d), MA(q) components for commodity price prediction.

Coefficients are not fitted by maximum likelihood: AR coefficients are
damped autocorrelations (a Yule-Walker approximation) rescaled for
stability, MA coefficients are damped autocorrelations of the AR residuals.
"""

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from pricecast.core.exceptions import ValidationError
from pricecast.core.models import ARIMAOrder, ARIMAResult, DataPoint, series_values
from pricecast.indicators.safe_math import clamp, population_variance

logger = logging.getLogger(__name__)

AR_DAMPING = 0.9
MA_DAMPING = 0.8
MAX_AR_SUM = 0.9            # Sum of |AR coefficients| after stability rescaling
MIN_FORECAST_POINTS = 10
STATIONARITY_RATIO = 2.0


def difference(values: Sequence[float], order: int = 1) -> List[float]:
    """d-th order discrete difference"""
    result = list(values)
    if order == 0 or len(result) < 2:
        return result

    for _ in range(order):
        result = [result[i] - result[i - 1] for i in range(1, len(result))]
    return result


def inverse_difference(
    predictions: Sequence[float],
    last_values: Sequence[float],
    order: int = 1
) -> List[float]:
    """
    Undo differencing by repeated cumulative summation

    last_values[k] is the last observation of the series differenced k
    times; summation starts from the innermost level (order - 1).
    """
    result = list(predictions)
    if order == 0:
        return result

    if len(last_values) < order:
        raise ValidationError(
            f"inverse_difference needs {order} seed values, got {len(last_values)}"
        )

    for level in range(order - 1, -1, -1):
        cumulative = last_values[level]
        undiffed = []
        for prediction in result:
            cumulative += prediction
            undiffed.append(cumulative)
        result = undiffed

    return result


def difference_seeds(values: Sequence[float], order: int) -> List[float]:
    """Last value of the series differenced 0..order-1 times"""
    seeds = []
    current = list(values)
    for _ in range(order):
        seeds.append(current[-1])
        current = difference(current, 1)
    return seeds


def autocorrelation(values: Sequence[float], lag: int) -> float:
    """Autocorrelation at `lag`: lagged covariance over variance"""
    n = len(values)
    if lag >= n:
        return 0.0

    centered = np.asarray(values, dtype=float) - float(np.mean(values))
    denominator = float(np.sum(centered ** 2))
    if denominator == 0:
        return 0.0

    numerator = float(np.sum(centered[lag:] * centered[:n - lag]))
    return numerator / denominator


def find_optimal_differencing(values: Sequence[float], max_d: int = 2) -> int:
    """
    Pick the differencing order with an ADF-like variance stability check

    The series is considered stationary once the variances of its two
    halves are within a factor of two of each other.
    """
    for d in range(max_d + 1):
        diffed = difference(values, d)
        if len(diffed) < MIN_FORECAST_POINTS:
            return d

        half = len(diffed) // 2
        var1 = population_variance(diffed[:half])
        var2 = population_variance(diffed[half:])

        if var1 > 0 and var2 > 0:
            ratio = max(var1, var2) / min(var1, var2)
            if ratio < STATIONARITY_RATIO:
                return d

    return 1


def estimate_ar_coefficients(values: Sequence[float], p: int) -> List[float]:
    """Damped autocorrelations as AR coefficients, rescaled when unstable"""
    if p == 0 or len(values) < p + 1:
        return []

    coeffs = [autocorrelation(values, i) * AR_DAMPING ** i for i in range(1, p + 1)]

    abs_sum = sum(abs(c) for c in coeffs)
    if abs_sum >= 1:
        coeffs = [c / abs_sum * MAX_AR_SUM for c in coeffs]

    return coeffs


def calculate_residuals(values: Sequence[float], ar_coeffs: Sequence[float]) -> List[float]:
    """One-step AR prediction errors (0 for the first p points)"""
    p = len(ar_coeffs)
    residuals = []

    for i in range(len(values)):
        if i < p:
            residuals.append(0.0)
            continue
        predicted = sum(ar_coeffs[j] * values[i - j - 1] for j in range(p))
        residuals.append(values[i] - predicted)

    return residuals


def estimate_ma_coefficients(residuals: Sequence[float], q: int) -> List[float]:
    """Damped residual autocorrelations as MA coefficients"""
    if q == 0 or len(residuals) < q + 1:
        return []
    return [autocorrelation(residuals, i) * MA_DAMPING ** i for i in range(1, q + 1)]


def calculate_aic(residuals: Sequence[float], num_params: int) -> float:
    """Akaike Information Criterion, inf when it cannot be computed"""
    n = len(residuals)
    if n == 0:
        return math.inf

    sigma2 = sum(r ** 2 for r in residuals) / n
    if sigma2 <= 0:
        return math.inf

    return n * math.log(sigma2) + 2 * num_params


def fit_arima(values: Sequence[float], p: int = 2, d: int = 1, q: int = 1) -> ARIMAResult:
    """Fit an ARIMA(p, d, q) model; aic is inf when there is not enough data"""
    order = ARIMAOrder(p=p, d=d, q=q)
    diffed = difference(values, d)

    if len(diffed) < max(p, q) + 2:
        logger.debug(f"ARIMA{(p, d, q)}: {len(diffed)} differenced points, not enough to fit")
        return ARIMAResult(predictions=[], residuals=[], params=order, aic=math.inf)

    ar_coeffs = estimate_ar_coefficients(diffed, p)
    residuals = calculate_residuals(diffed, ar_coeffs)
    ma_coeffs = estimate_ma_coefficients(residuals, q)

    return ARIMAResult(
        predictions=[],
        residuals=residuals,
        params=order,
        aic=calculate_aic(residuals, p + q + 1),
        ar_coefficients=ar_coeffs,
        ma_coefficients=ma_coeffs,
    )


def forecast_differenced(
    diffed: Sequence[float],
    residuals: Sequence[float],
    ar_coeffs: Sequence[float],
    ma_coeffs: Sequence[float],
    days_ahead: int
) -> List[float]:
    """Recursive multi-step forecast in differenced space (future residuals are 0)"""
    extended = list(diffed)
    extended_residuals = list(residuals)
    predictions = []

    for _ in range(days_ahead):
        prediction = 0.0

        for j, coeff in enumerate(ar_coeffs):
            idx = len(extended) - j - 1
            if idx >= 0:
                prediction += coeff * extended[idx]

        for j, coeff in enumerate(ma_coeffs):
            idx = len(extended_residuals) - j - 1
            if idx >= 0:
                prediction += coeff * extended_residuals[idx]

        predictions.append(prediction)
        extended.append(prediction)
        extended_residuals.append(0.0)

    return predictions


def predict_with_arima(
    series: Sequence[DataPoint],
    days_ahead: int,
    order: Optional[ARIMAOrder] = None,
    auto_difference: bool = False
) -> List[float]:
    """
    Multi-step ARIMA forecast in price scale

    With fewer than 10 points the last value is repeated. Forecasts are
    bounded to [-50%, +50%] of the current price.
    """
    values = series_values(series)
    order = order or ARIMAOrder()

    if len(values) < MIN_FORECAST_POINTS:
        last_value = values[-1] if values else 0.0
        return [last_value] * days_ahead

    d = find_optimal_differencing(values) if auto_difference else order.d
    diffed = difference(values, d)

    ar_coeffs = estimate_ar_coefficients(diffed, order.p)
    residuals = calculate_residuals(diffed, ar_coeffs)
    ma_coeffs = estimate_ma_coefficients(residuals, order.q)

    predictions = forecast_differenced(diffed, residuals, ar_coeffs, ma_coeffs, days_ahead)
    levels = inverse_difference(predictions, difference_seeds(values, d), d)

    current_price = values[-1]
    return [clamp(level, current_price * 0.5, current_price * 1.5) for level in levels]


def predict_arima(
    series: Sequence[DataPoint],
    days_ahead: int,
    order: Optional[ARIMAOrder] = None,
    auto_difference: bool = False
) -> float:
    """Single-point ARIMA prediction for a specific horizon"""
    predictions = predict_with_arima(series, days_ahead, order, auto_difference)
    if predictions and predictions[-1]:
        return predictions[-1]

    values = series_values(series)
    return values[-1] if values else 0.0


def auto_arima(
    values: Sequence[float],
    max_p: int = 3,
    max_d: int = 2,
    max_q: int = 2
) -> ARIMAResult:
    """Grid search over (p, q) at the optimal differencing order, minimising AIC"""
    optimal_d = find_optimal_differencing(values, max_d)
    best = ARIMAResult(
        predictions=[],
        residuals=[],
        params=ARIMAOrder(p=1, d=optimal_d, q=1),
        aic=math.inf,
    )

    for p in range(max_p + 1):
        for q in range(max_q + 1):
            if p == 0 and q == 0:
                continue

            result = fit_arima(values, p, optimal_d, q)
            if result.aic < best.aic:
                best = result

    logger.debug(f"auto_arima selected {best.params.to_dict()} (aic={best.aic:.3f})")
    return best
