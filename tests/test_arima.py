import math

import pytest

from pricecast.core.exceptions import ValidationError
from pricecast.core.models import ARIMAOrder
from pricecast.forecasting.arima import (
    auto_arima,
    autocorrelation,
    calculate_aic,
    calculate_residuals,
    difference,
    difference_seeds,
    estimate_ar_coefficients,
    find_optimal_differencing,
    fit_arima,
    forecast_differenced,
    inverse_difference,
    predict_arima,
    predict_with_arima,
)


def test_difference_order_zero_is_copy():
    values = [1.0, 4.0, 9.0]
    diffed = difference(values, 0)
    assert diffed == values
    assert diffed is not values


def test_difference_orders():
    assert difference([1, 4, 9, 16], 1) == [3, 5, 7]
    assert difference([1, 4, 9, 16], 2) == [2, 2]
    assert difference([5.0], 1) == [5.0]


def test_inverse_difference_round_trip():
    values = [10.0, 12.0, 11.5, 13.0, 15.5]
    restored = inverse_difference(difference(values, 1), [values[0]], 1)
    assert restored == pytest.approx(values[1:])


def test_inverse_difference_second_order_round_trip():
    values = [1.0, 4.0, 9.0, 16.0, 25.0]
    seeds = [values[1], values[1] - values[0]]
    restored = inverse_difference(difference(values, 2), seeds, 2)
    assert restored == pytest.approx(values[2:])


def test_inverse_difference_requires_seeds():
    with pytest.raises(ValidationError):
        inverse_difference([1.0, 2.0], [5.0], 2)


def test_difference_seeds():
    assert difference_seeds([1, 4, 9, 16], 2) == [16, 7]
    assert difference_seeds([1, 4], 0) == []


def test_autocorrelation_lag_zero_is_one():
    assert autocorrelation([1.0, 3.0, 2.0, 5.0, 4.0], 0) == pytest.approx(1.0)


def test_autocorrelation_degenerate():
    assert autocorrelation([1.0, 2.0, 3.0], 3) == 0
    assert autocorrelation([1.0, 2.0, 3.0], 10) == 0
    assert autocorrelation([4.0] * 10, 1) == 0


def test_autocorrelation_alternating_is_negative():
    assert autocorrelation([1.0, -1.0] * 10, 1) < -0.8


def test_find_optimal_differencing_short_series():
    assert find_optimal_differencing([1.0, 2.0, 3.0]) == 0


def test_find_optimal_differencing_stationary(noisy_series):
    values = [p.value for p in noisy_series]
    assert find_optimal_differencing(values) in (0, 1, 2)


def test_ar_coefficients_are_stable():
    values = [float(i % 5) for i in range(50)]
    coeffs = estimate_ar_coefficients(values, 3)
    assert len(coeffs) == 3
    assert sum(abs(c) for c in coeffs) < 1.0 + 1e-9


def test_ar_coefficients_empty_cases():
    assert estimate_ar_coefficients([1.0, 2.0, 3.0], 0) == []
    assert estimate_ar_coefficients([1.0, 2.0], 3) == []


def test_residuals_zero_before_history():
    residuals = calculate_residuals([1.0, 2.0, 3.0, 4.0], [0.5, 0.25])
    assert residuals[:2] == [0.0, 0.0]
    assert residuals[2] == pytest.approx(3.0 - (0.5 * 2.0 + 0.25 * 1.0))


def test_aic_degenerate():
    assert calculate_aic([], 3) == math.inf
    assert calculate_aic([0.0, 0.0], 3) == math.inf


def test_fit_arima_insufficient_data():
    result = fit_arima([1.0, 2.0, 3.0], 5, 1, 2)
    assert result.aic == math.inf
    assert result.params == ARIMAOrder(p=5, d=1, q=2)


def test_fit_arima(noisy_series):
    values = [p.value for p in noisy_series]
    result = fit_arima(values, 2, 1, 1)
    assert math.isfinite(result.aic)
    assert result.residuals[:2] == [0.0, 0.0]
    assert len(result.ar_coefficients) == 2
    assert len(result.ma_coefficients) == 1


def test_forecast_differenced_decays_with_ar():
    predictions = forecast_differenced([0.0, 2.0], [0.0, 0.0], [0.5], [], 3)
    assert predictions == pytest.approx([1.0, 0.5, 0.25])


def test_forecast_differenced_ma_uses_last_residual_once():
    predictions = forecast_differenced([0.0, 0.0], [0.0, 4.0], [], [0.5], 2)
    assert predictions == pytest.approx([2.0, 0.0])


def test_predict_with_arima_short_series_repeats_last(make_series):
    series = make_series([10, 11, 12, 13])
    assert predict_with_arima(series, 5) == [13.0] * 5


def test_predict_with_arima_bounded(volatile_series):
    current = volatile_series[-1].value
    predictions = predict_with_arima(volatile_series, 30, ARIMAOrder(p=3, d=2, q=2))
    assert len(predictions) == 30
    assert all(current * 0.5 <= p <= current * 1.5 for p in predictions)


def test_predict_arima_flat(flat_series):
    assert predict_arima(flat_series, 7) == pytest.approx(100.0)


def test_predict_arima_auto_difference(noisy_series):
    prediction = predict_arima(noisy_series, 14, auto_difference=True)
    assert math.isfinite(prediction)
    assert prediction > 0


def test_auto_arima_selects_finite_order(noisy_series):
    values = [p.value for p in noisy_series]
    result = auto_arima(values)
    assert math.isfinite(result.aic)
    assert 0 <= result.params.p <= 3
    assert 0 <= result.params.q <= 2
    assert (result.params.p, result.params.q) != (0, 0)


def test_auto_arima_short_series_defaults():
    result = auto_arima([1.0, 2.0])
    assert result.aic == math.inf
    assert (result.params.p, result.params.q) == (1, 1)
