import pytest

from pricecast.core.enums import TrendDirection
from pricecast.indicators.moving_average import (
    analyze_moving_averages,
    calculate_ema,
    calculate_multiple_emas,
    calculate_multiple_smas,
    calculate_sma,
    determine_trend,
    project_price_with_ema,
)


def test_sma_single_element():
    assert calculate_sma([42.0], 7) == 42.0


def test_ema_single_element():
    assert calculate_ema([42.0], 7) == 42.0


def test_empty_series_returns_zero():
    assert calculate_sma([], 7) == 0
    assert calculate_ema([], 7) == 0


def test_sma_uses_last_period_values():
    assert calculate_sma([1, 2, 3, 4, 5], 2) == pytest.approx(4.5)


def test_sma_short_series_uses_all_values():
    assert calculate_sma([1, 2, 3], 10) == pytest.approx(2.0)


def test_ema_seed_and_roll():
    # seed = mean(1, 2, 3) = 2, k = 0.5
    # 4 -> 3.0, 5 -> 4.0
    assert calculate_ema([1, 2, 3, 4, 5], 3) == pytest.approx(4.0)


def test_ema_weights_recent_prices_more():
    values = [100] * 20 + [120] * 3
    assert calculate_ema(values, 7) > calculate_sma(values, 21)


def test_multiple_periods():
    values = list(range(1, 31))
    smas = calculate_multiple_smas(values)
    assert set(smas) == {7, 14, 30}
    assert smas[30] == pytest.approx(15.5)
    assert set(calculate_multiple_emas(values, [5, 10])) == {5, 10}


def test_determine_trend_stable_within_threshold():
    trend, strength = determine_trend(101, 100)
    assert trend == TrendDirection.STABLE
    assert strength == pytest.approx(50.0)


def test_determine_trend_up_and_down():
    assert determine_trend(110, 100) == (TrendDirection.UP, pytest.approx(10.0))
    trend, _ = determine_trend(90, 100)
    assert trend == TrendDirection.DOWN


def test_determine_trend_strength_capped():
    _, strength = determine_trend(500, 100)
    assert strength == 100.0


def test_determine_trend_zero_long_ma():
    assert determine_trend(10, 0) == (TrendDirection.STABLE, 0.0)


def test_project_price_with_ema_flat():
    assert project_price_with_ema([100.0] * 30, 14) == pytest.approx(100.0)


def test_project_price_with_ema_follows_momentum():
    values = [100 + i for i in range(40)]
    assert project_price_with_ema(values, 10) > values[-1]


def test_project_price_with_ema_floor():
    values = [1000.0] * 25 + [10.0] * 3
    assert project_price_with_ema(values, 365) == pytest.approx(5.0)


def test_analyze_moving_averages(uptrend_series):
    result = analyze_moving_averages(uptrend_series)
    assert result.trend == TrendDirection.UP
    assert result.sma == pytest.approx(sum(p.value for p in uptrend_series[-7:]) / 7)
