import pytest

from pricecast.core.config import AnomalyDetectorConfig, ThresholdSet
from pricecast.core.enums import AnomalySeverity, AnomalyType
from pricecast.core.models import ExpectedRange
from pricecast.anomaly.detector import (
    detect_anomalies,
    format_expected_range,
    get_severity,
    z_score,
)


def by_type(anomalies):
    return {anomaly.type: anomaly for anomaly in anomalies}


def calm_then_wild(base):
    calm = [base + (1 if i % 2 else -1) for i in range(23)]
    return calm + [90, 110, 90, 110, 90, 110, 90]


@pytest.mark.parametrize("length", [0, 1, 7, 13])
def test_short_series_returns_empty(make_series, length):
    values = [100.0] * max(length - 1, 0) + ([500.0] if length else [])
    assert detect_anomalies(make_series(values)) == []


def test_price_spike(make_series):
    anomalies = detect_anomalies(make_series([100.0] * 20 + [130.0]))
    spikes = [a for a in anomalies if a.type == AnomalyType.PRICE_SPIKE]

    assert len(spikes) == 1
    assert spikes[0].severity == AnomalySeverity.HIGH
    assert spikes[0].deviation_percent > 0
    assert spikes[0].detected_value == 130.0
    assert AnomalyType.PRICE_DROP not in by_type(anomalies)


def test_price_drop(make_series):
    anomalies = detect_anomalies(make_series([100.0] * 20 + [70.0]))
    drops = [a for a in anomalies if a.type == AnomalyType.PRICE_DROP]

    assert len(drops) == 1
    assert drops[0].severity == AnomalySeverity.HIGH
    assert drops[0].deviation_percent < 0


def test_equal_severity_keeps_first_rule(make_series):
    spike = by_type(detect_anomalies(make_series([100.0] * 20 + [130.0])))[AnomalyType.PRICE_SPIKE]
    assert "average" in spike.description


def test_higher_severity_replaces_lower(make_series):
    # Z-score alone is LOW, the 9% single-day jump is HIGH
    values = [95.0, 105.0] * 10 + [100.0, 109.0]
    anomalies = detect_anomalies(make_series(values))
    spikes = [a for a in anomalies if a.type == AnomalyType.PRICE_SPIKE]

    assert len(spikes) == 1
    assert spikes[0].severity == AnomalySeverity.HIGH
    assert "one day" in spikes[0].description
    assert spikes[0].deviation_percent == pytest.approx(9.0)
    assert spikes[0].expected_range.min == pytest.approx(97.0)
    assert spikes[0].expected_range.max == pytest.approx(103.0)


def test_z_score_expected_range(make_series):
    values = [100.0] * 20 + [130.0]
    spike = by_type(detect_anomalies(make_series(values)))[AnomalyType.PRICE_SPIKE]
    avg = sum(values) / len(values)

    assert spike.expected_range.min < avg < spike.expected_range.max
    assert spike.expected_range.max - avg == pytest.approx(avg - spike.expected_range.min)


def test_historical_high_and_low(make_series):
    high = by_type(detect_anomalies(make_series([100.0] * 20 + [130.0])))
    low = by_type(detect_anomalies(make_series([100.0] * 20 + [70.0])))

    assert high[AnomalyType.HISTORICAL_HIGH].severity == AnomalySeverity.MEDIUM
    assert AnomalyType.HISTORICAL_LOW not in high
    assert low[AnomalyType.HISTORICAL_LOW].severity == AnomalySeverity.MEDIUM
    assert low[AnomalyType.HISTORICAL_LOW].expected_range.min == 70.0


def test_quiet_series_has_no_anomalies(make_series):
    assert detect_anomalies(make_series([100.0, 102.0] * 10 + [101.0])) == []


def test_high_volatility(make_series):
    anomalies = by_type(detect_anomalies(make_series(calm_then_wild(100))))
    volatility = anomalies[AnomalyType.HIGH_VOLATILITY]

    assert volatility.severity == AnomalySeverity.HIGH
    assert volatility.expected_range.min == 0
    assert volatility.expected_range.max == pytest.approx(1.0, rel=0.05)
    assert volatility.detected_value == pytest.approx(10.3, rel=0.05)
    assert volatility.deviation_percent > 200


def test_volatility_skipped_for_flat_history(make_series):
    values = [100.0] * 23 + [90, 110, 90, 110, 90, 110, 90]
    assert AnomalyType.HIGH_VOLATILITY not in by_type(detect_anomalies(make_series(values)))


def test_volatility_needs_thirty_points(make_series):
    values = calm_then_wild(100)[1:]
    assert AnomalyType.HIGH_VOLATILITY not in by_type(detect_anomalies(make_series(values)))


def test_volatility_ratio_thresholds_configurable(make_series):
    config = {"volatility_thresholds": {"low": 50, "medium": 60, "high": 70}}
    anomalies = detect_anomalies(make_series(calm_then_wild(100)), config)
    assert AnomalyType.HIGH_VOLATILITY not in by_type(anomalies)


def test_partial_config_dict_is_merged(make_series):
    config = {
        "z_score_thresholds": {"low": 5.0, "medium": 6.0, "high": 7.0},
        "daily_change_thresholds": {"low": 50.0, "medium": 60.0, "high": 70.0},
    }
    anomalies = detect_anomalies(make_series([100.0] * 20 + [130.0]), config)
    assert [a.type for a in anomalies] == [AnomalyType.HISTORICAL_HIGH]


def test_min_data_points_override(make_series):
    series = make_series([100.0] * 20 + [130.0])
    assert detect_anomalies(series, {"min_data_points": 30}) == []
    assert detect_anomalies(series, AnomalyDetectorConfig(min_data_points=30)) == []


def test_unsorted_input_matches_sorted(make_series):
    series = make_series([100.0] * 20 + [130.0])
    shuffled = list(reversed(series))
    snapshot = list(shuffled)

    assert detect_anomalies(shuffled) == detect_anomalies(series)
    assert shuffled == snapshot


@pytest.mark.parametrize("value, expected", [
    (1.0, None),
    (1.5, AnomalySeverity.LOW),
    (-2.2, AnomalySeverity.MEDIUM),
    (2.5, AnomalySeverity.HIGH),
    (-9.0, AnomalySeverity.HIGH),
])
def test_get_severity(value, expected):
    assert get_severity(value, ThresholdSet(low=1.5, medium=2.0, high=2.5)) == expected


def test_z_score_flat_window():
    assert z_score(100.0, [100.0] * 5) == 0


def test_severity_ordering():
    assert AnomalySeverity.LOW < AnomalySeverity.MEDIUM < AnomalySeverity.HIGH


def test_to_dict(make_series):
    anomaly = detect_anomalies(make_series([100.0] * 20 + [130.0]))[0]
    data = anomaly.to_dict()
    assert data["type"] == "PRICE_SPIKE"
    assert data["severity"] == "HIGH"
    assert set(data["expectedRange"]) == {"min", "max"}


@pytest.mark.parametrize("expected_range, text", [
    (ExpectedRange(min=99.5, max=100.5), "R$ 99.50 - R$ 100.50"),
    (ExpectedRange(min=1234.56, max=5678.90), "R$ 1234.56 - R$ 5678.90"),
    (ExpectedRange(min=0.01, max=0.05), "R$ 0.01 - R$ 0.05"),
])
def test_format_expected_range(expected_range, text):
    assert format_expected_range(expected_range) == text


def test_single_point_series_with_low_minimum(make_series):
    anomalies = detect_anomalies(make_series([100.0]), {"min_data_points": 1})
    assert [a.type for a in anomalies] == [AnomalyType.HISTORICAL_HIGH]


def test_empty_series_with_zero_minimum():
    assert detect_anomalies([], {"min_data_points": 0}) == []
