"""
Anomaly detection for daily price series

Four rules run over the latest observation:
1. Z-score against the whole window (spike / drop)
2. Single-day percentage change (spike / drop)
3. Recent vs historical volatility ratio
4. New historical high / low of the window

At most one finding per anomaly type is reported, the most severe.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from pricecast.core.config import AnomalyDetectorConfig, ThresholdSet
from pricecast.core.enums import AnomalySeverity, AnomalyType
from pricecast.core.models import DataPoint, DetectedAnomaly, ExpectedRange, series_values
from pricecast.indicators.safe_math import coefficient_of_variation, mean, population_std, safe_divide
from pricecast.utils.logger import get_logger

logger = get_logger(__name__)

ConfigLike = Union[AnomalyDetectorConfig, Dict[str, Any], None]


def _resolve_config(config: ConfigLike) -> AnomalyDetectorConfig:
    if isinstance(config, AnomalyDetectorConfig):
        return config
    return AnomalyDetectorConfig.from_dict(config)


def get_severity(value: float, thresholds: ThresholdSet) -> Optional[AnomalySeverity]:
    """Severity of |value| against low/medium/high thresholds (None below low)"""
    magnitude = abs(value)
    if magnitude >= thresholds.high:
        return AnomalySeverity.HIGH
    if magnitude >= thresholds.medium:
        return AnomalySeverity.MEDIUM
    if magnitude >= thresholds.low:
        return AnomalySeverity.LOW
    return None


def z_score(value: float, values: Sequence[float]) -> float:
    """Standard scores use the population standard deviation; 0 for a flat window"""
    return safe_divide(value - mean(values), population_std(values))


def check_z_score(values: Sequence[float], config: AnomalyDetectorConfig) -> Optional[DetectedAnomaly]:
    latest = values[-1]
    z = z_score(latest, values)
    severity = get_severity(z, config.z_score_thresholds)
    if severity is None:
        return None

    avg = mean(values)
    std = population_std(values)
    strong = "far " if severity == AnomalySeverity.HIGH else ""

    if z > 0:
        anomaly_type = AnomalyType.PRICE_SPIKE
        description = f"Price {strong}above the historical average"
    else:
        anomaly_type = AnomalyType.PRICE_DROP
        description = f"Price {strong}below the historical average"

    return DetectedAnomaly(
        type=anomaly_type,
        severity=severity,
        description=description,
        detected_value=latest,
        expected_range=ExpectedRange(min=avg - std, max=avg + std),
        deviation_percent=safe_divide(latest - avg, avg) * 100,
    )


def check_daily_change(values: Sequence[float], config: AnomalyDetectorConfig) -> Optional[DetectedAnomaly]:
    if len(values) < 2:
        return None

    latest, previous = values[-1], values[-2]
    if previous <= 0:
        return None

    daily_change = (latest - previous) / previous * 100
    severity = get_severity(daily_change, config.daily_change_thresholds)
    if severity is None:
        return None

    sharp = "Sharp " if severity == AnomalySeverity.HIGH else ""
    if daily_change > 0:
        anomaly_type = AnomalyType.PRICE_SPIKE
        movement = "rise" if sharp else "Rise"
    else:
        anomaly_type = AnomalyType.PRICE_DROP
        movement = "drop" if sharp else "Drop"
    description = f"{sharp}{movement} of {abs(daily_change):.1f}% in one day"

    return DetectedAnomaly(
        type=anomaly_type,
        severity=severity,
        description=description,
        detected_value=latest,
        expected_range=ExpectedRange(min=previous * 0.97, max=previous * 1.03),
        deviation_percent=daily_change,
    )


def check_volatility(values: Sequence[float], config: AnomalyDetectorConfig) -> Optional[DetectedAnomaly]:
    if len(values) < config.volatility_min_points:
        return None

    window = config.volatility_window
    recent_volatility = coefficient_of_variation(values[-window:], sample=False)
    historical_volatility = coefficient_of_variation(values[:-window], sample=False)

    if historical_volatility <= 0:
        logger.debug("Flat history, skipping volatility check")
        return None

    ratio = recent_volatility / historical_volatility
    thresholds = config.volatility_thresholds
    if ratio <= thresholds.low:
        return None

    if ratio > thresholds.high:
        severity = AnomalySeverity.HIGH
    elif ratio > thresholds.medium:
        severity = AnomalySeverity.MEDIUM
    else:
        severity = AnomalySeverity.LOW

    strong = "far " if severity == AnomalySeverity.HIGH else ""
    return DetectedAnomaly(
        type=AnomalyType.HIGH_VOLATILITY,
        severity=severity,
        description=f"Volatility {strong}above normal ({ratio:.1f}x)",
        detected_value=recent_volatility * 100,
        expected_range=ExpectedRange(min=0.0, max=historical_volatility * 100),
        deviation_percent=(ratio - 1) * 100,
    )


def check_extremes(values: Sequence[float]) -> Optional[DetectedAnomaly]:
    latest = values[-1]
    low, high = min(values), max(values)

    if latest >= high:
        anomaly_type = AnomalyType.HISTORICAL_HIGH
        description = "Price reached the highest level of the period"
    elif latest <= low:
        anomaly_type = AnomalyType.HISTORICAL_LOW
        description = "Price reached the lowest level of the period"
    else:
        return None

    avg = mean(values)
    return DetectedAnomaly(
        type=anomaly_type,
        severity=AnomalySeverity.MEDIUM,
        description=description,
        detected_value=latest,
        expected_range=ExpectedRange(min=low, max=high),
        deviation_percent=safe_divide(latest - avg, avg) * 100,
    )


def detect_anomalies(series: Sequence[DataPoint], config: ConfigLike = None) -> List[DetectedAnomaly]:
    """
    Scan a price series for anomalies in its latest observation

    Args:
        series: observations in any order (not modified)
        config: AnomalyDetectorConfig, or a partial dict deep-merged over the defaults

    Returns:
        At most one DetectedAnomaly per type; empty for short series
    """
    config = _resolve_config(config)

    if not series:
        return []
    if len(series) < config.min_data_points:
        logger.debug(f"Anomaly scan skipped: {len(series)} < {config.min_data_points} points")
        return []

    values = series_values(series)

    findings = [
        check_z_score(values, config),
        check_daily_change(values, config),
        check_volatility(values, config),
        check_extremes(values),
    ]

    by_type: Dict[AnomalyType, DetectedAnomaly] = {}
    for anomaly in findings:
        if anomaly is None:
            continue
        existing = by_type.get(anomaly.type)
        if existing is None or anomaly.severity > existing.severity:
            by_type[anomaly.type] = anomaly

    return list(by_type.values())


def format_expected_range(expected_range: ExpectedRange) -> str:
    """Human-readable expected range, e.g. 'R$ 99.50 - R$ 100.50'"""
    return f"R$ {expected_range.min:.2f} - R$ {expected_range.max:.2f}"
