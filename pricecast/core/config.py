"""
Explicit configuration structs passed to the engine functions
"""

import copy
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from .enums import MIN_ANOMALY_POINTS, MIN_PREDICTION_POINTS
from .models import ARIMAOrder, HoltWintersParams

logger = logging.getLogger(__name__)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge `override` into a copy of `base`"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@dataclass
class ThresholdSet:
    """Low/medium/high severity thresholds"""
    low: float
    medium: float
    high: float

    def is_ordered(self) -> bool:
        return self.low <= self.medium <= self.high


@dataclass
class AnomalyDetectorConfig:
    """Thresholds for the anomaly detection rules"""

    # Z-score (standard deviations from the mean)
    z_score_thresholds: ThresholdSet = field(
        default_factory=lambda: ThresholdSet(low=1.5, medium=2.0, high=2.5)
    )

    # Single-day change (%)
    daily_change_thresholds: ThresholdSet = field(
        default_factory=lambda: ThresholdSet(low=3.0, medium=5.0, high=8.0)
    )

    # Recent vs historical volatility ratio
    volatility_thresholds: ThresholdSet = field(
        default_factory=lambda: ThresholdSet(low=2.0, medium=2.5, high=3.0)
    )

    min_data_points: int = MIN_ANOMALY_POINTS
    volatility_window: int = 7
    volatility_min_points: int = 30

    @classmethod
    def from_dict(cls, overrides: Optional[Dict[str, Any]] = None) -> "AnomalyDetectorConfig":
        """Build from a partial (possibly nested) dict merged over the defaults"""
        data = deep_merge(asdict(cls()), overrides or {})
        return cls(
            z_score_thresholds=ThresholdSet(**data["z_score_thresholds"]),
            daily_change_thresholds=ThresholdSet(**data["daily_change_thresholds"]),
            volatility_thresholds=ThresholdSet(**data["volatility_thresholds"]),
            min_data_points=int(data["min_data_points"]),
            volatility_window=int(data["volatility_window"]),
            volatility_min_points=int(data["volatility_min_points"]),
        )

    def validate(self) -> bool:
        valid = True
        for name in ("z_score_thresholds", "daily_change_thresholds", "volatility_thresholds"):
            if not getattr(self, name).is_ordered():
                logger.error(f"{name} must satisfy low <= medium <= high")
                valid = False
        if self.min_data_points < 2:
            logger.error("min_data_points must be at least 2")
            valid = False
        if self.volatility_min_points <= self.volatility_window:
            logger.error("volatility_min_points must exceed volatility_window")
            valid = False
        return valid


@dataclass
class PredictorConfig:
    """Ensemble predictor settings"""
    min_data_points: int = MIN_PREDICTION_POINTS
    confidence_level: float = 0.95
    include_advanced_models: bool = False
    arima_order: ARIMAOrder = field(default_factory=ARIMAOrder)
    holt_winters: HoltWintersParams = field(default_factory=HoltWintersParams)

    @classmethod
    def from_dict(cls, overrides: Optional[Dict[str, Any]] = None) -> "PredictorConfig":
        data = deep_merge(asdict(cls()), overrides or {})
        return cls(
            min_data_points=int(data["min_data_points"]),
            confidence_level=float(data["confidence_level"]),
            include_advanced_models=bool(data["include_advanced_models"]),
            arima_order=ARIMAOrder(**data["arima_order"]),
            holt_winters=HoltWintersParams(**data["holt_winters"]),
        )

    def validate(self) -> bool:
        valid = True
        if self.min_data_points < 2:
            logger.error("min_data_points must be at least 2")
            valid = False
        if not 0 < self.confidence_level < 1:
            logger.error("confidence_level must be between 0 and 1")
            valid = False
        for name in ("alpha", "beta", "gamma"):
            if not 0 < getattr(self.holt_winters, name) <= 1:
                logger.error(f"holt_winters.{name} must be between 0 and 1")
                valid = False
        if self.holt_winters.seasonal_period < 1:
            logger.error("holt_winters.seasonal_period must be positive")
            valid = False
        order = self.arima_order
        if min(order.p, order.d, order.q) < 0:
            logger.error("ARIMA orders must be non-negative")
            valid = False
        return valid
