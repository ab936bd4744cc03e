"""
Configuration management
"""

from .settings import (
    AnomalyDetectorConfig,
    ForecastConfig,
    PredictorConfig,
    ThresholdSet,
    create_config,
    deep_merge,
    validate_config,
)

__all__ = [
    "AnomalyDetectorConfig",
    "ForecastConfig",
    "PredictorConfig",
    "ThresholdSet",
    "create_config",
    "deep_merge",
    "validate_config",
]
