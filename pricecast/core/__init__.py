"""
Core models, enums, and exceptions
"""

from .models import (
    DataPoint,
    PriceRange,
    VolatilityResult,
    MovingAverageResult,
    LinearRegressionResult,
    TrendAnalysis,
    ARIMAOrder,
    ARIMAResult,
    HoltWintersParams,
    HoltWintersResult,
    PredictionFactor,
    PredictionBounds,
    ModelForecasts,
    PredictionResult,
    ExpectedRange,
    DetectedAnomaly,
    sort_series,
    series_values,
)

from .enums import (
    TrendDirection,
    VolatilityLevel,
    FactorImpact,
    AnomalyType,
    AnomalySeverity,
)

from .config import (
    ThresholdSet,
    AnomalyDetectorConfig,
    PredictorConfig,
    deep_merge,
)

from .exceptions import (
    ForecastEngineError,
    InsufficientDataError,
    ValidationError,
    ConfigurationError,
    DataLoadError,
)

__all__ = [
    "DataPoint",
    "PriceRange",
    "VolatilityResult",
    "MovingAverageResult",
    "LinearRegressionResult",
    "TrendAnalysis",
    "ARIMAOrder",
    "ARIMAResult",
    "HoltWintersParams",
    "HoltWintersResult",
    "PredictionFactor",
    "PredictionBounds",
    "ModelForecasts",
    "PredictionResult",
    "ExpectedRange",
    "DetectedAnomaly",
    "sort_series",
    "series_values",
    "TrendDirection",
    "VolatilityLevel",
    "FactorImpact",
    "AnomalyType",
    "AnomalySeverity",
    "ThresholdSet",
    "AnomalyDetectorConfig",
    "PredictorConfig",
    "deep_merge",
    "ForecastEngineError",
    "InsufficientDataError",
    "ValidationError",
    "ConfigurationError",
    "DataLoadError",
]
