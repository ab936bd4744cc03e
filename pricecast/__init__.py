"""
pricecast - commodity price forecasting and anomaly detection
"""

__version__ = "1.0.0"

from pricecast.core import (
    DataPoint,
    DetectedAnomaly,
    PredictionResult,
    AnomalyDetectorConfig,
    PredictorConfig,
    ForecastEngineError,
    InsufficientDataError,
)
from pricecast.indicators import (
    calculate_sma,
    calculate_ema,
    linear_regression,
    analyze_volatility,
    analyze_trends,
    calculate_prediction_bounds,
)
from pricecast.forecasting import (
    predict_price,
    predict_multiple_horizons,
    predict_arima,
    auto_arima,
    predict_holt_winters,
    auto_holt_winters,
    run_batch,
)
from pricecast.anomaly import detect_anomalies, format_expected_range
from pricecast.data import load_series, series_from_records

__all__ = [
    "__version__",
    "DataPoint",
    "DetectedAnomaly",
    "PredictionResult",
    "AnomalyDetectorConfig",
    "PredictorConfig",
    "ForecastEngineError",
    "InsufficientDataError",
    "calculate_sma",
    "calculate_ema",
    "linear_regression",
    "analyze_volatility",
    "analyze_trends",
    "calculate_prediction_bounds",
    "predict_price",
    "predict_multiple_horizons",
    "predict_arima",
    "auto_arima",
    "predict_holt_winters",
    "auto_holt_winters",
    "run_batch",
    "detect_anomalies",
    "format_expected_range",
    "load_series",
    "series_from_records",
]
