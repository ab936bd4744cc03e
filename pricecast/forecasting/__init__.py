"""
Forecasting models and the ensemble predictor
"""

from .arima import (
    auto_arima,
    autocorrelation,
    difference,
    find_optimal_differencing,
    fit_arima,
    inverse_difference,
    predict_arima,
    predict_with_arima,
)
from .holt_winters import (
    auto_holt_winters,
    fit_holt_winters,
    optimize_holt_winters,
    predict_holt_winters,
    predict_with_holt_winters,
)
from .predictor import (
    calculate_model_weights,
    calculate_prediction_confidence,
    generate_factors,
    predict_multiple_horizons,
    predict_price,
)
from .batch import MODES, BatchResult, analyze_series, run_batch

__all__ = [
    "auto_arima",
    "autocorrelation",
    "difference",
    "find_optimal_differencing",
    "fit_arima",
    "inverse_difference",
    "predict_arima",
    "predict_with_arima",
    "auto_holt_winters",
    "fit_holt_winters",
    "optimize_holt_winters",
    "predict_holt_winters",
    "predict_with_holt_winters",
    "calculate_model_weights",
    "calculate_prediction_confidence",
    "generate_factors",
    "predict_multiple_horizons",
    "predict_price",
    "MODES",
    "BatchResult",
    "analyze_series",
    "run_batch",
]
