"""
Price indicators: moving averages, volatility and regression trends
"""

from .moving_average import (
    calculate_sma,
    calculate_ema,
    calculate_multiple_smas,
    calculate_multiple_emas,
    determine_trend,
    project_price_with_ema,
    analyze_moving_averages,
)
from .trend import (
    linear_regression,
    project_price,
    determine_trend_from_slope,
    analyze_period,
    analyze_trends,
    calculate_roc,
)
from .volatility import (
    calculate_standard_deviation,
    calculate_coefficient_of_variation,
    calculate_daily_returns,
    calculate_returns_volatility,
    calculate_atr,
    determine_volatility_level,
    calculate_price_range,
    calculate_confidence_adjustment,
    analyze_volatility,
    calculate_prediction_bounds,
)

__all__ = [
    "calculate_sma",
    "calculate_ema",
    "calculate_multiple_smas",
    "calculate_multiple_emas",
    "determine_trend",
    "project_price_with_ema",
    "analyze_moving_averages",
    "linear_regression",
    "project_price",
    "determine_trend_from_slope",
    "analyze_period",
    "analyze_trends",
    "calculate_roc",
    "calculate_standard_deviation",
    "calculate_coefficient_of_variation",
    "calculate_daily_returns",
    "calculate_returns_volatility",
    "calculate_atr",
    "determine_volatility_level",
    "calculate_price_range",
    "calculate_confidence_adjustment",
    "analyze_volatility",
    "calculate_prediction_bounds",
]
