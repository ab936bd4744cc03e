"""
Enums and constants for the forecasting engine
"""

from enum import Enum, IntEnum


class TrendDirection(Enum):
    """Price trend / predicted direction"""
    UP = "UP"
    DOWN = "DOWN"
    STABLE = "STABLE"


class VolatilityLevel(Enum):
    """Volatility classification based on coefficient of variation"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class FactorImpact(Enum):
    """Impact of an explanatory prediction factor"""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class AnomalyType(Enum):
    """Anomaly types reported by the detector"""
    PRICE_SPIKE = "PRICE_SPIKE"
    PRICE_DROP = "PRICE_DROP"
    HIGH_VOLATILITY = "HIGH_VOLATILITY"
    HISTORICAL_HIGH = "HISTORICAL_HIGH"
    HISTORICAL_LOW = "HISTORICAL_LOW"


class AnomalySeverity(IntEnum):
    """Anomaly severity with numeric values for ordering"""
    LOW = 1
    MEDIUM = 2
    HIGH = 3


# Volatility classification (CV %), calibrated for agricultural commodities
CV_LOW_THRESHOLD = 3.0
CV_HIGH_THRESHOLD = 8.0

VOLATILITY_CONFIDENCE_MULTIPLIERS = {
    VolatilityLevel.LOW: 1.0,
    VolatilityLevel.MEDIUM: 0.85,
    VolatilityLevel.HIGH: 0.65,
}

# Indicator defaults
DEFAULT_ATR_PERIOD = 14
DEFAULT_ROC_PERIOD = 14
DEFAULT_MA_PERIODS = [7, 14, 30]
DEFAULT_EMA_SHORT = 7
DEFAULT_EMA_LONG = 21

# Trend analysis windows
SHORT_TERM_WINDOW = 14
MEDIUM_TERM_WINDOW = 30
LONG_TERM_WINDOW = 90

# Prediction constants
MIN_PREDICTION_POINTS = 7
MIN_ANOMALY_POINTS = 14
DEFAULT_HORIZONS = [7, 14, 30, 60, 90]
Z_SCORE_95 = 1.96
Z_SCORE_90 = 1.645
MIN_CONFIDENCE = 25
MAX_CONFIDENCE = 85

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
