"""
Custom exceptions for the forecasting engine
"""


class ForecastEngineError(Exception):
    """Base exception for forecasting engine errors"""
    pass


class InsufficientDataError(ForecastEngineError):
    """Raised when a series is too short for the requested computation"""

    def __init__(self, required: int, actual: int, message: str = ""):
        self.required = required
        self.actual = actual
        super().__init__(
            message or f"Insufficient data for prediction: {actual} points, minimum {required} required"
        )


class ValidationError(ForecastEngineError):
    """Raised when validation fails"""
    pass


class ConfigurationError(ForecastEngineError):
    """Raised when configuration is invalid"""
    pass


class DataLoadError(ForecastEngineError):
    """Raised when a price series cannot be loaded"""
    pass
