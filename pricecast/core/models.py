"""
Data models for price series, model results, predictions and anomalies
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from .enums import (
    AnomalySeverity,
    AnomalyType,
    FactorImpact,
    TrendDirection,
    VolatilityLevel,
)


@dataclass(frozen=True)
class DataPoint:
    """Single daily price observation"""
    date: date
    value: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DataPoint":
        raw_date = data["date"]
        if isinstance(raw_date, datetime):
            raw_date = raw_date.date()
        elif isinstance(raw_date, str):
            raw_date = date.fromisoformat(raw_date[:10])
        return cls(date=raw_date, value=float(data["value"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date.isoformat(), "value": self.value}


def sort_series(series: Iterable[DataPoint]) -> List[DataPoint]:
    """Return a new list sorted ascending by date (input is left untouched)"""
    return sorted(series, key=lambda point: point.date)


def series_values(series: Iterable[DataPoint]) -> List[float]:
    """Chronologically ordered price values of a series"""
    return [point.value for point in sort_series(series)]


@dataclass
class PriceRange:
    """Min/max statistics of a price window"""
    min: float = 0.0
    max: float = 0.0
    range: float = 0.0
    range_percent: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "min": self.min,
            "max": self.max,
            "range": self.range,
            "rangePercent": self.range_percent,
        }


@dataclass
class VolatilityResult:
    """Dispersion statistics of a price series"""
    standard_deviation: float
    coefficient_of_variation: float
    average_true_range: float
    volatility_level: VolatilityLevel
    price_range: PriceRange

    def to_dict(self) -> Dict[str, Any]:
        return {
            "standardDeviation": self.standard_deviation,
            "coefficientOfVariation": self.coefficient_of_variation,
            "averageTrueRange": self.average_true_range,
            "volatilityLevel": self.volatility_level.value,
            "priceRange": self.price_range.to_dict(),
        }


@dataclass
class MovingAverageResult:
    """Moving average summary (7-period SMA/EMA and EMA7 vs EMA21 trend)"""
    sma: float
    ema: float
    trend: TrendDirection
    trend_strength: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sma": self.sma,
            "ema": self.ema,
            "trend": self.trend.value,
            "trendStrength": self.trend_strength,
        }


@dataclass
class LinearRegressionResult:
    """Least-squares fit over one analysis window"""
    slope: float = 0.0
    intercept: float = 0.0
    r_squared: float = 0.0
    trend: TrendDirection = TrendDirection.STABLE
    predicted_price: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slope": self.slope,
            "intercept": self.intercept,
            "rSquared": self.r_squared,
            "trend": self.trend.value,
            "predictedPrice": self.predicted_price,
        }


@dataclass
class TrendAnalysis:
    """Short/medium/long term regression trends merged into one view"""
    short_term: LinearRegressionResult
    medium_term: LinearRegressionResult
    long_term: LinearRegressionResult
    overall_trend: TrendDirection
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shortTerm": self.short_term.to_dict(),
            "mediumTerm": self.medium_term.to_dict(),
            "longTerm": self.long_term.to_dict(),
            "overallTrend": self.overall_trend.value,
            "confidence": self.confidence,
        }


@dataclass
class ARIMAOrder:
    """ARIMA (p, d, q) order"""
    p: int = 2
    d: int = 1
    q: int = 1

    def to_dict(self) -> Dict[str, int]:
        return {"p": self.p, "d": self.d, "q": self.q}


@dataclass
class ARIMAResult:
    """Result of an ARIMA fit; aic == inf means the order is unusable"""
    predictions: List[float]
    residuals: List[float]
    params: ARIMAOrder
    aic: float
    ar_coefficients: List[float] = field(default_factory=list)
    ma_coefficients: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "predictions": list(self.predictions),
            "residuals": list(self.residuals),
            "params": self.params.to_dict(),
            "aic": self.aic,
        }


@dataclass
class HoltWintersParams:
    """Smoothing constants and season length for Holt-Winters"""
    alpha: float = 0.3   # level
    beta: float = 0.1    # trend
    gamma: float = 0.2   # seasonal
    seasonal_period: int = 7

    def to_dict(self) -> Dict[str, float]:
        return {
            "alpha": self.alpha,
            "beta": self.beta,
            "gamma": self.gamma,
            "seasonalPeriod": self.seasonal_period,
        }


@dataclass
class HoltWintersResult:
    """Final smoothing state of a Holt-Winters fit"""
    level: float
    trend: float
    seasonal: List[float]
    fitted: List[float]
    params: HoltWintersParams
    mse: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "trend": self.trend,
            "seasonal": list(self.seasonal),
            "fitted": list(self.fitted),
            "params": self.params.to_dict(),
            "mse": self.mse,
        }


@dataclass
class PredictionFactor:
    """Human-readable explanatory factor of a prediction"""
    name: str
    impact: FactorImpact
    weight: float

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "impact": self.impact.value, "weight": self.weight}


@dataclass
class PredictionBounds:
    """Confidence interval around a predicted price"""
    lower: float
    upper: float

    @property
    def width(self) -> float:
        return self.upper - self.lower

    def to_dict(self) -> Dict[str, float]:
        return {"lower": self.lower, "upper": self.upper}


@dataclass
class ModelForecasts:
    """Point forecasts of the individual models and their combination"""
    sma: float
    ema: float
    linear_regression: float
    ensemble: float
    arima: Optional[float] = None
    holt_winters: Optional[float] = None

    def to_dict(self) -> Dict[str, float]:
        result = {
            "sma": self.sma,
            "ema": self.ema,
            "linearRegression": self.linear_regression,
            "ensemble": self.ensemble,
        }
        if self.arima is not None:
            result["arima"] = self.arima
        if self.holt_winters is not None:
            result["holtWinters"] = self.holt_winters
        return result


@dataclass
class PredictionResult:
    """Ensemble price prediction for one horizon"""
    current_price: float
    predicted_price: float
    price_change: float
    price_change_percent: float
    direction: TrendDirection
    confidence: int
    horizon: int
    target_date: date
    factors: List[PredictionFactor]
    bounds: PredictionBounds
    models: ModelForecasts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentPrice": self.current_price,
            "predictedPrice": self.predicted_price,
            "priceChange": self.price_change,
            "priceChangePercent": self.price_change_percent,
            "direction": self.direction.value,
            "confidence": self.confidence,
            "horizon": self.horizon,
            "targetDate": self.target_date.isoformat(),
            "factors": [factor.to_dict() for factor in self.factors],
            "bounds": self.bounds.to_dict(),
            "models": self.models.to_dict(),
        }


@dataclass
class ExpectedRange:
    """Range a value was expected to fall in"""
    min: float
    max: float

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max}


@dataclass
class DetectedAnomaly:
    """Atypical price movement found by the anomaly detector"""
    type: AnomalyType
    severity: AnomalySeverity
    description: str
    detected_value: float
    expected_range: ExpectedRange
    deviation_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "severity": self.severity.name,
            "description": self.description,
            "detectedValue": self.detected_value,
            "expectedRange": self.expected_range.to_dict(),
            "deviationPercent": self.deviation_percent,
        }
