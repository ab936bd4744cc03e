"""
Ensemble price predictor

Combines independent models into one prediction:
- SMA crossover momentum
- EMA crossover momentum
- Linear regression projection
- ARIMA and Holt-Winters (when advanced models are enabled)

Model weights adapt to the strength of the linear trend and to the
volatility regime; confidence reflects model agreement, trend
confidence, volatility and the amount of history.
"""

import math
from collections import OrderedDict
from datetime import timedelta
from typing import Dict, List, Optional, Sequence

from pricecast.core.config import PredictorConfig
from pricecast.core.enums import (
    DEFAULT_HORIZONS,
    MAX_CONFIDENCE,
    MEDIUM_TERM_WINDOW,
    MIN_CONFIDENCE,
    FactorImpact,
    TrendDirection,
    VolatilityLevel,
)
from pricecast.core.exceptions import ForecastEngineError, InsufficientDataError, ValidationError
from pricecast.core.models import (
    DataPoint,
    ModelForecasts,
    PredictionBounds,
    PredictionFactor,
    PredictionResult,
    sort_series,
)
from pricecast.indicators.moving_average import calculate_sma, project_price_with_ema
from pricecast.indicators.safe_math import clamp, mean, safe_divide
from pricecast.indicators.trend import analyze_trends, calculate_roc, linear_regression, project_price
from pricecast.indicators.volatility import (
    analyze_volatility,
    calculate_confidence_adjustment,
    calculate_prediction_bounds,
)
from pricecast.utils.logger import get_logger
from .arima import predict_arima
from .holt_winters import predict_holt_winters

logger = get_logger(__name__)

# Base ensemble weights
BASE_WEIGHTS = {"sma": 0.25, "ema": 0.35, "lr": 0.40}
STRONG_TREND_WEIGHTS = {"sma": 0.20, "ema": 0.30, "lr": 0.50}
WEAK_TREND_WEIGHTS = {"sma": 0.35, "ema": 0.45, "lr": 0.20}

# Five-model weights used when ARIMA and Holt-Winters join the ensemble
ADVANCED_BASE_WEIGHTS = {"sma": 0.15, "ema": 0.20, "lr": 0.25, "arima": 0.20, "hw": 0.20}
ADVANCED_STRONG_TREND_WEIGHTS = {"sma": 0.10, "ema": 0.15, "lr": 0.30, "arima": 0.25, "hw": 0.20}
ADVANCED_WEAK_TREND_WEIGHTS = {"sma": 0.15, "ema": 0.25, "lr": 0.15, "arima": 0.20, "hw": 0.25}
MIN_ADVANCED_WEIGHT = 0.05

STRONG_TREND_R2 = 0.7
WEAK_TREND_R2 = 0.3
DIRECTION_THRESHOLD = 1.0       # % change separating UP/DOWN from STABLE
MIN_AGREEMENT_CONFIDENCE = 30.0
DATA_QUALITY_POINTS = 60


def predict_with_sma(values: Sequence[float], days_ahead: int) -> float:
    """Project using the SMA7 vs SMA21 crossover momentum, bounded to +/-30%"""
    current_price = values[-1]
    sma7 = calculate_sma(values, 7)
    sma21 = calculate_sma(values, 21)

    momentum = (sma7 - sma21) / 21
    predicted = current_price + momentum * days_ahead

    return clamp(predicted, current_price * 0.7, current_price * 1.3)


def _normalize(weights: Dict[str, float], floor: float = 0.0) -> Dict[str, float]:
    total = sum(weights.values())
    if total <= 0:
        return {name: 1 / len(weights) for name in weights}
    return {name: max(floor, weight / total) for name, weight in weights.items()}


def calculate_model_weights(
    values: Sequence[float],
    volatility_level: VolatilityLevel
) -> Dict[str, float]:
    """Adaptive weights for the SMA, EMA and linear regression models"""
    _, _, r_squared = linear_regression(values[-MEDIUM_TERM_WINDOW:])

    if r_squared > STRONG_TREND_R2:
        weights = dict(STRONG_TREND_WEIGHTS)
    elif r_squared < WEAK_TREND_R2:
        weights = dict(WEAK_TREND_WEIGHTS)
    else:
        weights = dict(BASE_WEIGHTS)

    if volatility_level == VolatilityLevel.HIGH:
        # EMA reacts faster to volatile markets
        weights["ema"] += 0.10
        weights["lr"] -= 0.10
    elif volatility_level == VolatilityLevel.LOW:
        weights["lr"] += 0.05
        weights["sma"] -= 0.05

    return _normalize(weights)


def calculate_advanced_model_weights(
    values: Sequence[float],
    volatility_level: VolatilityLevel,
    horizon: int
) -> Dict[str, float]:
    """Adaptive weights for the five-model ensemble; longer horizons favour ARIMA and Holt-Winters"""
    _, _, r_squared = linear_regression(values[-MEDIUM_TERM_WINDOW:])

    if r_squared > STRONG_TREND_R2:
        weights = dict(ADVANCED_STRONG_TREND_WEIGHTS)
    elif r_squared < WEAK_TREND_R2:
        weights = dict(ADVANCED_WEAK_TREND_WEIGHTS)
    else:
        weights = dict(ADVANCED_BASE_WEIGHTS)

    if volatility_level == VolatilityLevel.HIGH:
        weights["ema"] += 0.05
        weights["arima"] -= 0.05
    elif volatility_level == VolatilityLevel.LOW:
        weights["lr"] += 0.05
        weights["arima"] += 0.05
        weights["sma"] -= 0.05
        weights["ema"] -= 0.05

    if horizon >= 60:
        shift = 0.10
    elif horizon >= 30:
        shift = 0.05
    else:
        shift = 0.0

    if shift:
        weights["arima"] += shift
        weights["hw"] += shift
        weights["sma"] -= shift
        weights["ema"] -= shift

    return _normalize(weights, floor=MIN_ADVANCED_WEIGHT)


def calculate_prediction_confidence(
    forecasts: Sequence[float],
    ensemble: float,
    trend_confidence: float,
    volatility_level: VolatilityLevel,
    n_points: int,
    horizon: int = 0,
    horizon_decay: bool = False
) -> int:
    """
    Confidence score (25-85) of an ensemble prediction

    Starts from model agreement (dispersion of the individual forecasts
    around the ensemble value), then scales by trend confidence,
    volatility and data quality.
    """
    spread = math.sqrt(mean([(f - ensemble) ** 2 for f in forecasts]))
    forecast_cv = safe_divide(spread, ensemble) * 100

    confidence = max(MIN_AGREEMENT_CONFIDENCE, 100 - forecast_cv * 10)
    confidence *= 0.7 + (trend_confidence / 100) * 0.3
    confidence *= calculate_confidence_adjustment(volatility_level)
    confidence *= 0.8 + 0.2 * min(1.0, n_points / DATA_QUALITY_POINTS)

    if horizon_decay and horizon > 30:
        confidence *= 1 - (horizon - 30) / 200

    return int(round(clamp(confidence, MIN_CONFIDENCE, MAX_CONFIDENCE)))


def _impact(value: float, positive_above: float, negative_below: float) -> FactorImpact:
    if value > positive_above:
        return FactorImpact.POSITIVE
    if value < negative_below:
        return FactorImpact.NEGATIVE
    return FactorImpact.NEUTRAL


def generate_factors(
    values: Sequence[float],
    volatility_level: VolatilityLevel,
    trend_direction: TrendDirection,
    horizon: int,
    include_seasonality: bool = False
) -> List[PredictionFactor]:
    """Explanatory factors of a prediction"""
    factors = []

    roc7 = calculate_roc(values, 7)
    factors.append(PredictionFactor(
        name="Short-term momentum (7d)",
        impact=_impact(roc7, 1, -1),
        weight=0.35 if horizon <= 14 else 0.25,
    ))

    trend_impact = {
        TrendDirection.UP: FactorImpact.POSITIVE,
        TrendDirection.DOWN: FactorImpact.NEGATIVE,
        TrendDirection.STABLE: FactorImpact.NEUTRAL,
    }
    factors.append(PredictionFactor(
        name="Medium-term trend (30d)",
        impact=trend_impact[trend_direction],
        weight=0.30,
    ))

    volatility_impact = {
        VolatilityLevel.LOW: FactorImpact.POSITIVE,
        VolatilityLevel.MEDIUM: FactorImpact.NEUTRAL,
        VolatilityLevel.HIGH: FactorImpact.NEGATIVE,
    }
    factors.append(PredictionFactor(
        name="Volatility",
        impact=volatility_impact[volatility_level],
        weight=0.20,
    ))

    # Near the top of the range expect mean reversion
    window = values[-MEDIUM_TERM_WINDOW:]
    low, high = min(window), max(window)
    position = (values[-1] - low) / ((high - low) or 1)
    if position > 0.7:
        position_impact = FactorImpact.NEGATIVE
    elif position < 0.3:
        position_impact = FactorImpact.POSITIVE
    else:
        position_impact = FactorImpact.NEUTRAL
    factors.append(PredictionFactor(
        name="Range position (30d)",
        impact=position_impact,
        weight=0.15,
    ))

    if include_seasonality and horizon >= 30:
        factors.append(PredictionFactor(
            name="Seasonality detected",
            impact=FactorImpact.NEUTRAL,
            weight=0.10,
        ))

    return factors


def predict_price(
    series: Sequence[DataPoint],
    horizon_days: int = 7,
    config: Optional[PredictorConfig] = None
) -> PredictionResult:
    """
    Ensemble prediction of the price `horizon_days` after the latest observation

    Raises:
        InsufficientDataError: fewer than config.min_data_points observations
        ValidationError: non-positive horizon
    """
    config = config or PredictorConfig()

    if len(series) < config.min_data_points:
        raise InsufficientDataError(config.min_data_points, len(series))
    if horizon_days <= 0:
        raise ValidationError(f"Prediction horizon must be positive, got {horizon_days}")

    ordered = sort_series(series)
    try:
        target_date = ordered[-1].date + timedelta(days=horizon_days)
    except OverflowError as e:
        raise ValidationError(f"Prediction horizon of {horizon_days} days is out of the date range") from e
    values = [point.value for point in ordered]
    current_price = values[-1]

    volatility = analyze_volatility(ordered)
    trends = analyze_trends(ordered)

    sma_prediction = predict_with_sma(values, horizon_days)
    ema_prediction = project_price_with_ema(values, horizon_days)
    lr_prediction = project_price(values, horizon_days)

    forecasts = {"sma": sma_prediction, "ema": ema_prediction, "lr": lr_prediction}

    if config.include_advanced_models:
        try:
            forecasts["arima"] = predict_arima(ordered, horizon_days, config.arima_order)
        except (ForecastEngineError, ArithmeticError, ValueError) as e:
            logger.warning(f"ARIMA failed, falling back to linear regression: {e}")
            forecasts["arima"] = lr_prediction

        try:
            forecasts["hw"] = predict_holt_winters(ordered, horizon_days, config.holt_winters)
        except (ForecastEngineError, ArithmeticError, ValueError) as e:
            logger.warning(f"Holt-Winters failed, falling back to EMA: {e}")
            forecasts["hw"] = ema_prediction

        weights = calculate_advanced_model_weights(values, volatility.volatility_level, horizon_days)
    else:
        weights = calculate_model_weights(values, volatility.volatility_level)

    ensemble = sum(forecasts[name] * weights[name] for name in forecasts)
    ensemble = clamp(ensemble, current_price * 0.5, current_price * 2.0)

    price_change = ensemble - current_price
    price_change_percent = safe_divide(price_change, current_price) * 100

    if price_change_percent > DIRECTION_THRESHOLD:
        direction = TrendDirection.UP
    elif price_change_percent < -DIRECTION_THRESHOLD:
        direction = TrendDirection.DOWN
    else:
        direction = TrendDirection.STABLE

    confidence = calculate_prediction_confidence(
        list(forecasts.values()),
        ensemble,
        trends.confidence,
        volatility.volatility_level,
        len(values),
        horizon=horizon_days,
        horizon_decay=config.include_advanced_models,
    )

    bounds = calculate_prediction_bounds(
        ensemble, volatility, horizon_days, config.confidence_level
    )

    factors = generate_factors(
        values,
        volatility.volatility_level,
        trends.medium_term.trend,
        horizon_days,
        include_seasonality=config.include_advanced_models,
    )

    logger.debug(
        f"Prediction h={horizon_days}: {current_price:.2f} -> {ensemble:.2f} "
        f"({direction.value}, conf {confidence}) weights={weights}"
    )

    return PredictionResult(
        current_price=current_price,
        predicted_price=round(ensemble, 2),
        price_change=round(price_change, 2),
        price_change_percent=round(price_change_percent, 2),
        direction=direction,
        confidence=confidence,
        horizon=horizon_days,
        target_date=target_date,
        factors=factors,
        bounds=PredictionBounds(lower=round(bounds.lower, 2), upper=round(bounds.upper, 2)),
        models=ModelForecasts(
            sma=round(sma_prediction, 2),
            ema=round(ema_prediction, 2),
            linear_regression=round(lr_prediction, 2),
            ensemble=round(ensemble, 2),
            arima=round(forecasts["arima"], 2) if "arima" in forecasts else None,
            holt_winters=round(forecasts["hw"], 2) if "hw" in forecasts else None,
        ),
    )


def predict_multiple_horizons(
    series: Sequence[DataPoint],
    horizons: Optional[Sequence[int]] = None,
    config: Optional[PredictorConfig] = None
) -> Dict[int, PredictionResult]:
    """Predict every horizon independently; failing horizons are logged and omitted"""
    results: Dict[int, PredictionResult] = OrderedDict()

    for horizon in horizons or DEFAULT_HORIZONS:
        try:
            results[horizon] = predict_price(series, horizon, config)
        except ForecastEngineError as e:
            logger.error(f"❌ Error predicting horizon {horizon}: {e}")

    return results
