"""
Concurrent analysis of several price series

The engine functions are pure and synchronous; each series is analysed
in a worker thread and the results are gathered on the event loop.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pricecast.anomaly.detector import detect_anomalies
from pricecast.core.config import AnomalyDetectorConfig, PredictorConfig
from pricecast.core.exceptions import ForecastEngineError, InsufficientDataError, ValidationError
from pricecast.core.models import DataPoint
from pricecast.data.loader import series_to_frame
from pricecast.indicators.moving_average import analyze_moving_averages
from pricecast.indicators.trend import analyze_trends
from pricecast.indicators.volatility import analyze_volatility
from pricecast.utils.logger import ForecastLogger
from .predictor import predict_multiple_horizons, predict_price

MODES = ("predict", "horizons", "anomalies", "report")

forecast_logger = ForecastLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of analysing one labelled series"""
    label: str
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"label": self.label, "result": self.data}
        return {"label": self.label, "error": self.error}


def analyze_series(
    series: Sequence[DataPoint],
    mode: str = "predict",
    horizon: int = 7,
    horizons: Optional[Sequence[int]] = None,
    predictor_config: Optional[PredictorConfig] = None,
    anomaly_config: Optional[AnomalyDetectorConfig] = None,
    label: str = "series"
) -> Dict[str, Any]:
    """Run one analysis mode on a series and return a JSON-ready dict"""
    if mode not in MODES:
        raise ValidationError(f"Unknown mode {mode!r}, expected one of {MODES}")

    if mode == "predict":
        result = predict_price(series, horizon, predictor_config)
        forecast_logger.log_prediction(label, result)
        return result.to_dict()

    if mode == "horizons":
        results = predict_multiple_horizons(series, horizons, predictor_config)
        for prediction in results.values():
            forecast_logger.log_prediction(label, prediction)
        return {str(h): prediction.to_dict() for h, prediction in results.items()}

    if mode == "anomalies":
        anomalies = detect_anomalies(series, anomaly_config)
        forecast_logger.log_anomalies(label, anomalies)
        return {"anomalies": [anomaly.to_dict() for anomaly in anomalies]}

    # report
    if not series:
        raise InsufficientDataError(1, 0, "Cannot report on an empty series")

    anomalies = detect_anomalies(series, anomaly_config)
    forecast_logger.log_anomalies(label, anomalies)
    frame = series_to_frame(series)
    weekly = frame["value"].resample("W").mean().dropna()

    return {
        "points": len(series),
        "period": {
            "start": frame.index.min().date().isoformat(),
            "end": frame.index.max().date().isoformat(),
        },
        "weeklyAverages": {
            week.date().isoformat(): round(float(value), 2) for week, value in weekly.items()
        },
        "volatility": analyze_volatility(series).to_dict(),
        "movingAverages": analyze_moving_averages(series).to_dict(),
        "trends": analyze_trends(series).to_dict(),
        "predictions": {
            str(h): prediction.to_dict()
            for h, prediction in predict_multiple_horizons(series, horizons, predictor_config).items()
        },
        "anomalies": [anomaly.to_dict() for anomaly in anomalies],
    }


async def run_batch(
    inputs: Mapping[str, Sequence[DataPoint]],
    mode: str = "predict",
    **options: Any
) -> List[BatchResult]:
    """
    Analyse every labelled series concurrently

    A failing series is reported in its BatchResult and does not abort
    the rest of the batch. Results keep the order of `inputs`.
    """
    labels = list(inputs)
    tasks = [
        asyncio.to_thread(analyze_series, inputs[label], mode, label=label, **options)
        for label in labels
    ]

    outcomes = await asyncio.gather(*tasks, return_exceptions=True)

    results = []
    for label, outcome in zip(labels, outcomes):
        if isinstance(outcome, ForecastEngineError):
            forecast_logger.log_error_with_context(outcome, "Analysis failed", label)
            results.append(BatchResult(label=label, error=str(outcome)))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append(BatchResult(label=label, data=outcome))

    return results
