"""
Logging utilities for the forecasting engine
"""

import logging
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from pricecast.core.enums import LOG_DATE_FORMAT, LOG_FORMAT


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = False,
    log_dir: str = "logs"
) -> None:
    """
    Setup logging configuration for the engine and CLI

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_to_file: Whether to also log to a daily file
        log_dir: Directory for log files
    """
    if log_to_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)

    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    # stdout carries the JSON output of the CLI
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    log_filepath = None
    if log_to_file:
        log_filename = f"pricecast_{datetime.now().strftime('%Y%m%d')}.log"
        log_filepath = Path(log_dir) / log_filename

        file_handler = logging.FileHandler(log_filepath, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug(f"📊 Log level: {level}")
    if log_filepath:
        logger.info(f"📁 Log file: {log_filepath}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name (typically __name__)"""
    return logging.getLogger(name)


class ForecastLogger:
    """
    Structured log lines for predictions and anomaly scans
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self.prediction_count = 0
        self.scan_count = 0
        self._lock = threading.Lock()

    def log_prediction(self, label: str, result) -> None:
        """Log a PredictionResult"""
        with self._lock:
            self.prediction_count += 1
            number = self.prediction_count
        arrow = {"UP": "📈", "DOWN": "📉"}.get(result.direction.value, "➡️")

        self.logger.info(
            f"{arrow} #{number} {label} +{result.horizon}d: "
            f"{result.current_price:.2f} -> {result.predicted_price:.2f} "
            f"({result.price_change_percent:+.2f}%) | conf: {result.confidence}"
        )

    def log_anomalies(self, label: str, anomalies: Iterable) -> None:
        """Log the findings of one anomaly scan"""
        with self._lock:
            self.scan_count += 1
        anomalies = list(anomalies)

        if not anomalies:
            self.logger.info(f"✅ {label}: no anomalies")
            return

        self.logger.info(f"🚨 {label}: {len(anomalies)} anomalies")
        for anomaly in anomalies:
            self.logger.info(
                f"   {anomaly.severity.name} {anomaly.type.value}: {anomaly.description}"
            )

    def log_error_with_context(
        self,
        error: Exception,
        context: str,
        label: Optional[str] = None
    ) -> None:
        """Log error with forecasting context"""
        message = f"❌ {context}"
        if label:
            message += f" ({label})"
        message += f": {error}"

        self.logger.error(message)


def log_startup_info(config) -> None:
    """Log the effective configuration"""
    logger = get_logger("startup")

    logger.info("=" * 50)
    logger.info("🔮 pricecast starting")
    logger.info("=" * 50)
    logger.info(f"Advanced models: {config.predictor.include_advanced_models}")
    logger.info(f"Confidence level: {config.predictor.confidence_level:.0%}")
    logger.info(f"Default horizons: {config.default_horizons}")
    logger.info(f"Anomaly min points: {config.anomaly.min_data_points}")
    logger.info("=" * 50)
