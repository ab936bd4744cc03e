"""
Configuration management for the forecasting engine
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from pricecast.core.config import (
    AnomalyDetectorConfig,
    PredictorConfig,
    ThresholdSet,
    deep_merge,
)
from pricecast.core.enums import DEFAULT_HORIZONS, MIN_ANOMALY_POINTS
from pricecast.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class ForecastConfig:
    """Main configuration for the forecasting engine"""

    predictor: PredictorConfig = field(default_factory=PredictorConfig)
    anomaly: AnomalyDetectorConfig = field(default_factory=AnomalyDetectorConfig)
    default_horizons: List[int] = field(default_factory=lambda: list(DEFAULT_HORIZONS))

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None) -> "ForecastConfig":
        data = data or {}
        defaults = cls()
        return cls(
            predictor=PredictorConfig.from_dict(data.get("predictor")),
            anomaly=AnomalyDetectorConfig.from_dict(data.get("anomaly")),
            default_horizons=[int(h) for h in data.get("default_horizons", defaults.default_horizons)],
            log_level=str(data.get("log_level", defaults.log_level)),
            log_to_file=bool(data.get("log_to_file", defaults.log_to_file)),
            log_dir=str(data.get("log_dir", defaults.log_dir)),
        )

    def validate(self) -> bool:
        """Validate configuration"""
        if not self.predictor.validate() or not self.anomaly.validate():
            return False

        if not self.default_horizons or any(h <= 0 for h in self.default_horizons):
            logger.error("default_horizons must be a non-empty list of positive days")
            return False

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            logger.warning(f"Unknown log level {self.log_level}, using INFO")
            self.log_level = "INFO"

        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return asdict(self)

    def save(self, filepath: str) -> None:
        """Save configuration to file"""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Configuration saved to {filepath}")


def load_env_config() -> Dict[str, Any]:
    """Load configuration overrides from environment variables (and .env)"""
    load_dotenv()

    env_config: Dict[str, Any] = {}

    if os.getenv("PRICECAST_LOG_LEVEL"):
        env_config["log_level"] = os.getenv("PRICECAST_LOG_LEVEL")

    if os.getenv("PRICECAST_LOG_TO_FILE"):
        env_config["log_to_file"] = os.getenv("PRICECAST_LOG_TO_FILE", "false").lower() == "true"

    if os.getenv("PRICECAST_MIN_DATA_POINTS"):
        env_config["anomaly"] = {"min_data_points": int(os.getenv("PRICECAST_MIN_DATA_POINTS"))}

    if os.getenv("PRICECAST_ADVANCED_MODELS"):
        env_config["predictor"] = {
            "include_advanced_models": os.getenv("PRICECAST_ADVANCED_MODELS", "false").lower() == "true"
        }

    return env_config


def load_config_file(filepath: str, required: bool = False) -> Dict[str, Any]:
    """Load configuration from a JSON file"""
    if not os.path.exists(filepath):
        if required:
            raise ConfigurationError(f"Config file not found: {filepath}")
        logger.warning(f"Config file not found: {filepath}")
        return {}

    try:
        with open(filepath, "r") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        if required:
            raise ConfigurationError(f"Error loading config file {filepath}: {e}") from e
        logger.error(f"Error loading config file {filepath}: {e}")
        return {}


def create_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> ForecastConfig:
    """Create configuration with precedence: overrides > env vars > config file > defaults"""
    config_data: Dict[str, Any] = {}

    env_config = load_env_config()
    config_path = config_path or os.getenv("PRICECAST_CONFIG")

    if config_path:
        config_data = deep_merge(config_data, load_config_file(config_path, required=True))
    else:
        default_config_path = Path(__file__).parent / "forecast_config.json"
        if default_config_path.exists():
            config_data = deep_merge(config_data, load_config_file(str(default_config_path)))

    config_data = deep_merge(config_data, env_config)
    config_data = deep_merge(config_data, overrides or {})

    try:
        return ForecastConfig.from_dict(config_data)
    except (TypeError, ValueError, KeyError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def validate_config(config: ForecastConfig) -> bool:
    """Validate configuration and log warnings"""
    if not config.validate():
        return False

    if config.anomaly.min_data_points < MIN_ANOMALY_POINTS:
        logger.warning(f"Low anomaly min_data_points: {config.anomaly.min_data_points}")

    if max(config.default_horizons) > 90:
        logger.warning(f"Horizons beyond 90 days are unreliable: {config.default_horizons}")

    return True


def create_default_config_file() -> None:
    """Create default configuration file"""
    config = ForecastConfig()
    config_path = Path(__file__).parent / "forecast_config.json"
    config.save(str(config_path))
    logger.info(f"Default config created at {config_path}")


__all__ = [
    "AnomalyDetectorConfig",
    "ForecastConfig",
    "PredictorConfig",
    "ThresholdSet",
    "create_config",
    "deep_merge",
    "load_config_file",
    "load_env_config",
    "validate_config",
]


if __name__ == "__main__":
    create_default_config_file()
