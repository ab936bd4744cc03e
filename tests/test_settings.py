import json

import pytest

from config.settings import (
    ForecastConfig,
    create_config,
    load_config_file,
    load_env_config,
    validate_config,
)
from pricecast.core.config import AnomalyDetectorConfig, PredictorConfig, ThresholdSet, deep_merge
from pricecast.core.exceptions import ConfigurationError

ENV_VARS = [
    "PRICECAST_CONFIG",
    "PRICECAST_LOG_LEVEL",
    "PRICECAST_LOG_TO_FILE",
    "PRICECAST_MIN_DATA_POINTS",
    "PRICECAST_ADVANCED_MODELS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_deep_merge_keeps_untouched_keys():
    base = {"a": {"x": 1, "y": 2}, "b": 3}
    merged = deep_merge(base, {"a": {"y": 20}})

    assert merged == {"a": {"x": 1, "y": 20}, "b": 3}
    assert base == {"a": {"x": 1, "y": 2}, "b": 3}


def test_anomaly_config_partial_thresholds():
    config = AnomalyDetectorConfig.from_dict({"z_score_thresholds": {"high": 10.0}})
    assert config.z_score_thresholds == ThresholdSet(low=1.5, medium=2.0, high=10.0)
    assert config.daily_change_thresholds == ThresholdSet(low=3.0, medium=5.0, high=8.0)
    assert config.min_data_points == 14


def test_predictor_config_defaults():
    config = PredictorConfig.from_dict({"holt_winters": {"alpha": 0.5}})
    assert config.min_data_points == 7
    assert config.holt_winters.alpha == 0.5
    assert config.holt_winters.seasonal_period == 7
    assert (config.arima_order.p, config.arima_order.d, config.arima_order.q) == (2, 1, 1)


def test_defaults_validate():
    config = ForecastConfig()
    assert config.validate()
    assert validate_config(config)
    assert config.default_horizons == [7, 14, 30, 60, 90]


def test_unordered_thresholds_are_invalid():
    config = AnomalyDetectorConfig.from_dict({"z_score_thresholds": {"low": 3.0}})
    assert not config.validate()


def test_invalid_predictor_config():
    assert not PredictorConfig(confidence_level=1.5).validate()
    assert not PredictorConfig.from_dict({"holt_winters": {"gamma": 0}}).validate()


def test_invalid_horizons():
    assert not ForecastConfig(default_horizons=[7, 0]).validate()


def test_unknown_log_level_falls_back():
    config = ForecastConfig(log_level="LOUD")
    assert config.validate()
    assert config.log_level == "INFO"


def test_save_and_reload(tmp_path):
    config = ForecastConfig.from_dict({"predictor": {"include_advanced_models": True}})
    path = tmp_path / "forecast_config.json"
    config.save(str(path))

    assert ForecastConfig.from_dict(json.loads(path.read_text())) == config


def test_env_config(monkeypatch):
    monkeypatch.setenv("PRICECAST_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("PRICECAST_MIN_DATA_POINTS", "21")
    monkeypatch.setenv("PRICECAST_ADVANCED_MODELS", "true")

    env = load_env_config()
    assert env["log_level"] == "DEBUG"
    assert env["anomaly"] == {"min_data_points": 21}
    assert env["predictor"] == {"include_advanced_models": True}


def test_create_config_precedence(tmp_path, monkeypatch):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({
        "log_level": "WARNING",
        "anomaly": {"min_data_points": 20, "z_score_thresholds": {"high": 3.0}},
    }))
    monkeypatch.setenv("PRICECAST_MIN_DATA_POINTS", "25")

    config = create_config(str(path), overrides={"log_level": "ERROR"})

    assert config.log_level == "ERROR"
    assert config.anomaly.min_data_points == 25
    assert config.anomaly.z_score_thresholds.high == 3.0


def test_create_config_from_env_path(tmp_path, monkeypatch):
    path = tmp_path / "env.json"
    path.write_text(json.dumps({"default_horizons": [5, 10]}))
    monkeypatch.setenv("PRICECAST_CONFIG", str(path))

    assert create_config().default_horizons == [5, 10]


def test_missing_explicit_config_raises(tmp_path):
    with pytest.raises(ConfigurationError):
        create_config(str(tmp_path / "missing.json"))


def test_unreadable_config_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(ConfigurationError):
        create_config(str(path))


def test_optional_config_file_missing_is_empty(tmp_path):
    assert load_config_file(str(tmp_path / "missing.json")) == {}


def test_bad_structure_raises_configuration_error():
    with pytest.raises(ConfigurationError):
        create_config(overrides={"predictor": {"arima_order": {"r": 1}}})
