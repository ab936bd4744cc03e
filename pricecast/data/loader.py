"""
Loading price series from CSV / JSON files
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

import pandas as pd

from pricecast.core.exceptions import DataLoadError
from pricecast.core.models import DataPoint, sort_series
from pricecast.utils.logger import get_logger

logger = get_logger(__name__)

SUPPORTED_SUFFIXES = (".csv", ".json")


def _read_frame(path: Path) -> pd.DataFrame:
    if path.suffix == ".csv":
        return pd.read_csv(path)

    with open(path, "r") as f:
        data = json.load(f)

    # Either a bare list of records or {"data": [...]}
    if isinstance(data, dict) and "data" in data:
        data = data["data"]
    if not isinstance(data, list):
        raise DataLoadError(f"Unsupported JSON structure in {path}")
    return pd.DataFrame(data)


def frame_to_series(
    df: pd.DataFrame,
    date_column: str = "date",
    value_column: str = "value"
) -> List[DataPoint]:
    """
    Convert a DataFrame into a sorted list of DataPoints

    Rows whose date cannot be parsed or whose value is missing or not
    positive are dropped.
    """
    missing = [column for column in (date_column, value_column) if column not in df.columns]
    if missing:
        raise DataLoadError(f"Missing columns: {missing}")

    frame = pd.DataFrame({
        "date": pd.to_datetime(df[date_column], errors="coerce"),
        "value": pd.to_numeric(df[value_column], errors="coerce"),
    })
    frame = frame.dropna()
    frame = frame[frame["value"] > 0]

    dropped = len(df) - len(frame)
    if dropped:
        logger.warning(f"⚠️ Dropped {dropped} invalid rows")

    series = [
        DataPoint(date=timestamp.date(), value=float(value))
        for timestamp, value in zip(frame["date"], frame["value"])
    ]
    return sort_series(series)


def load_series(
    path: Union[str, Path],
    date_column: str = "date",
    value_column: str = "value"
) -> List[DataPoint]:
    """Load a price series from a .csv or .json file"""
    path = Path(path)

    if path.suffix not in SUPPORTED_SUFFIXES:
        raise DataLoadError(f"Unsupported file type: {path.suffix or path.name}")
    if not path.exists():
        raise DataLoadError(f"File not found: {path}")

    try:
        df = _read_frame(path)
    except (OSError, ValueError) as e:
        raise DataLoadError(f"Error reading {path}: {e}") from e

    series = frame_to_series(df, date_column, value_column)
    logger.info(f"📥 Loaded {len(series)} points from {path.name}")
    return series


def series_from_records(records: Iterable[Dict[str, Any]]) -> List[DataPoint]:
    """Build a sorted series from {'date': ..., 'value': ...} records"""
    try:
        return sort_series(DataPoint.from_dict(record) for record in records)
    except (KeyError, TypeError, ValueError) as e:
        raise DataLoadError(f"Invalid record: {e}") from e


def series_to_frame(series: Iterable[DataPoint]) -> pd.DataFrame:
    """DataFrame with a date index and a 'value' column"""
    points = sort_series(series)
    return pd.DataFrame(
        {"value": [point.value for point in points]},
        index=pd.to_datetime([point.date for point in points]),
    )
