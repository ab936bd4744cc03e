"""
Price series loading
"""

from .loader import frame_to_series, load_series, series_from_records, series_to_frame

__all__ = ["frame_to_series", "load_series", "series_from_records", "series_to_frame"]
