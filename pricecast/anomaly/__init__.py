"""
Anomaly detection
"""

from .detector import detect_anomalies, format_expected_range, get_severity, z_score

__all__ = ["detect_anomalies", "format_expected_range", "get_severity", "z_score"]
