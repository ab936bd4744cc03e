"""
Utility modules
"""

from .logger import ForecastLogger, get_logger, log_startup_info, setup_logging

__all__ = ["ForecastLogger", "get_logger", "log_startup_info", "setup_logging"]
