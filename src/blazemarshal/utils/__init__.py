"""
Utility helpers shared across blazemarshal packages.
"""

from .logging import configure_logging, get_logger, time_call
from .performance import ScanTracker

__all__ = ["ScanTracker", "configure_logging", "get_logger", "time_call"]
