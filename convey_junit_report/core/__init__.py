"""
Core modules for convey-junit-report.
"""

from convey_junit_report.core.config import Config, SUPPORTED_FORMATS
from convey_junit_report.core.errors import (
    ConveyJUnitReportError,
    ConfigurationError,
    InputReadError,
    OutputWriteError,
    ReportEncodingError,
)

__all__ = [
    "Config",
    "SUPPORTED_FORMATS",
    "ConveyJUnitReportError",
    "ConfigurationError",
    "InputReadError",
    "OutputWriteError",
    "ReportEncodingError",
]
