"""
Custom exceptions for convey-junit-report.
"""


class ConveyJUnitReportError(Exception):
    """Base exception for all convey-junit-report errors."""
    pass


class ConfigurationError(ConveyJUnitReportError):
    """Raised when configuration is invalid."""
    pass


class InputReadError(ConveyJUnitReportError):
    """Raised when the console transcript cannot be read."""
    pass


class OutputWriteError(ConveyJUnitReportError):
    """Raised when the report document cannot be written."""
    pass


class ReportEncodingError(ConveyJUnitReportError):
    """Raised when a report cannot be serialized to its output encoding."""
    pass
