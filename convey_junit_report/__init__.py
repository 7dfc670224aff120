"""
convey-junit-report

Converts GoConvey console output into JUnit XML reports for CI systems.
"""

__version__ = "0.1.0"

from convey_junit_report.core.config import Config
from convey_junit_report.parsing import parse, parse_text, ReportParser
from convey_junit_report.reporting import Report, ReportGenerator, junit_xml

__all__ = [
    "Config",
    "parse",
    "parse_text",
    "ReportParser",
    "Report",
    "ReportGenerator",
    "junit_xml",
]
