"""
Test reporting module for convey-junit-report.

This module provides:
- Report data structures (packages, tests, statuses)
- JUnit XML formatting
- Alternative report formats (JSON, YAML, Markdown)
"""

from convey_junit_report.reporting.models import TestResult, TestStatus, Package, Report
from convey_junit_report.reporting.junit import junit_xml, build_junit_tree, format_time
from convey_junit_report.reporting.generator import ReportGenerator

__all__ = [
    "TestResult",
    "TestStatus",
    "Package",
    "Report",
    "junit_xml",
    "build_junit_tree",
    "format_time",
    "ReportGenerator",
]
