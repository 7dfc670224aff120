"""
Line classifier for GoConvey console output.
"""

import re
from enum import Enum
from typing import Optional, Tuple

from convey_junit_report.parsing.markers import MarkerProfile, GLYPH_PROFILE
from convey_junit_report.reporting.models import TestStatus

FAILURES_PREFIX = "Failures:"


class LineKind(Enum):
    """What a single console line represents."""
    TEST_HEADER = "test_header"
    PACKAGE_SUMMARY = "package_summary"
    ASSERTIONS = "assertions"
    FAILURES_HEADER = "failures_header"
    OTHER = "other"


def parse_time(seconds: str) -> int:
    """
    Convert a "<seconds>.<fraction>" string to milliseconds.

    The decimal point is removed rather than the value rounded, so "0.010"
    becomes 10. Unparseable values yield 0.
    """
    try:
        return int(seconds.replace(".", ""))
    except ValueError:
        return 0


class LineClassifier:
    """Pattern matchers for one marker profile."""

    def __init__(self, profile: MarkerProfile = GLYPH_PROFILE):
        self.profile = profile
        success = re.escape(profile.success)
        skip = re.escape(profile.skip)

        self.test_pattern = re.compile(r'^\s+(Given|When|Then|And)', re.IGNORECASE | re.ASCII)
        self.test_success_pattern = re.compile(r'\s(?:' + success + r')*$', re.ASCII)
        self.test_skip_pattern = re.compile(r'\s' + skip + r'$', re.ASCII)
        self.package_pattern = re.compile(r'^--- (PASS|FAIL): (.+) \((\d+\.\d+) seconds\)$', re.ASCII)
        self.assertions_pattern = re.compile(r'^\d+ assertion(s)? thus far$', re.ASCII)

    def classify(self, line: str) -> LineKind:
        """Classify a line (without its line terminator)."""
        if self.is_test_header(line):
            return LineKind.TEST_HEADER
        if self.match_package(line) is not None:
            return LineKind.PACKAGE_SUMMARY
        if self.is_assertions(line):
            return LineKind.ASSERTIONS
        if self.is_failures_header(line):
            return LineKind.FAILURES_HEADER
        return LineKind.OTHER

    def is_test_header(self, line: str) -> bool:
        return self.test_pattern.search(line) is not None

    def is_assertions(self, line: str) -> bool:
        return self.assertions_pattern.search(line) is not None

    def is_failures_header(self, line: str) -> bool:
        return line.startswith(FAILURES_PREFIX)

    def match_package(self, line: str) -> Optional[Tuple[str, int]]:
        """Return (package name, time in ms) for a package summary line."""
        match = self.package_pattern.search(line)
        if match is None:
            return None
        return match.group(2), parse_time(match.group(3))

    def test_status(self, line: str) -> TestStatus:
        """
        Decide the outcome of a test header line from its trailing markers.

        Anything not ending in whitespace plus success markers is a failure;
        a trailing skip marker overrides both.
        """
        status = TestStatus.FAIL
        if self.test_success_pattern.search(line):
            status = TestStatus.PASS
        if self.test_skip_pattern.search(line):
            status = TestStatus.SKIP
        return status

    def test_name(self, line: str) -> str:
        return line.rstrip(self.profile.special).strip()

    def failure_count(self, line: str) -> int:
        """Count failure markers after the last space of a header line."""
        index = line.rfind(" ")
        markers = line[index:] if index >= 0 else line
        return markers.count(self.profile.failure)
