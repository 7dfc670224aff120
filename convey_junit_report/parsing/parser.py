"""
Report parser for GoConvey console output.

Reads the narration line by line and rebuilds packages, their Given/When/Then
steps and the failure detail printed under "Failures:".
"""

import io
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from convey_junit_report.core.errors import InputReadError
from convey_junit_report.core.logging import get_logger
from convey_junit_report.parsing.classifier import LineClassifier, LineKind
from convey_junit_report.parsing.markers import MarkerProfile, get_marker_profile
from convey_junit_report.reporting.models import Package, Report, TestResult, TestStatus


class ParserState(Enum):
    """Where the parser is relative to the current package."""
    IDLE = "idle"
    IN_TEST = "in_test"
    IN_FAILURES = "in_failures"


@dataclass
class FailedTest:
    """A failed test still waiting for its "* <location>" entries."""
    test: TestResult
    remaining: int


def strip_line_ending(line: str) -> str:
    """Remove a trailing "\\n" or "\\r\\n"."""
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


class ReportParser:
    """Stateful builder turning classified lines into a Report."""

    def __init__(self, profile: Optional[MarkerProfile] = None):
        self.profile = profile or get_marker_profile(use_dot=False)
        self.classifier = LineClassifier(self.profile)
        self.logger = get_logger(__name__)

        self.state = ParserState.IDLE
        self._packages: List[Package] = []
        self._tests: List[TestResult] = []
        self._failed_tests: List[FailedTest] = []
        self._cursor = 0
        self._line_number = 0

    def feed(self, line: str) -> None:
        """Consume one line of console output (line terminator already removed)."""
        self._line_number += 1
        kind = self.classifier.classify(line)

        if kind == LineKind.TEST_HEADER:
            self._start_test(line)
        elif kind == LineKind.PACKAGE_SUMMARY:
            name, time_ms = self.classifier.match_package(line)
            self._seal_package(name, time_ms)
        elif self.state == ParserState.IDLE:
            if kind in (LineKind.ASSERTIONS, LineKind.FAILURES_HEADER):
                self.logger.debug(f"Line {self._line_number}: '{line}' outside of a test, ignored")
        elif kind == LineKind.ASSERTIONS:
            self.state = ParserState.IN_TEST
        elif kind == LineKind.FAILURES_HEADER:
            self.state = ParserState.IN_FAILURES
            self._cursor = 0
        elif self.state == ParserState.IN_FAILURES:
            self._read_failure_line(line)

    def _start_test(self, line: str) -> None:
        status = self.classifier.test_status(line)
        test = TestResult(name=self.classifier.test_name(line), status=status)

        if status == TestStatus.FAIL:
            self._failed_tests.append(FailedTest(test, self.classifier.failure_count(line)))

        self._tests.append(test)
        if self.state == ParserState.IDLE:
            self.state = ParserState.IN_TEST

    def _seal_package(self, name: str, time_ms: int) -> None:
        package = Package(name=name, time=time_ms, tests=tuple(self._tests))
        self._packages.append(package)
        self.logger.debug(
            f"Package {name}: {len(package.tests)} tests, {package.failures} failed, "
            f"{package.skipped} skipped ({time_ms} ms)"
        )

        self._tests = []
        self._failed_tests = []
        self._cursor = 0
        self.state = ParserState.IDLE

    def _read_failure_line(self, line: str) -> None:
        stripped = line.strip()

        if stripped.startswith("*"):
            current = self._current_failed_test()
            if current is not None:
                current.remaining -= 1
                if current.remaining < 0:
                    # Markers of this test are used up, the entry belongs to the next one
                    self._cursor += 1
                    current = self._current_failed_test()
                    if current is not None:
                        current.remaining -= 1

        if len(line) > 0:
            current = self._current_failed_test()
            if current is None:
                self.logger.debug(f"Line {self._line_number}: no failed test left for '{stripped}'")
                return
            current.test.output.append(stripped)

    def _current_failed_test(self) -> Optional[FailedTest]:
        if self._cursor < len(self._failed_tests):
            return self._failed_tests[self._cursor]
        return None

    def finish(self) -> Report:
        """Return the report; tests after the last package summary are dropped."""
        if self._tests:
            self.logger.debug(f"Dropping {len(self._tests)} tests not followed by a package summary")
        report = Report(packages=tuple(self._packages))
        self.logger.info(
            f"Parsed {len(report.packages)} packages, {report.total_tests} tests, "
            f"{report.total_failures} failed, {report.total_skipped} skipped"
        )
        return report

    def parse(self, stream: Iterable[str]) -> Report:
        """
        Parse a complete console transcript.

        Args:
            stream: Text stream or any iterable of lines

        Returns:
            Report object

        Raises:
            InputReadError: If reading the stream fails, including decode errors
                from streams opened with strict error handling; no partial report
                is returned
        """
        try:
            for raw_line in stream:
                self.feed(strip_line_ending(raw_line))
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadError(f"Failed after {self._line_number} lines: {e}") from e
        return self.finish()


def parse(stream: Iterable[str],
          use_dot: bool = False,
          profile: Optional[MarkerProfile] = None) -> Report:
    """Parse GoConvey output from ``stream`` using the selected marker profile."""
    if profile is None:
        profile = get_marker_profile(use_dot)
    return ReportParser(profile).parse(stream)


def parse_text(text: str, use_dot: bool = False) -> Report:
    """Parse GoConvey output held in a string."""
    return parse(io.StringIO(text, newline="\n"), use_dot=use_dot)
