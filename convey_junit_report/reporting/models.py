"""
Data models for test reporting.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Dict, Any


class TestStatus(Enum):
    """Test execution status."""
    __test__ = False  # not a pytest test class

    PASS = "PASS"
    FAIL = "FAIL"
    SKIP = "SKIP"


@dataclass
class TestResult:
    """A single narration step (Given/When/Then/And) and its outcome."""
    __test__ = False  # not a pytest test class

    name: str
    status: TestStatus
    output: List[str] = field(default_factory=list)  # failure detail lines, FAIL only

    @property
    def failed(self) -> bool:
        return self.status == TestStatus.FAIL

    @property
    def skipped(self) -> bool:
        return self.status == TestStatus.SKIP

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization, excluding empty output."""
        result = {
            "name": self.name,
            "status": self.status.value,
        }
        if self.output:
            result["output"] = list(self.output)
        return result


@dataclass(frozen=True)
class Package:
    """A Go test function (one "--- PASS/FAIL:" line) and the steps it ran."""
    name: str
    time: int  # milliseconds
    tests: Tuple[TestResult, ...] = ()

    @property
    def classname(self) -> str:
        """Last path segment of the package name."""
        index = self.name.rfind("/")
        if index > -1:
            return self.name[index + 1:]
        return self.name

    @property
    def failures(self) -> int:
        return sum(1 for test in self.tests if test.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for test in self.tests if test.skipped)

    @property
    def passed(self) -> int:
        return len(self.tests) - self.failures - self.skipped

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "time": self.time,
            "tests": [test.to_dict() for test in self.tests],
        }


@dataclass(frozen=True)
class Report:
    """Complete parse result: packages in the order their summaries appeared."""
    packages: Tuple[Package, ...] = ()

    @property
    def total_tests(self) -> int:
        return sum(len(pkg.tests) for pkg in self.packages)

    @property
    def total_failures(self) -> int:
        return sum(pkg.failures for pkg in self.packages)

    @property
    def total_skipped(self) -> int:
        return sum(pkg.skipped for pkg in self.packages)

    @property
    def total_time(self) -> int:
        return sum(pkg.time for pkg in self.packages)

    def get_status_counts(self) -> Dict[str, int]:
        """Get count of tests by status."""
        return {
            "passed": self.total_tests - self.total_failures - self.total_skipped,
            "failed": self.total_failures,
            "skipped": self.total_skipped,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON/YAML serialization."""
        return {
            "tests": self.total_tests,
            "failures": self.total_failures,
            "skipped": self.total_skipped,
            "time": self.total_time,
            "packages": [pkg.to_dict() for pkg in self.packages],
        }
