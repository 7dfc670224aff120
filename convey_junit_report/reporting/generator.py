"""
Report generator for multiple output formats.
"""

import json
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional

import yaml

from convey_junit_report.core.config import SUPPORTED_FORMATS
from convey_junit_report.core.errors import ConfigurationError, OutputWriteError, ReportEncodingError
from convey_junit_report.core.logging import get_logger
from convey_junit_report.reporting.junit import format_time, junit_xml
from convey_junit_report.reporting.models import Report

FILE_EXTENSIONS = {
    "junit": "xml",
    "json": "json",
    "yaml": "yaml",
    "md": "md",
}


class ReportGenerator:
    """Render a parsed Report in one of the supported formats."""

    def __init__(self, runtime_version: Optional[str] = None):
        self.runtime_version = runtime_version
        self.logger = get_logger(__name__)

    def render(self, report: Report, format_type: str = "junit") -> str:
        """
        Render report as text.

        Args:
            report: Report object
            format_type: One of junit, json, yaml, md

        Returns:
            Document text
        """
        if format_type == "junit":
            return junit_xml(report, self.runtime_version)
        elif format_type == "json":
            return json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n"
        elif format_type == "yaml":
            try:
                return yaml.safe_dump(report.to_dict(), default_flow_style=False,
                                      sort_keys=False, allow_unicode=True)
            except yaml.YAMLError as e:
                raise ReportEncodingError(f"Failed to encode YAML report: {e}") from e
        elif format_type == "md":
            return self._create_markdown_content(report)
        raise ConfigurationError(
            f"Unsupported output format '{format_type}'. Choose one of: {', '.join(SUPPORTED_FORMATS)}"
        )

    def encode(self, document: str) -> bytes:
        """Encode a rendered document as UTF-8."""
        try:
            return document.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ReportEncodingError(f"Failed to encode report as UTF-8: {e}") from e

    def write(self,
              report: Report,
              format_type: str = "junit",
              output: Optional[Path] = None,
              stream: Optional[BinaryIO] = None) -> int:
        """
        Render, encode and write a report to a file or a binary stream.

        Returns:
            Number of bytes written
        """
        data = self.encode(self.render(report, format_type))
        try:
            if output is not None:
                output.parent.mkdir(parents=True, exist_ok=True)
                output.write_bytes(data)
                self.logger.info(f"Wrote {format_type} report to {output}")
            elif stream is not None:
                stream.write(data)
                stream.flush()
            else:
                raise OutputWriteError("No output file or stream given")
        except OSError as e:
            raise OutputWriteError(f"Failed to write {format_type} report: {e}") from e
        return len(data)

    def generate_reports(self,
                         report: Report,
                         output_dir: Path,
                         formats: List[str] = None) -> Dict[str, Path]:
        """
        Generate report files in several formats.

        Args:
            report: Report object
            output_dir: Directory for the generated files
            formats: List of formats to generate (defaults to junit only)

        Returns:
            Dictionary mapping format to output file path
        """
        if formats is None:
            formats = ["junit"]

        generated_files = {}
        for format_type in formats:
            file_path = output_dir / f"report.{FILE_EXTENSIONS.get(format_type, format_type)}"
            self.write(report, format_type, output=file_path)
            generated_files[format_type] = file_path
        return generated_files

    def _create_markdown_content(self, report: Report) -> str:
        """Create Markdown content for the report."""
        status_counts = report.get_status_counts()
        total = report.total_tests

        md = f"""# GoConvey Test Report

## Summary

- **Packages:** {len(report.packages)}
- **Total Tests:** {total}
- **Duration:** {format_time(report.total_time)} seconds

## Results Overview

| Status | Count | Percentage |
|--------|-------|------------|
"""
        for status_name, count in status_counts.items():
            if count > 0:
                rate = (count / total * 100) if total > 0 else 0
                md += f"| {status_name.title()} | {count} | {rate:.1f}% |\n"

        md += "\n## Packages\n\n"
        md += "| Package | Tests | Passed | Failed | Skipped | Time (s) |\n"
        md += "|---------|-------|--------|--------|---------|----------|\n"
        for pkg in report.packages:
            md += (f"| {pkg.name} | {len(pkg.tests)} | {pkg.passed} | {pkg.failures} "
                   f"| {pkg.skipped} | {format_time(pkg.time)} |\n")

        failed = [(pkg, test) for pkg in report.packages for test in pkg.tests if test.failed]
        if failed:
            md += "\n## Failures\n\n"
            for pkg, test in failed:
                md += f"### {pkg.classname}: {test.name}\n\n"
                if test.output:
                    md += "```\n"
                    for line in test.output:
                        md += f"{line}\n"
                    md += "```\n\n"
                else:
                    md += "_No failure detail captured._\n\n"

        return md
