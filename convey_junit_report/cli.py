"""
Command-line interface for convey-junit-report.

This module provides a subcommand-based CLI using Typer.
"""

import io
import sys
from pathlib import Path
from typing import List, Optional, TextIO

import typer

from convey_junit_report.core.config import Config, SUPPORTED_FORMATS
from convey_junit_report.core.errors import (
    ConfigurationError,
    InputReadError,
    OutputWriteError,
    ReportEncodingError,
)
from convey_junit_report.core.logging import setup_logger
from convey_junit_report.parsing import get_marker_profile, ReportParser
from convey_junit_report.reporting import Report, ReportGenerator, format_time

app = typer.Typer(
    name="convey_junit_report",
    help="Convert GoConvey console output into JUnit XML reports",
    add_completion=False,
)


def get_config(
    verbosity: Optional[int] = None,
    **kwargs
) -> Config:
    """Create Config from the options that were actually given."""
    init_kwargs = {}
    for key, value in kwargs.items():
        if key in Config.__dataclass_fields__ and value is not None:
            init_kwargs[key] = value
    if verbosity is not None:
        init_kwargs["verbosity"] = verbosity
    try:
        return Config(**init_kwargs)
    except ConfigurationError as e:
        typer.echo(f"✗ Invalid configuration: {e}", err=True)
        sys.exit(2)


def _reads_stdin(input_path: Optional[Path]) -> bool:
    return input_path is None or str(input_path) == "-"


def _open_input(input_path: Optional[Path]) -> TextIO:
    """Open the transcript, splitting lines on "\\n" only.

    Bytes that are not valid UTF-8 decode to U+FFFD instead of failing the run.
    """
    if _reads_stdin(input_path):
        buffer = getattr(sys.stdin, "buffer", None)
        if buffer is None:
            return sys.stdin
        return io.TextIOWrapper(buffer, encoding="utf-8", errors="replace", newline="\n")
    try:
        return open(input_path, "r", encoding="utf-8", errors="replace", newline="\n")
    except OSError as e:
        raise InputReadError(f"Cannot open {input_path}: {e}") from e


def read_report(config: Config, input_path: Optional[Path]) -> Report:
    """Parse the transcript or exit with status 1."""
    try:
        stream = _open_input(input_path)
        try:
            return ReportParser(get_marker_profile(config.use_dot)).parse(stream)
        finally:
            if not _reads_stdin(input_path):
                stream.close()
            elif stream is not sys.stdin:
                # Leave the process stdin open
                stream.detach()
    except InputReadError as e:
        typer.echo(f"Error reading input: {e}", err=True)
        sys.exit(1)


def _select_formats(formats: Optional[str], default: str) -> List[str]:
    """Split a comma separated format list, or exit with status 2."""
    if not formats:
        return [default]
    selected = [name.strip().lower() for name in formats.split(",") if name.strip()]
    unknown = [name for name in selected if name not in SUPPORTED_FORMATS]
    if unknown or not selected:
        typer.echo(
            f"✗ Invalid configuration: unsupported format(s) '{formats}'. "
            f"Choose from: {', '.join(SUPPORTED_FORMATS)}",
            err=True,
        )
        sys.exit(2)
    return selected


@app.command()
def convert(
    input_path: Optional[Path] = typer.Option(None, "--input", "-i", help="GoConvey output file (default: stdin)"),
    output_path: Optional[Path] = typer.Option(None, "--output", "-o", help="Report file (default: stdout)"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Write report.<ext> files into this directory"),
    formats: Optional[str] = typer.Option(None, "--formats", help="Comma separated formats for --output-dir (default: --format)"),
    use_dot: bool = typer.Option(False, "--use-dot", help="Parse ASCII markers (GoConvey output generated on Windows)"),
    output_format: Optional[str] = typer.Option(None, "--format", "-f", help=f"Report format ({', '.join(SUPPORTED_FORMATS)})"),
    runtime_version: Optional[str] = typer.Option(None, "--runtime-version", help="Value of the version property in JUnit output"),
    verbosity: Optional[int] = typer.Option(None, "--verbosity", "-v", help="Verbosity level (0-3)"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Write a debug log to this file"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="TOML configuration file"),
):
    """Convert GoConvey output to a JUnit XML (or JSON/YAML/Markdown) report."""
    config = get_config(
        verbosity=verbosity, use_dot=use_dot or None, output_format=output_format,
        runtime_version=runtime_version, log_file=log_file, config_file=config_file,
    )
    if output_dir is not None and output_path is not None:
        typer.echo("✗ Invalid configuration: --output and --output-dir are mutually exclusive", err=True)
        sys.exit(2)
    if formats is not None and output_dir is None:
        typer.echo("✗ Invalid configuration: --formats requires --output-dir", err=True)
        sys.exit(2)
    selected_formats = _select_formats(formats, config.output_format)

    logger = setup_logger(verbosity=config.verbosity, log_file=config.log_file)
    logger.debug(f"Configuration: {config.to_dict()}")

    report = read_report(config, input_path)

    generator = ReportGenerator(runtime_version=config.runtime_version)
    try:
        if output_dir is not None:
            generator.generate_reports(report, output_dir, selected_formats)
        elif output_path is None:
            generator.write(report, config.output_format, stream=sys.stdout.buffer)
        else:
            generator.write(report, config.output_format, output=output_path)
    except (OutputWriteError, ReportEncodingError) as e:
        typer.echo(f"Error writing report: {e}", err=True)
        sys.exit(1)
    sys.exit(0)


@app.command()
def summary(
    input_path: Optional[Path] = typer.Option(None, "--input", "-i", help="GoConvey output file (default: stdin)"),
    use_dot: bool = typer.Option(False, "--use-dot", help="Parse ASCII markers (GoConvey output generated on Windows)"),
    verbosity: Optional[int] = typer.Option(None, "--verbosity", "-v", help="Verbosity level (0-3)"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="TOML configuration file"),
):
    """Print pass/fail/skip counts for each package."""
    config = get_config(verbosity=verbosity, use_dot=use_dot or None, config_file=config_file)
    setup_logger(verbosity=config.verbosity, log_file=config.log_file)

    report = read_report(config, input_path)

    if not report.packages:
        typer.echo("No packages found")
        sys.exit(0)

    for pkg in report.packages:
        mark = "✗" if pkg.failures else "✓"
        typer.echo(
            f"{mark} {pkg.name}: {len(pkg.tests)} tests, {pkg.failures} failed, "
            f"{pkg.skipped} skipped ({format_time(pkg.time)}s)"
        )
    typer.echo(
        f"\nTotal: {report.total_tests} tests, {report.total_failures} failed, "
        f"{report.total_skipped} skipped ({format_time(report.total_time)}s)"
    )
    sys.exit(0)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
