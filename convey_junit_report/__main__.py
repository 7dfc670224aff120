"""
Entry point for running convey_junit_report as a module.

Usage:
    python -m convey_junit_report [command] [options]
"""

from convey_junit_report.cli import main

if __name__ == "__main__":
    main()
