"""
Parsing of GoConvey console output.
"""

from convey_junit_report.parsing.markers import MarkerProfile, GLYPH_PROFILE, DOT_PROFILE, get_marker_profile
from convey_junit_report.parsing.classifier import LineClassifier, LineKind, parse_time
from convey_junit_report.parsing.parser import ReportParser, ParserState, parse, parse_text

__all__ = [
    "MarkerProfile",
    "GLYPH_PROFILE",
    "DOT_PROFILE",
    "get_marker_profile",
    "LineClassifier",
    "LineKind",
    "parse_time",
    "ReportParser",
    "ParserState",
    "parse",
    "parse_text",
]
