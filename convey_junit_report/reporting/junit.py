"""
JUnit XML formatter.

Produces the document layout described at
http://windyroad.org/dl/Open%20Source/JUnit.xsd with a stable attribute order
so output can be compared against golden files byte for byte.
"""

import platform
import re
import xml.etree.ElementTree as ET
from typing import List, Optional, Union

from convey_junit_report.reporting.models import Report, TestStatus

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
VERSION_PROPERTY = "python.version"
FAILURE_MESSAGE = "Failed"
INDENT = "\t"

# Characters outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile(
    "[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)

# Same references in text and attribute values; whitespace is escaped too so
# readers never normalize it away
_ESCAPES = {
    '"': "&#34;",
    "'": "&#39;",
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "\t": "&#x9;",
    "\n": "&#xA;",
    "\r": "&#xD;",
}
_ESCAPE_CHARS = re.compile("[\"'&<>\t\n\r]")


def format_time(milliseconds: int) -> str:
    """Format milliseconds as seconds with three decimals (1500 -> "1.500")."""
    return f"{milliseconds / 1000.0:.3f}"


def _xml_safe(text: str) -> str:
    return _INVALID_XML_CHARS.sub("\ufffd", text)


def escape_xml(text: str) -> str:
    """Escape text for use as character data or as an attribute value."""
    return _ESCAPE_CHARS.sub(lambda m: _ESCAPES[m.group()], _xml_safe(text))


def _set_attr(element: ET.Element, key: str, value: Union[str, int]) -> None:
    """Set an attribute unless it holds its zero value."""
    if value in (0, "", None):
        return
    element.set(key, str(value))


def build_junit_tree(report: Report, runtime_version: Optional[str] = None) -> ET.Element:
    """Convert a Report to a <testsuites> element."""
    if runtime_version is None:
        runtime_version = platform.python_version()

    testsuites = ET.Element("testsuites")
    testsuites.set("tests", str(report.total_tests))
    _set_attr(testsuites, "failures", report.total_failures)
    _set_attr(testsuites, "errors", 0)
    _set_attr(testsuites, "disabled", 0)
    testsuites.set("time", format_time(report.total_time))

    for pkg in report.packages:
        testsuite = ET.SubElement(testsuites, "testsuite")
        testsuite.set("tests", str(len(pkg.tests)))
        _set_attr(testsuite, "failures", pkg.failures)
        _set_attr(testsuite, "errors", 0)
        _set_attr(testsuite, "disabled", 0)
        _set_attr(testsuite, "skipped", pkg.skipped)
        _set_attr(testsuite, "time", format_time(pkg.time))
        _set_attr(testsuite, "name", pkg.name)

        properties = ET.SubElement(testsuite, "properties")
        ET.SubElement(properties, "property", {"name": VERSION_PROPERTY, "value": runtime_version})

        for test in pkg.tests:
            testcase = ET.SubElement(testsuite, "testcase")
            testcase.set("classname", pkg.classname)
            testcase.set("name", test.name)

            if test.status == TestStatus.FAIL:
                failure = ET.SubElement(testcase, "failure", {"message": FAILURE_MESSAGE, "type": ""})
                failure.text = "\n".join(test.output)
            elif test.status == TestStatus.SKIP:
                ET.SubElement(testcase, "skipped")

    return testsuites


def _write_element(element: ET.Element, depth: int, parts: List[str]) -> None:
    """Append one element, tab indented, with start and end tags even when empty."""
    attrs = "".join(f' {key}="{escape_xml(value)}"' for key, value in element.attrib.items())
    parts.append(f"{INDENT * depth}<{element.tag}{attrs}>")
    if len(element):
        parts.append("\n")
        for child in element:
            _write_element(child, depth + 1, parts)
            parts.append("\n")
        parts.append(INDENT * depth)
    elif element.text:
        parts.append(escape_xml(element.text))
    parts.append(f"</{element.tag}>")


def junit_xml(report: Report, runtime_version: Optional[str] = None) -> str:
    """
    Render a Report as a JUnit XML document.

    Args:
        report: Parsed report
        runtime_version: Value of the version property (defaults to the running interpreter)

    Returns:
        Document text with declaration, tab indentation and a trailing newline
    """
    parts: List[str] = []
    _write_element(build_junit_tree(report, runtime_version), 0, parts)
    return XML_HEADER + "".join(parts) + "\n"
