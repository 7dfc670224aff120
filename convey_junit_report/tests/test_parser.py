import io

import pytest

from convey_junit_report.core.errors import InputReadError
from convey_junit_report.parsing.markers import DOT_PROFILE
from convey_junit_report.parsing.parser import ParserState, ReportParser, parse, parse_text
from convey_junit_report.reporting.models import TestStatus

FAILURE_BLOCK_ONE = [
    "* /home/my project/project_test.go",
    "Line 100:",
    "Expected: '-2'",
    "Actual:   '0'",
    "(Should be equal)",
    "* /home/my project/project_test.go",
    "Line 120:",
    "Expected: 'true'",
    "Actual:   'false'",
    "(Should be equal)",
]

FAILURE_BLOCK_TWO = [
    "* /home/my project/project_test.go",
    "Line 300:",
    "Expected: 'false'",
    "Actual:   'true'",
    "(Should be equal)",
]


def _summary(report):
    return [
        (pkg.name, pkg.time, [(t.name, t.status, t.output) for t in pkg.tests])
        for pkg in report.packages
    ]


def test_single_passing_step_in_glyph_mode():
    report = parse_text("  Given some pre-conditions ✔\n--- PASS: TestX (0.010 seconds)\n")

    assert _summary(report) == [
        ("TestX", 10, [("Given some pre-conditions", TestStatus.PASS, [])]),
    ]


def test_passing_transcript_from_file(data_dir):
    with open(data_dir / "01-pass.txt", encoding="utf-8", newline="\n") as f:
        report = parse(f, use_dot=True)

    assert [pkg.name for pkg in report.packages] == ["TestScenarioOne", "TestScenarioTwo"]
    assert [pkg.time for pkg in report.packages] == [10, 100]

    one, two = report.packages
    assert [t.name for t in one.tests] == [
        "Given some pre-conditions",
        "And other pre-conditions",
        "When something happens",
        "Then everything is fine",
        "And we are cool bro",
    ]
    assert all(t.status == TestStatus.PASS and t.output == [] for t in one.tests)

    assert [(t.name, t.status) for t in two.tests] == [
        ("Given some new pre-conditions", TestStatus.PASS),
        ("When something else happens", TestStatus.PASS),
        ("Then nothing broke here", TestStatus.PASS),
        ("And here was everything fine", TestStatus.PASS),
        ("And this one was skipped", TestStatus.SKIP),
        ("And the last one OK too", TestStatus.PASS),
    ]
    assert all(t.output == [] for t in two.tests)


def test_failing_transcript_attributes_failures_in_test_order(data_dir):
    with open(data_dir / "02-fail.txt", encoding="utf-8", newline="\n") as f:
        report = parse(f, use_dot=True)

    two = report.packages[1]
    assert [(t.name, t.status) for t in two.tests] == [
        ("Given some new pre-conditions", TestStatus.PASS),
        ("When something else happens", TestStatus.PASS),
        ("Then something broke here", TestStatus.FAIL),
        ("And here was everything fine", TestStatus.PASS),
        ("And here not cool bro", TestStatus.FAIL),
        ("And the last one OK", TestStatus.PASS),
    ]
    assert two.tests[2].output == FAILURE_BLOCK_ONE
    assert two.tests[4].output == FAILURE_BLOCK_TWO
    for index in (0, 1, 3, 5):
        assert two.tests[index].output == []


def test_two_failure_markers_on_one_step_keep_both_blocks():
    text = "\n".join([
        "  Given a step that fails twice ✘✘",
        "",
        "Failures:",
        "",
        "  * /src/a_test.go",
        "  first detail",
        "",
        "  * /src/a_test.go",
        "  second detail",
        "",
        "2 assertions thus far",
        "",
        "--- FAIL: TestTwice (0.020 seconds)",
        "",
    ])
    report = parse_text(text)

    test = report.packages[0].tests[0]
    assert test.status == TestStatus.FAIL
    assert test.output == ["* /src/a_test.go", "first detail", "* /src/a_test.go", "second detail"]


def test_consecutive_failed_steps_get_one_block_each():
    text = "\n".join([
        "  Given the first failure ✘",
        "  When the second failure ✘",
        "  Then something passes ✔",
        "Failures:",
        "  * /src/first_test.go",
        "  first detail",
        "  * /src/second_test.go",
        "  second detail",
        "3 assertions thus far",
        "--- FAIL: TestPair (0.001 seconds)",
    ])
    report = parse_text(text)

    first, second, third = report.packages[0].tests
    assert first.output == ["* /src/first_test.go", "first detail"]
    assert second.output == ["* /src/second_test.go", "second detail"]
    assert third.status == TestStatus.PASS
    assert third.output == []


def test_failure_blocks_do_not_leak_across_packages():
    text = "\n".join([
        "  Given failure in one ✘",
        "Failures:",
        "  * /src/one_test.go",
        "  detail one",
        "1 assertion thus far",
        "--- FAIL: TestOne (0.001 seconds)",
        "  Given failure in two ✘",
        "Failures:",
        "  * /src/two_test.go",
        "  detail two",
        "1 assertion thus far",
        "--- FAIL: TestTwo (0.002 seconds)",
    ])
    report = parse_text(text)

    assert report.packages[0].tests[0].output == ["* /src/one_test.go", "detail one"]
    assert report.packages[1].tests[0].output == ["* /src/two_test.go", "detail two"]


def test_skipped_step_never_receives_failure_output():
    text = "\n".join([
        "  Given a skipped step ⚠",
        "  When a failing step ✘",
        "  And another skipped step ⚠",
        "Failures:",
        "  * /src/a_test.go",
        "  detail",
        "1 assertion thus far",
        "--- FAIL: TestMixed (0.003 seconds)",
    ])
    report = parse_text(text)

    skipped_one, failed, skipped_two = report.packages[0].tests
    assert skipped_one.status == TestStatus.SKIP and skipped_one.output == []
    assert skipped_two.status == TestStatus.SKIP and skipped_two.output == []
    assert failed.output == ["* /src/a_test.go", "detail"]


def test_lines_after_assertions_are_not_failure_output():
    text = "\n".join([
        "  Given a failing step ✘",
        "Failures:",
        "  * /src/a_test.go",
        "  detail",
        "1 assertion thus far",
        "  unrelated output",
        "--- FAIL: TestX (0.001 seconds)",
    ])
    report = parse_text(text)

    assert report.packages[0].tests[0].output == ["* /src/a_test.go", "detail"]


def test_whitespace_only_detail_line_is_kept_as_empty_entry():
    text = "\n".join([
        "  Given a failing step ✘",
        "Failures:",
        "  * /src/a_test.go",
        "   ",
        "  detail",
        "--- FAIL: TestX (0.001 seconds)",
    ])
    report = parse_text(text)

    assert report.packages[0].tests[0].output == ["* /src/a_test.go", "", "detail"]


def test_unmatched_failure_entries_are_ignored():
    text = "\n".join([
        "  Given a failing step ✘",
        "Failures:",
        "  * /src/a_test.go",
        "  detail",
        "  * /src/extra_test.go",
        "  extra detail",
        "1 assertion thus far",
        "--- FAIL: TestX (0.001 seconds)",
    ])
    report = parse_text(text)

    assert report.packages[0].tests[0].output == ["* /src/a_test.go", "detail"]


def test_failures_block_without_failed_steps_is_ignored():
    text = "\n".join([
        "  Given a passing step ✔",
        "Failures:",
        "  * /src/a_test.go",
        "  detail",
        "--- PASS: TestX (0.001 seconds)",
    ])
    report = parse_text(text)

    assert report.packages[0].tests[0].output == []


def test_failures_header_outside_test_is_ignored():
    report = parse_text("Failures:\n  * /src/a_test.go\n--- PASS: TestEmpty (0.000 seconds)\n")

    assert len(report.packages) == 1
    assert report.packages[0].tests == ()


def test_trailing_steps_without_summary_are_dropped():
    text = "\n".join([
        "  Given a sealed step ✔",
        "--- PASS: TestSealed (0.001 seconds)",
        "  Given an unsealed step ✔",
        "  Then another unsealed step ✘",
    ])
    report = parse_text(text)

    assert [pkg.name for pkg in report.packages] == ["TestSealed"]
    assert report.total_tests == 1


def test_empty_input_gives_empty_report():
    assert parse_text("").packages == ()


def test_crlf_line_endings_are_stripped():
    text = "  Given windows output .\r\n--- PASS: TestWin (0.005 seconds)\r\n"
    report = parse_text(text, use_dot=True)

    assert report.packages[0].name == "TestWin"
    assert report.packages[0].tests[0].name == "Given windows output"
    assert report.packages[0].tests[0].status == TestStatus.PASS


def test_marker_profile_changes_outcomes():
    text = "  Then it broke x\n--- FAIL: TestX (0.001 seconds)\n"

    assert parse_text(text, use_dot=True).packages[0].tests[0].status == TestStatus.FAIL
    # "x" is not a glyph marker; no trailing success markers still means FAIL
    glyph_test = parse_text(text).packages[0].tests[0]
    assert glyph_test.status == TestStatus.FAIL
    assert glyph_test.name == "Then it broke x"


def test_parser_state_transitions():
    parser = ReportParser(DOT_PROFILE)
    assert parser.state == ParserState.IDLE

    parser.feed("  Given a failing step x")
    assert parser.state == ParserState.IN_TEST

    parser.feed("Failures:")
    assert parser.state == ParserState.IN_FAILURES

    parser.feed("3 assertions thus far")
    assert parser.state == ParserState.IN_TEST

    parser.feed("--- FAIL: TestX (0.001 seconds)")
    assert parser.state == ParserState.IDLE


def test_parse_accepts_any_iterable_of_lines():
    lines = ["  Given a step ✔\n", "--- PASS: TestX (0.001 seconds)\n"]
    report = parse(iter(lines))

    assert report.packages[0].tests[0].name == "Given a step"


class _BrokenStream(io.StringIO):
    def __iter__(self):
        yield "  Given a step ✔\n"
        raise OSError("device not ready")


def test_read_errors_abort_parsing():
    with pytest.raises(InputReadError, match="device not ready"):
        parse(_BrokenStream())


def test_strict_stream_decode_errors_are_read_errors():
    stream = io.TextIOWrapper(io.BytesIO(b"  Given a step \xff\n"), encoding="utf-8")

    with pytest.raises(InputReadError):
        parse(stream)


def test_replaced_bytes_keep_the_step():
    raw = b"  Given caf\xe9 step \xe2\x9c\x94\n--- PASS: TestX (0.010 seconds)\n"
    stream = io.TextIOWrapper(io.BytesIO(raw), encoding="utf-8", errors="replace", newline="\n")

    test = parse(stream).packages[0].tests[0]
    assert test.name == "Given caf� step"
    assert test.status == TestStatus.PASS
