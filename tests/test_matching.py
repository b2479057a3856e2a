import pytest

from coreason_grader.grading import Contains, Unsupported, args_from_command, output_matches, parse_check


@pytest.mark.parametrize(
    "command, expected",
    [
        ("cargo run -- 32 F", ["32", "F"]),
        ("cargo run --quiet", []),
        (None, []),
        ("", []),
        ("   ", []),
        ("cargo run", []),
        ("cargo run 5 7", ["5", "7"]),
        ("cargo run 5 -3", ["5", "-3"]),
        ("cargo run --quiet -- -3", ["-3"]),
        ("cargo run --release 10 -1", ["10", "-1"]),
        ("  cargo   run  --  100   C  ", ["100", "C"]),
        ("cargo run --release -- -5", ["-5"]),
        ("cargo run --", []),
        ("./target/debug/user 1 2", []),
        ("cargo build", []),
    ],
)
def test_args_from_command(command: str | None, expected: list[str]) -> None:
    assert args_from_command(command) == expected


def test_output_matches_normalizes_crlf_and_whitespace() -> None:
    assert output_matches("Count: 1\r\n", "Count: 1")
    assert output_matches(" Count: 1 ", "Count: 1")
    assert output_matches("a\r\nb\r\n", "a\nb")


def test_output_matches_rejects_different_output() -> None:
    assert not output_matches("Count: 2", "Count: 1")
    assert not output_matches("", "Count: 1")


def test_output_matches_accepts_substring() -> None:
    assert output_matches("Starting\nCount: 1\nDone\n", "Count: 1")
    # Lenient on purpose: a bare number also matches inside a larger one.
    assert output_matches("15", "5")


def test_output_matches_without_expectation() -> None:
    assert output_matches("anything at all", None)
    assert output_matches("", None)


def test_output_matches_empty_expectation() -> None:
    assert output_matches("anything", "")


def test_parse_check_contains() -> None:
    check = parse_check("contains 'mut count'")

    assert check == Contains("mut count")
    assert check.evaluate("let mut count = 0;")
    assert not check.evaluate("let count = 0;")


def test_parse_check_literal_with_quotes_inside() -> None:
    check = parse_check("contains 'println!(\"{}\", x)'")
    assert check == Contains('println!("{}", x)')
    assert check.evaluate('fn main() { println!("{}", x); }')


@pytest.mark.parametrize(
    "expression",
    [
        None,
        "",
        "contains mut count",
        "contains 'mut count",
        "contains '",
        "matches 'mut.*'",
        "CONTAINS 'mut'",
        " contains 'mut'",
        "contains 'mut'\n",
        "contains 'mut' ",
    ],
)
def test_parse_check_fails_closed(expression: str | None) -> None:
    check = parse_check(expression)

    assert isinstance(check, Unsupported)
    assert not check.evaluate("let mut count = 0; contains 'mut'")


def test_parse_check_empty_literal_always_passes() -> None:
    check = parse_check("contains ''")

    assert check == Contains("")
    assert check.evaluate("")
    assert check.evaluate("fn main() {}")


def test_parse_check_literal_may_span_lines() -> None:
    check = parse_check("contains 'fn main() {\n'")

    assert check == Contains("fn main() {\n")
