# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_grader

RUN_KEYWORD = ("cargo", "run")
ARG_SEPARATOR = "--"


def args_from_command(command: str | None) -> list[str]:
    """Extract program arguments from a human-written invocation.

    ``cargo run -- 32 F`` gives ``["32", "F"]``. Without a ``--`` token the
    words after ``cargo run`` are used, minus long Cargo flags such as
    ``--quiet``. Short tokens like ``-3`` are kept. Any other text yields no
    arguments.

    Args:
        command: The invocation string of a functional test, if any.

    Returns:
        list[str]: Arguments to pass to the program.
    """
    if not command:
        return []
    tokens = command.split()
    if ARG_SEPARATOR in tokens:
        return tokens[tokens.index(ARG_SEPARATOR) + 1 :]
    if tuple(tokens[: len(RUN_KEYWORD)]) == RUN_KEYWORD:
        return [t for t in tokens[len(RUN_KEYWORD) :] if not t.startswith("--")]
    return []


def _normalize(text: str) -> str:
    return text.strip().replace("\r\n", "\n")


def output_matches(actual: str, expected: str | None) -> bool:
    """Compare program output with the expected text.

    Both sides are trimmed and CRLF line endings become LF. The output passes
    when it equals the expected text or contains it. ``None`` means the output
    is not checked.
    """
    if expected is None:
        return True
    got = _normalize(actual)
    want = _normalize(expected)
    # Substring acceptance is lenient ("5" matches "15"); existing curriculum
    # content relies on it.
    return got == want or want in got
