# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_grader

"""Static code quality predicates.

A ``check`` expression is parsed once into one of a closed set of
predicates. Anything that does not parse becomes ``Unsupported``, which
never passes.
"""

import re
from dataclasses import dataclass

_CONTAINS = re.compile(r"contains '(.*)'", re.DOTALL)


@dataclass(frozen=True)
class Contains:
    literal: str

    def evaluate(self, source: str) -> bool:
        return self.literal in source


@dataclass(frozen=True)
class Unsupported:
    expression: str | None

    def evaluate(self, source: str) -> bool:
        return False


QualityCheck = Contains | Unsupported


def parse_check(expression: str | None) -> QualityCheck:
    """Parse a check such as ``contains 'mut count'``.

    The whole expression must match; an empty literal always passes.
    """
    if expression is None:
        return Unsupported(expression)
    match = _CONTAINS.fullmatch(expression)
    if match is None:
        return Unsupported(expression)
    return Contains(match.group(1))
