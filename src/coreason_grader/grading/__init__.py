"""
Grading of submissions against declarative test definitions.
"""

from .checks import Contains, QualityCheck, Unsupported, parse_check
from .engine import GradingEngine
from .matching import args_from_command, output_matches

__all__ = [
    "Contains",
    "GradingEngine",
    "QualityCheck",
    "Unsupported",
    "args_from_command",
    "output_matches",
    "parse_check",
]
