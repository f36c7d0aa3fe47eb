"""
Differential testing of chess move generators against a reference engine.

Usage:
    python -m autoperft --help
    python -m autoperft path/to/generator
    python -m autoperft path/to/generator --epd my_suite.epd --start 2 --end 5
"""

from autoperft.constants import (
    STARTPOS_FEN,
    U64_MAX,
    DEFAULT_EPD_FILE,
)

__all__ = [
    # Constants
    'STARTPOS_FEN',
    'U64_MAX',
    'DEFAULT_EPD_FILE',
    # Checking (import from autoperft.checker / autoperft.suite when needed)
    # - PerftChecker, SuiteRunner
]
