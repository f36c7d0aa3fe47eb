"""
Constants for the perft verification harness.
"""

from pathlib import Path

STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# Node counts are unsigned 64-bit on the wire
U64_MAX = 2 ** 64 - 1

# EPD obligation layout: "D<depth> <count>" with a one-character depth slot
EPD_DEPTH_SLOT = slice(1, 2)
EPD_COUNT_OFFSET = 3

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_EPD_FILE = DATA_DIR / "standard.epd"

# Environment overrides (also read from .env)
ENV_EPD_FILE = "AUTOPERFT_EPD"
ENV_TIMEOUT = "AUTOPERFT_TIMEOUT"

DEFAULT_CONFIG_FILE = "autoperft.toml"
CONFIG_TABLE = "autoperft"
