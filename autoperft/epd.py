"""
EPD (Extended Position Description) perft records.

A record pairs a position with the node counts it must produce:

    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1 ;D1 20 ;D2 400
"""

from dataclasses import dataclass
from pathlib import Path

from autoperft.constants import EPD_DEPTH_SLOT, EPD_COUNT_OFFSET
from autoperft.errors import MalformedRecord
from autoperft.splitperft import parse_node_count


@dataclass(frozen=True)
class EpdTest:
    """A position and its ordered (depth, expected_nodes) obligations."""
    fen: str
    obligations: tuple[tuple[int, int], ...]


def parse_epd(line: str) -> EpdTest:
    """
    Parse one EPD perft record.

    The first ';'-separated field is the FEN. Every further field is an
    obligation "D<depth> <count>": the depth is the single character after
    the 'D' marker and the count is everything from offset 3 on.

    Raises:
        MalformedRecord: if the FEN is missing, or a depth or count is
            missing or not a number.
    """
    fen, *fields = line.split(";")
    fen = fen.strip()
    if not fen:
        raise MalformedRecord(f"Missing FEN in {line!r}")

    obligations = []
    for perft_data in fields:
        perft_data = perft_data.strip()
        # A trailing ';' leaves an empty field
        if not perft_data:
            continue

        depth = perft_data[EPD_DEPTH_SLOT].strip()
        if not depth:
            raise MalformedRecord(f"Missing depth value in {perft_data!r}")
        if not (depth.isascii() and depth.isdigit()):
            raise MalformedRecord(f"Invalid depth value {depth!r}")

        expected = perft_data[EPD_COUNT_OFFSET:].strip()
        if not expected:
            raise MalformedRecord(f"Missing expected nodes value in {perft_data!r}")
        nodes = parse_node_count(expected)
        if nodes is None:
            raise MalformedRecord(f"Invalid expected nodes value {expected!r}")

        obligations.append((int(depth), nodes))

    return EpdTest(fen=fen, obligations=tuple(obligations))


def load_epd_lines(epd_file: Path) -> list[str]:
    """
    Read the records of an EPD file without parsing them.

    Blank lines and lines starting with '#' are skipped.
    """
    lines = []
    with open(epd_file, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            lines.append(line)
    return lines
