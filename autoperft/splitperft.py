"""
Split-perft results: per-move subtree node counts plus a total.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from autoperft.constants import U64_MAX


def parse_node_count(text: str) -> Optional[int]:
    """
    Parse an unsigned 64-bit node count.

    Returns None if the text is not a plain run of ASCII digits or does not
    fit in 64 bits.
    """
    text = text.strip()
    if not text or not text.isascii() or not text.isdigit():
        return None
    value = int(text)
    if value > U64_MAX:
        return None
    return value


@dataclass(frozen=True)
class SplitPerftResult:
    """
    A perft result broken down by root move.

    `total` is reported independently of `per_move` and is not assumed to be
    their sum; a buggy generator may print a breakdown that disagrees with
    its own total.
    """
    per_move: tuple[tuple[str, int], ...]
    total: int

    @classmethod
    def from_counts(cls, per_move: Sequence[tuple[str, int]]) -> "SplitPerftResult":
        """Build a self-consistent result whose total is the breakdown sum."""
        per_move = tuple(per_move)
        return cls(per_move=per_move, total=sum(nodes for _, nodes in per_move))

    def labels(self) -> list[str]:
        return [mv for mv, _ in self.per_move]

    def counts(self) -> dict[str, int]:
        """Map each move label to its node count (first occurrence wins)."""
        counts = {}
        for mv, nodes in self.per_move:
            counts.setdefault(mv, nodes)
        return counts

    @property
    def breakdown_total(self) -> int:
        return sum(nodes for _, nodes in self.per_move)

    @property
    def is_consistent(self) -> bool:
        """True if there is no breakdown, or the breakdown sums to the total."""
        return not self.per_move or self.breakdown_total == self.total

    def duplicates(self) -> frozenset[str]:
        """Labels listed more than once."""
        return frozenset(mv for mv, n in Counter(self.labels()).items() if n > 1)


class SplitPerft(Protocol):
    """Anything that can produce a split perft for a position and history."""

    def split(self, depth: int, fen: str, history: Sequence[str]) -> SplitPerftResult:
        ...
