"""
Diagnoses produced when a generator disagrees with the oracle.

These are values, not exceptions: finding one is the expected outcome of
checking a buggy generator. Each carries the moves applied from the test's
root position and the FEN they lead to, so the failing generator invocation
can be reproduced on its own.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence

from autoperft.errors import InvariantViolation


def _plural(word: str, items) -> str:
    return f"{word}s" if len(items) > 1 else word


def _join(moves) -> str:
    return ", ".join(sorted(moves))


@dataclass(frozen=True, kw_only=True)
class Divergence(ABC):
    """Common context: where the divergence was found."""
    depth: Optional[int] = None
    history: tuple[str, ...] = ()
    fen: Optional[str] = None

    def annotate(self, depth: int, history: Sequence[str], fen: str) -> "Divergence":
        return replace(self, depth=depth, history=tuple(history), fen=fen)

    @property
    @abstractmethod
    def summary(self) -> str:
        """First lines of the report: what went wrong."""

    @property
    def reproduce(self) -> Optional[str]:
        """Arguments for a standalone generator invocation showing the fault."""
        if self.fen is None:
            return None
        return f"{self.depth} {self.fen!r} ''"

    def __str__(self) -> str:
        lines = [self.summary]
        if self.fen is not None:
            lines.append(f"Applied moves: {', '.join(self.history)}")
            lines.append(f"Resulting FEN: {self.fen!r}")
            lines.append(f"Reproduce with arguments: {self.reproduce}")
        return "\n".join(lines)


@dataclass(frozen=True)
class NodeCountMismatch(Divergence):
    """
    A node count is wrong although the moves leading to it were generated correctly.

    `at_move` is the move whose subtree was miscounted, or None when the
    count of the position itself is wrong.
    """
    expected: int
    actual: int
    at_move: Optional[str] = None

    @property
    def summary(self) -> str:
        if self.at_move is None:
            return (f"Position at depth {self.depth} yields an incorrect node count "
                    f"({self.actual}). Correct: {self.expected}")
        return (f"Move {self.at_move!r} at depth {self.depth} yields an incorrect node count "
                f"({self.actual}). Correct: {self.expected}")


class MoveSetKind(Enum):
    MISSING_LEGAL_MOVES = "missing legal moves"
    ILLEGAL_MOVES_GENERATED = "illegal moves generated"
    SUBSTITUTED_MOVES = "substituted moves"


@dataclass(frozen=True)
class MoveSetDivergence(Divergence):
    """The generator's move list at a position is wrong."""
    missing: frozenset[str] = frozenset()
    extraneous: frozenset[str] = frozenset()

    def __post_init__(self):
        if not self.missing and not self.extraneous:
            raise InvariantViolation("A move set divergence needs missing or extraneous moves")

    @property
    def kind(self) -> MoveSetKind:
        if self.missing and self.extraneous:
            return MoveSetKind.SUBSTITUTED_MOVES
        if self.missing:
            return MoveSetKind.MISSING_LEGAL_MOVES
        return MoveSetKind.ILLEGAL_MOVES_GENERATED

    @property
    def summary(self) -> str:
        if self.kind is MoveSetKind.MISSING_LEGAL_MOVES:
            return f"Failed to generate legal {_plural('move', self.missing)}: {_join(self.missing)}"
        if self.kind is MoveSetKind.ILLEGAL_MOVES_GENERATED:
            return f"Illegal {_plural('move', self.extraneous)} generated: {_join(self.extraneous)}"
        return (f"Generated illegal {_plural('move', self.extraneous)}: {_join(self.extraneous)}\n"
                f"And neglected to generate: {_join(self.missing)}")


@dataclass(frozen=True)
class DuplicateMovesGenerated(Divergence):
    """The generator listed the same move more than once."""
    duplicates: frozenset[str]

    @property
    def summary(self) -> str:
        return f"Generated duplicate {_plural('move', self.duplicates)}: {_join(self.duplicates)}"


@dataclass(frozen=True)
class GeneratorArithmeticInconsistency(Divergence):
    """The generator's printed total disagrees with its own per-move breakdown."""
    total: int
    breakdown_total: int
    per_move: tuple[tuple[str, int], ...]

    @property
    def summary(self) -> str:
        lines = [f"User script reported {self.total} nodes but its per-move breakdown "
                 f"sums to {self.breakdown_total}"]
        lines.extend(f"\t{mv} {nodes}" for mv, nodes in self.per_move)
        return "\n".join(lines)
