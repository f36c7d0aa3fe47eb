"""
Bisection of split perft disagreements.

The user's generator and the oracle are asked for a split perft of the same
position. If the totals differ, the first move whose subtree counts differ
is followed one ply down, repeatedly, until the fault is pinned to a single
position: a wrong move list, a miscounted subtree, or a generator whose
total disagrees with its own breakdown.
"""

import sys
from typing import Callable, Optional, Sequence

from autoperft.differ import diff_move_lists
from autoperft.divergence import (
    Divergence,
    DuplicateMovesGenerated,
    GeneratorArithmeticInconsistency,
    MoveSetDivergence,
    NodeCountMismatch,
)
from autoperft.errors import ExpectedCountMismatch, InvariantViolation
from autoperft.oracle import Oracle
from autoperft.splitperft import SplitPerft, SplitPerftResult


class PerftChecker:
    """
    Checks a generator against the oracle and localizes any disagreement.

    Args:
        generator: The split perft source under test
        oracle: The reference engine
        normalize: Optional mapping applied to every move label the
            generator prints before comparison (e.g. str.lower)
    """

    def __init__(self, generator: SplitPerft, oracle: Oracle,
                 normalize: Optional[Callable[[str], str]] = None):
        self.generator = generator
        self.oracle = oracle
        self.normalize = normalize

    def check(self, depth: int, fen: str, history: Sequence[str] = (),
              localizing: bool = False,
              expected_nodes: Optional[int] = None) -> Optional[Divergence]:
        """
        Check the generator's split perft of the position reached by `history`.

        Returns None if the generator agrees with the oracle, otherwise the
        divergence found at the shallowest faulty position. `localizing` is
        set once a parent position has already been found to disagree.

        Raises:
            ExpectedCountMismatch: if `expected_nodes` is given and the oracle
                disagrees with it, i.e. the test suite itself is wrong.
        """
        history = tuple(history)
        generated = self._generate(depth, fen, history)
        expected = self.oracle.split(depth, fen, history)
        if expected_nodes is not None and expected.total != expected_nodes:
            raise ExpectedCountMismatch(
                f"Test suite expects perft({depth}) = {expected_nodes} but the reference "
                f"engine counts {expected.total}",
                depth=depth, fen=fen, history=history,
            )

        # In a faulty line, a wrong move list shows up at depth 1
        if localizing and depth == 1:
            legal_moves = set(expected.labels())
            generated_moves = set(generated.labels())
            if legal_moves != generated_moves:
                return self._annotate(diff_move_lists(legal_moves, generated_moves),
                                      depth, fen, history)

        if generated.total == expected.total:
            if not generated.is_consistent:
                return self._arithmetic(generated, depth, fen, history)
            return None

        print(f"\tUser script generated {generated.total} nodes", end="", file=sys.stderr)
        if history:
            print(f" after applying {' '.join(history)} to {fen!r}", file=sys.stderr)
        else:
            print(file=sys.stderr)

        return self._bisect(depth, fen, history, expected, generated)

    def _bisect(self, depth: int, fen: str, history: tuple[str, ...],
                expected: SplitPerftResult, generated: SplitPerftResult) -> Divergence:
        """Find the reason the totals differ, following the first divergent move."""
        if depth == 0:
            return self._annotate(NodeCountMismatch(expected=expected.total, actual=generated.total),
                                  depth, fen, history)

        user_counts = generated.counts()
        for mv, correct_nodes in expected.per_move:
            # Make sure the generator produced this (legal) move
            if mv not in user_counts:
                missing = frozenset(m for m in expected.labels() if m not in user_counts)
                return self._annotate(MoveSetDivergence(missing=missing), depth, fen, history)

            user_nodes = user_counts[mv]
            if user_nodes == correct_nodes:
                continue

            print(f"Move {mv!r} at depth {depth} on {fen!r} yields an incorrect node count "
                  f"({user_nodes}). Correct: {correct_nodes}", file=sys.stderr)

            mismatch = NodeCountMismatch(at_move=mv, expected=correct_nodes, actual=user_nodes)
            # A depth 1 subtree is a single leaf; there is nothing below it to inspect
            if depth == 1:
                return self._annotate(mismatch, depth, fen, history)

            divergence = self.check(depth - 1, fen, history + (mv,), localizing=True)
            if divergence is None:
                # The generator counts this subtree correctly when asked directly
                return self._annotate(mismatch, depth, fen, history)
            return divergence

        legal_moves = set(expected.labels())
        generated_moves = set(generated.labels())
        if generated_moves - legal_moves:
            return self._annotate(diff_move_lists(legal_moves, generated_moves), depth, fen, history)

        duplicates = generated.duplicates()
        if duplicates:
            return self._annotate(DuplicateMovesGenerated(duplicates=duplicates), depth, fen, history)

        # Only reachable when the oracle has no moves either
        if not generated.per_move:
            return self._annotate(NodeCountMismatch(expected=expected.total, actual=generated.total),
                                  depth, fen, history)

        if not generated.is_consistent:
            return self._arithmetic(generated, depth, fen, history)

        raise InvariantViolation(
            f"Totals differ ({generated.total} vs {expected.total}) but every move agrees",
            depth=depth, fen=fen, history=history,
        )

    def _generate(self, depth: int, fen: str, history: tuple[str, ...]) -> SplitPerftResult:
        result = self.generator.split(depth, fen, history)
        if self.normalize is None:
            return result
        return SplitPerftResult(
            per_move=tuple((self.normalize(mv), nodes) for mv, nodes in result.per_move),
            total=result.total,
        )

    def _arithmetic(self, generated: SplitPerftResult, depth: int, fen: str,
                    history: tuple[str, ...]) -> Divergence:
        inconsistency = GeneratorArithmeticInconsistency(
            total=generated.total,
            breakdown_total=generated.breakdown_total,
            per_move=generated.per_move,
        )
        return self._annotate(inconsistency, depth, fen, history)

    def _annotate(self, divergence: Divergence, depth: int, fen: str,
                  history: tuple[str, ...]) -> Divergence:
        return divergence.annotate(depth, history, self.oracle.fen_after(fen, history))
