"""
Reference move generation backed by python-chess.

Positions are treated as values: every transition returns a new board and
the caller's board is never modified.
"""

from typing import Sequence

import chess

from autoperft.errors import IllegalMove, InvalidPosition, InvariantViolation, OracleError
from autoperft.splitperft import SplitPerftResult


class Oracle:
    """Trusted split-perft and legal move lists, labelled in UCI notation."""

    def __init__(self, chess960: bool = False):
        self.chess960 = chess960

    def load(self, fen: str) -> chess.Board:
        try:
            return chess.Board(fen, chess960=self.chess960)
        except ValueError as e:
            raise InvalidPosition(f"Invalid FEN {fen!r}: {e}") from e

    def apply(self, position: chess.Board, move_label: str) -> chess.Board:
        """Return the position reached by playing `move_label` in `position`."""
        try:
            move = chess.Move.from_uci(move_label)
        except ValueError:
            move = None
        # Null moves are never legal
        if not move or not position.is_legal(move):
            raise IllegalMove(f"Invalid move {move_label!r} for position {position.fen()!r}")

        board = position.copy(stack=False)
        board.push(move)
        return board

    def position_after(self, fen: str, history: Sequence[str]) -> chess.Board:
        board = self.load(fen)
        for mv in history:
            board = self.apply(board, mv)
        return board

    def fen_after(self, fen: str, history: Sequence[str]) -> str:
        """FEN of the position reached by applying `history` to `fen`."""
        return self.position_after(fen, history).fen()

    def legal_moves(self, position: chess.Board) -> frozenset[str]:
        return frozenset(position.uci(move) for move in position.legal_moves)

    def count_nodes(self, position: chess.Board, depth: int) -> int:
        """Plain perft: the number of leaf nodes `depth` plies below `position`."""
        if depth < 0:
            raise InvariantViolation(f"Negative perft depth {depth}")
        if depth == 0:
            return 1
        return self._perft(position.copy(stack=False), depth)

    def _perft(self, board: chess.Board, depth: int) -> int:
        # Bulk-count the last ply
        if depth == 1:
            return board.legal_moves.count()

        nodes = 0
        for move in board.legal_moves:
            board.push(move)
            nodes += self._perft(board, depth - 1)
            board.pop()
        return nodes

    def split(self, depth: int, fen: str, history: Sequence[str] = ()) -> SplitPerftResult:
        """
        Split perft of the position reached by `history` from `fen`.

        At depth 0 the result is the single root node with no breakdown.
        Otherwise each legal move is paired with its subtree node count at
        `depth - 1`, in python-chess enumeration order.
        """
        try:
            position = self.position_after(fen, history)
            if depth == 0:
                return SplitPerftResult(per_move=(), total=1)

            per_move = []
            for move in position.legal_moves:
                child = position.copy(stack=False)
                child.push(move)
                per_move.append((position.uci(move), self.count_nodes(child, depth - 1)))
            return SplitPerftResult.from_counts(per_move)
        except OracleError as e:
            e.attach(depth, fen, history)
            raise
