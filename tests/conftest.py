"""Shared fixtures: in-process generators built on the oracle."""

import sys
from pathlib import Path

import chess
import pytest

from autoperft.oracle import Oracle
from autoperft.splitperft import SplitPerftResult

REPO_ROOT = Path(__file__).parent.parent
REFERENCE_SCRIPT = REPO_ROOT / "scripts" / "splitperft_script.py"


class OracleGenerator:
    """A perfect generator: the oracle itself, counting invocations."""

    def __init__(self, oracle: Oracle):
        self.oracle = oracle
        self.invocations = 0
        self.calls = []

    def split(self, depth, fen, history=()):
        self.invocations += 1
        self.calls.append((depth, tuple(history)))
        return self.oracle.split(depth, fen, history)


class ScriptedGenerator(OracleGenerator):
    """Answers like the oracle, except for scripted (depth, history) queries."""

    def __init__(self, oracle: Oracle, overrides: dict):
        super().__init__(oracle)
        self.overrides = overrides

    def split(self, depth, fen, history=()):
        key = (depth, tuple(history))
        if key in self.overrides:
            self.invocations += 1
            self.calls.append(key)
            return self.overrides[key]
        return super().split(depth, fen, history)


class BuggyGenerator:
    """
    A generator that forgets some moves in one particular position.

    Every count it reports is consistent with that single bug, as a real
    broken move generator's would be.
    """

    def __init__(self, bug_fen: str, drop: tuple[str, ...]):
        self.bug_key = chess.Board(bug_fen).epd()
        self.drop = set(drop)
        self.invocations = 0
        self.calls = []

    def moves(self, board: chess.Board) -> list[chess.Move]:
        moves = list(board.legal_moves)
        if board.epd() == self.bug_key:
            moves = [m for m in moves if m.uci() not in self.drop]
        return moves

    def perft(self, board: chess.Board, depth: int) -> int:
        if depth == 0:
            return 1
        nodes = 0
        for move in self.moves(board):
            board.push(move)
            nodes += self.perft(board, depth - 1)
            board.pop()
        return nodes

    def split(self, depth, fen, history=()):
        self.invocations += 1
        self.calls.append((depth, tuple(history)))
        board = chess.Board(fen)
        for mv in history:
            board.push_uci(mv)
        if depth == 0:
            return SplitPerftResult(per_move=(), total=1)

        per_move = []
        for move in self.moves(board):
            board.push(move)
            per_move.append((move.uci(), self.perft(board, depth - 1)))
            board.pop()
        return SplitPerftResult.from_counts(per_move)


def without_move(result: SplitPerftResult, label: str) -> tuple[tuple[str, int], ...]:
    return tuple((mv, n) for mv, n in result.per_move if mv != label)


def write_script(path: Path, body: str) -> list[str]:
    """Write a Python generator script and return the command that runs it."""
    path.write_text(body)
    return [sys.executable, str(path)]


@pytest.fixture
def oracle():
    return Oracle()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep the user's environment out of the tests."""
    monkeypatch.delenv("AUTOPERFT_EPD", raising=False)
    monkeypatch.delenv("AUTOPERFT_TIMEOUT", raising=False)
