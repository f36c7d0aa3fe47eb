#!/usr/bin/env python3
"""
Reference split perft script for autoperft, backed by python-chess.

Usage: splitperft_script.py <depth> <fen> [moves]

Prints one "<move>\t<nodes>" line per legal move, a blank line, then the
total node count. Use it as a template for wrapping your own generator.
"""

import sys

import chess


def perft(board: chess.Board, depth: int) -> int:
    """Recursive perft used to validate move generation."""
    if depth == 0:
        return 1
    nodes = 0
    for move in board.legal_moves:
        board.push(move)
        nodes += perft(board, depth - 1)
        board.pop()
    return nodes


def main() -> int:
    if len(sys.argv) < 3:
        print(f"Usage: {sys.argv[0]} <depth> <fen> [moves]")
        return 1

    try:
        depth = int(sys.argv[1])
    except ValueError:
        print(f"Failed to parse {sys.argv[1]!r} as depth value", file=sys.stderr)
        return 1
    board = chess.Board(sys.argv[2])

    # Apply moves, if any were provided
    if len(sys.argv) > 3:
        for mv_str in sys.argv[3].split():
            board.push_uci(mv_str)

    if depth == 0:
        print(1)
        return 0

    total_nodes = 0
    for move in list(board.legal_moves):
        board.push(move)
        nodes = perft(board, depth - 1)
        board.pop()
        print(f"{move.uci()}\t{nodes}")
        total_nodes += nodes

    # Print total number of nodes found
    print(f"\n{total_nodes}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
