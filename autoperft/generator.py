"""
Invocation and output parsing of the user-supplied move generator.

The generator is run once per query as:

    <generator> <depth> <fen> <moves>

and must print one "<move> <count>" line per legal move followed by a final
line holding the total node count.
"""

import subprocess
import sys
from pathlib import Path
from typing import Optional, Sequence

from autoperft.errors import (
    AutoperftError,
    EncodingError,
    GeneratorCrashed,
    GeneratorLaunchError,
    GeneratorTimeout,
    MalformedCount,
    MissingTotalLine,
)
from autoperft.splitperft import SplitPerftResult, parse_node_count


def resolve_generator_command(path: str | Path) -> list[str]:
    """
    Build the command used to run a generator.

    Python scripts run under the current interpreter so they need not be
    executable; anything else is executed directly.
    """
    path = Path(path)
    if path.suffix == ".py":
        return [sys.executable, str(path)]
    return [str(path)]


def parse_splitperft(stdout: str) -> SplitPerftResult:
    """
    Parse a generator's split perft output.

    The last line is the total node count. Each earlier line is read as
    "<move> <count>"; the first line without both tokens (usually the blank
    line before the total) ends the breakdown.

    Raises:
        MissingTotalLine: if the output is empty.
        MalformedCount: if the total or a per-move count is not a number.
    """
    lines = stdout.strip().splitlines()
    if not lines:
        raise MissingTotalLine(
            "User script must have a final line containing total number of nodes",
            output=stdout,
        )

    total = parse_node_count(lines[-1])
    if total is None:
        raise MalformedCount(
            f"Failed to parse final line of user script output: {lines[-1].strip()!r}",
            output=stdout,
        )

    per_move = []
    for line in lines[:-1]:
        split = line.split()
        # End of the splitperft results
        if len(split) < 2:
            break
        mv, nodes_str = split[0], split[1]
        nodes = parse_node_count(nodes_str)
        if nodes is None:
            raise MalformedCount(f"Failed to parse node count {nodes_str!r} for move {mv!r}",
                                 output=stdout)
        per_move.append((mv, nodes))

    return SplitPerftResult(per_move=tuple(per_move), total=total)


def _decode(data: bytes, stream: str) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(
            f"Failed to convert {stream} of child process to text: {e}",
            output=data.decode("utf-8", errors="replace"),
        ) from e


class GeneratorAdapter:
    """
    Runs the user's generator as a black box.

    Args:
        command: Program and leading arguments, e.g. from
            resolve_generator_command()
        timeout: Seconds to wait for each invocation (None waits forever)
    """

    def __init__(self, command: Sequence[str], timeout: Optional[float] = None):
        self.command = list(command)
        self.timeout = timeout
        self.invocations = 0

    @property
    def name(self) -> str:
        return self.command[-1]

    def invoke(self, depth: int, fen: str, history: Sequence[str] = ()) -> str:
        """Run the generator once and return its stdout."""
        cmd = self.command + [str(depth), fen, " ".join(history)]
        self.invocations += 1
        try:
            proc = subprocess.run(cmd, capture_output=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise GeneratorTimeout(
                f"{self.name} did not finish within {self.timeout}s",
                depth=depth, fen=fen, history=history,
            ) from e
        except OSError as e:
            raise GeneratorLaunchError(
                f"Failed to execute user splitperft script:\n{cmd}\n{e}",
                depth=depth, fen=fen, history=history,
            ) from e

        try:
            stderr = _decode(proc.stderr, "stderr")
            stdout = _decode(proc.stdout, "stdout")
        except EncodingError as e:
            e.attach(depth, fen, history)
            raise

        if proc.returncode != 0:
            raise GeneratorCrashed(
                f"{self.name} crashed on: {fen!r} (exit status {proc.returncode})",
                stderr=stderr, returncode=proc.returncode,
                depth=depth, fen=fen, history=history,
            )

        return stdout

    def split(self, depth: int, fen: str, history: Sequence[str] = ()) -> SplitPerftResult:
        stdout = self.invoke(depth, fen, history)
        try:
            return parse_splitperft(stdout)
        except AutoperftError as e:
            e.attach(depth, fen, history)
            raise
