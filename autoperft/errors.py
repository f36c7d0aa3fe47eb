"""
Error taxonomy for the perft verification harness.

Every fatal condition is an AutoperftError. Errors raised while checking a
position carry the depth, FEN and move history of the generator invocation
that produced them, so the failure can be reproduced by hand.
"""

from typing import Optional, Sequence


class AutoperftError(Exception):
    """Base class for all fatal harness errors."""

    def __init__(self, message: str, depth: Optional[int] = None,
                 fen: Optional[str] = None, history: Sequence[str] = ()):
        super().__init__(message)
        self.message = message
        self.depth = depth
        self.fen = fen
        self.history = tuple(history)

    def attach(self, depth: int, fen: str, history: Sequence[str]) -> "AutoperftError":
        """Record where the error happened, unless already recorded."""
        if self.fen is None:
            self.depth = depth
            self.fen = fen
            self.history = tuple(history)
        return self

    @property
    def reproduce(self) -> Optional[str]:
        """Generator arguments that reproduce this failure, if known."""
        if self.fen is None:
            return None
        return f"{self.depth} {self.fen!r} {' '.join(self.history)!r}"

    def __str__(self) -> str:
        if self.fen is None:
            return self.message
        lines = [self.message, f"Depth: {self.depth}", f"FEN: {self.fen!r}"]
        if self.history:
            lines.append(f"Applied moves: {', '.join(self.history)}")
        lines.append(f"Reproduce with arguments: {self.reproduce}")
        return "\n".join(lines)


class MalformedRecord(AutoperftError):
    """An EPD test record could not be parsed."""


class ConfigError(AutoperftError):
    """The configuration file is unreadable or contains unknown keys."""


class RangeOutOfBounds(AutoperftError):
    """The requested test slice does not fit the suite."""


class ExpectedCountMismatch(AutoperftError):
    """A suite's expected node count disagrees with the reference engine."""


class InvariantViolation(AutoperftError):
    """The harness contradicted itself. Never expected in correct operation."""


# Oracle errors indicate the harness mis-tracked a position or history.

class OracleError(AutoperftError):
    pass


class InvalidPosition(OracleError):
    pass


class IllegalMove(OracleError):
    pass


# Generator errors are defects of the user-supplied move generator.

class GeneratorError(AutoperftError):
    pass


class GeneratorLaunchError(GeneratorError):
    """The generator executable could not be started."""


class GeneratorCrashed(GeneratorError):
    """The generator exited with a non-zero status."""

    def __init__(self, message: str, stderr: str = "", returncode: int = 1, **kwargs):
        super().__init__(message, **kwargs)
        self.stderr = stderr
        self.returncode = returncode

    def __str__(self) -> str:
        return f"{super().__str__()}\n\nFull error:\n{self.stderr}"


class GeneratorTimeout(GeneratorError):
    """The generator did not finish within the configured timeout."""


class GeneratorOutputError(GeneratorError):
    """The generator's output could not be interpreted."""

    def __init__(self, message: str, output: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.output = output

    def __str__(self) -> str:
        return f"{super().__str__()}\n\nRaw output:\n{self.output}"


class EncodingError(GeneratorOutputError):
    pass


class MissingTotalLine(GeneratorOutputError):
    pass


class MalformedCount(GeneratorOutputError):
    pass
