"""Tests for autoperft.errors module."""

from autoperft.constants import STARTPOS_FEN
from autoperft.errors import AutoperftError, GeneratorCrashed, MalformedCount


class TestAutoperftError:
    """Tests for error context and report text."""

    def test_without_context(self):
        error = AutoperftError("Invalid test range 3..1 for a suite of 1 tests")
        assert error.reproduce is None
        assert str(error) == "Invalid test range 3..1 for a suite of 1 tests"

    def test_report_with_context(self):
        error = AutoperftError("perft crashed").attach(2, STARTPOS_FEN, ["e2e4", "e7e5"])

        assert error.reproduce == f"2 {STARTPOS_FEN!r} 'e2e4 e7e5'"
        assert str(error) == (
            "perft crashed\n"
            "Depth: 2\n"
            f"FEN: {STARTPOS_FEN!r}\n"
            "Applied moves: e2e4, e7e5\n"
            f"Reproduce with arguments: 2 {STARTPOS_FEN!r} 'e2e4 e7e5'"
        )

    def test_empty_history_reproduces_with_empty_argument(self):
        error = AutoperftError("perft crashed", depth=1, fen=STARTPOS_FEN)
        assert error.reproduce == f"1 {STARTPOS_FEN!r} ''"
        assert "Applied moves" not in str(error)

    def test_attach_keeps_innermost_context(self):
        error = AutoperftError("bad output", depth=1, fen="inner", history=["e2e4"])
        error.attach(3, STARTPOS_FEN, [])
        assert error.depth == 1
        assert error.fen == "inner"
        assert error.history == ("e2e4",)


class TestGeneratorErrors:
    """Tests for the extra detail of generator errors."""

    def test_crash_report_includes_stderr(self):
        error = GeneratorCrashed("perft crashed on: 'fen' (exit status 101)",
                                 stderr="thread 'main' panicked", returncode=101,
                                 depth=1, fen=STARTPOS_FEN)
        report = str(error)
        assert "Reproduce with arguments: 1" in report
        assert report.endswith("Full error:\nthread 'main' panicked")

    def test_output_report_includes_raw_output(self):
        error = MalformedCount("Failed to parse final line", output="Nodes: 20")
        assert str(error) == "Failed to parse final line\n\nRaw output:\nNodes: 20"
