"""
Running a slice of an EPD perft suite through the checker.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from autoperft.checker import PerftChecker
from autoperft.divergence import Divergence
from autoperft.epd import EpdTest, parse_epd
from autoperft.errors import RangeOutOfBounds


@dataclass
class ObligationResult:
    """Outcome of checking one perft(depth) obligation."""
    depth: int
    expected: int
    divergence: Optional[Divergence] = None

    @property
    def passed(self) -> bool:
        return self.divergence is None


@dataclass
class RecordResult:
    """Outcome of one EPD record; `index` is its position in the full suite."""
    index: int
    fen: str
    obligations: list[ObligationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(o.passed for o in self.obligations)


@dataclass
class SuiteResult:
    records: list[RecordResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.records)

    @property
    def checked(self) -> int:
        """Number of obligations checked."""
        return sum(len(r.obligations) for r in self.records)

    @property
    def failures(self) -> list[tuple[RecordResult, ObligationResult]]:
        return [(r, o) for r in self.records for o in r.obligations if not o.passed]


def select_range(items: Sequence, start: int = 0, end: Optional[int] = None) -> list:
    """
    Return items[start:end], refusing slices that fall outside the suite.

    Raises:
        RangeOutOfBounds: if start is negative, end is past the last item,
            or the slice is empty.
    """
    if end is None:
        end = len(items)
    if start < 0 or end > len(items) or start >= end:
        raise RangeOutOfBounds(
            f"Invalid test range {start}..{end} for a suite of {len(items)} tests"
        )
    return list(items[start:end])


class SuiteRunner:
    """
    Checks every obligation of a run of EPD records, in order.

    Fatal errors (bad records, crashing generators) propagate immediately.
    A divergence is recorded and the run moves on to the next obligation,
    unless `fail_fast` is set.
    """

    def __init__(self, checker: PerftChecker, fail_fast: bool = False):
        self.checker = checker
        self.fail_fast = fail_fast

    def run(self, tests: Sequence[EpdTest], start: int = 0,
            end: Optional[int] = None) -> SuiteResult:
        return self._run(select_range(tests, start, end), start)

    def run_lines(self, lines: Sequence[str], start: int = 0,
                  end: Optional[int] = None) -> SuiteResult:
        """Like run(), but parse each raw EPD line only when it is reached."""
        return self._run(select_range(lines, start, end), start, parse=parse_epd)

    def _run(self, records: list, start: int,
             parse: Optional[Callable[[str], EpdTest]] = None) -> SuiteResult:
        result = SuiteResult()
        num_tests = len(records)

        for i, record in enumerate(records):
            test = parse(record) if parse else record
            print(f"Beginning tests on perft suite {i + 1}/{num_tests}: {test.fen!r}", flush=True)

            record_result = RecordResult(index=start + i, fen=test.fen)
            result.records.append(record_result)

            for depth, expected in test.obligations:
                print(f"\tChecking perft({depth}) := {expected}", flush=True)
                divergence = self.checker.check(depth, test.fen, expected_nodes=expected)
                record_result.obligations.append(
                    ObligationResult(depth=depth, expected=expected, divergence=divergence)
                )
                if divergence is not None:
                    print(f"\n{divergence}\n", flush=True)
                    if self.fail_fast:
                        return result

        return result
