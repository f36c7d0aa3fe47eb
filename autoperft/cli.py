"""
Command-line interface for the perft verification harness.
"""

import argparse
import sys
from pathlib import Path

from autoperft.checker import PerftChecker
from autoperft.config import get_epd_file, get_timeout, load_config
from autoperft.epd import load_epd_lines
from autoperft.errors import AutoperftError
from autoperft.generator import GeneratorAdapter, resolve_generator_command
from autoperft.oracle import Oracle
from autoperft.suite import SuiteResult, SuiteRunner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autoperft",
        description="Command-line tool for debugging chess move generation",
        epilog="The generator is run as: <generator> <depth> <fen> <moves> and must print "
               "'<move> <count>' lines followed by the total node count"
    )
    parser.add_argument("generator", metavar="path/to/user/script",
                        help="Path to the script that runs your move generator")
    parser.add_argument("--epd", "-e", type=str, default=None,
                        help="EPD file with which to test your move generator "
                             "(default: $AUTOPERFT_EPD or the bundled standard.epd)")
    parser.add_argument("--start", type=int, default=None,
                        help="Index of the first EPD record to check (default: 0)")
    parser.add_argument("--end", type=int, default=None,
                        help="Index one past the last EPD record to check (default: all)")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Seconds to wait for each generator invocation "
                             "(default: $AUTOPERFT_TIMEOUT, or no limit)")
    parser.add_argument("--chess960", action="store_true",
                        help="Load positions as Chess960 (castling is king-takes-rook)")
    parser.add_argument("--ignore-case", action="store_true",
                        help="Compare move labels case-insensitively (e.g. e7e8Q == e7e8q)")
    parser.add_argument("--fail-fast", action="store_true",
                        help="Stop at the first divergence")
    parser.add_argument("--config", type=str, default=None, metavar="FILE",
                        help="TOML config file with an [autoperft] table (default: ./autoperft.toml)")
    return parser


def print_summary(result: SuiteResult, generator: str):
    """Print the pass/fail summary of a suite run, with a command line per failure."""
    failures = result.failures
    print(f"\n{'='*70}")
    if not failures:
        print(f"All {result.checked} perft checks passed across {len(result.records)} positions")
        print(f"{'='*70}")
        return

    print(f"{len(failures)} of {result.checked} perft checks failed:")
    for record, obligation in failures:
        first_line = obligation.divergence.summary.splitlines()[0]
        print(f"  #{record.index + 1:<4} perft({obligation.depth}) {record.fen!r}")
        print(f"        {first_line}")
        print(f"        Reproduce: {generator} {obligation.divergence.reproduce}")
    print(f"{'='*70}")


def main(argv: list[str] | None = None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.config) if args.config else None)

        epd_path = Path(args.epd or config.get("epd") or get_epd_file())
        timeout = args.timeout if args.timeout is not None else config.get("timeout", get_timeout())
        start = args.start if args.start is not None else config.get("start", 0)
        end = args.end if args.end is not None else config.get("end")
        chess960 = args.chess960 or config.get("chess960", False)
        ignore_case = args.ignore_case or config.get("ignore_case", False)
        fail_fast = args.fail_fast or config.get("fail_fast", False)

        if not epd_path.exists():
            print(f"Error: EPD file not found: {epd_path}")
            sys.exit(1)

        generator = GeneratorAdapter(resolve_generator_command(args.generator), timeout=timeout)
        checker = PerftChecker(generator, Oracle(chess960=chess960),
                               normalize=str.lower if ignore_case else None)
        runner = SuiteRunner(checker, fail_fast=fail_fast)
        result = runner.run_lines(load_epd_lines(epd_path), start, end)
    except AutoperftError as e:
        print(f"\n{parser.prog} failed with the following error:\n{e}")
        sys.exit(1)

    print_summary(result, args.generator)
    sys.exit(0 if result.passed else 1)


if __name__ == "__main__":
    main()
