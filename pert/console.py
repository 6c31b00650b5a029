"""
Interactive console front end.

Either loads the sample A-N project (optionally extended with custom
activities) or reads a project line by line, then prints the schedule.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional, TextIO

from .engine import PERTScheduler
from .parsing import is_terminator, parse_activity_line
from .reporting import format_number, format_report
from .samples import load_sample_project

logger = logging.getLogger(__name__)

MODE_DEFAULT = "default"
MODE_MANUAL = "manual"

InputFn = Callable[[str], str]


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )


def _read_line(input_fn: InputFn, prompt: str) -> Optional[str]:
    try:
        return input_fn(prompt)
    except EOFError:
        return None


def read_activities(scheduler: PERTScheduler, input_fn: InputFn, out: TextIO) -> int:
    """Prompt for activity lines until a terminator or EOF. Returns the number added."""
    added = 0
    while True:
        line = _read_line(input_fn, f"Activity {added + 1}: ")
        if line is None or is_terminator(line):
            break
        if not line.strip():
            print("Please enter activity info or type 'done' to finish", file=out)
            continue

        try:
            parsed = parse_activity_line(line)
        except ValueError as exc:
            print(exc, file=out)
            continue

        if scheduler.find(parsed.activity_id) is not None:
            print(f"Activity '{parsed.activity_id}' already exists!", file=out)
            continue
        if parsed.duration < 0:
            print("Duration cannot be negative!", file=out)
            continue

        ok, message = scheduler.add_activity(parsed.activity_id, parsed.duration, parsed.predecessors)
        if not ok:
            print(message, file=out)
            continue

        text = f"Successfully added: {parsed.activity_id} (Duration: {format_number(parsed.duration)})"
        if parsed.predecessors:
            text += f" [Predecessors: {', '.join(parsed.predecessors)}]"
        print(text, file=out)
        added += 1
    return added


def _print_entry_help(out: TextIO, example: str) -> None:
    print("Format: Activity_ID Duration [Predecessor1] [Predecessor2] ...", file=out)
    print(f"Example: {example}", file=out)
    print("Type 'done' to finish input", file=out)


def _choose_mode(input_fn: InputFn, out: TextIO) -> str:
    print("Select Mode:", file=out)
    print("1. Use Default Data (A-N)", file=out)
    print("2. Manual Input Data", file=out)
    choice = _read_line(input_fn, "Please choose (1 or 2): ")
    return MODE_DEFAULT if (choice or "").strip() == "1" else MODE_MANUAL


def run_session(
    scheduler: PERTScheduler,
    input_fn: InputFn = input,
    out: TextIO = sys.stdout,
    mode: Optional[str] = None,
) -> int:
    """Run one interactive session. Returns the process exit code."""
    print("=" * 40, file=out)
    print("    PERT / CPM Scheduler", file=out)
    print("=" * 40, file=out)

    if mode is None:
        mode = _choose_mode(input_fn, out)

    if mode == MODE_MANUAL:
        print("\n=== Manual Input Mode ===", file=out)
        _print_entry_help(out, "A 5 or B 3 A or C 7 A B")
        read_activities(scheduler, input_fn, out)

        print("\n=== PERT Analysis Results ===", file=out)
        ok, message = scheduler.calculate()
        if not ok:
            print(f"Calculation failed: {message}", file=out)
            return 1
        print(format_report(scheduler), file=out)
        return 0

    load_sample_project(scheduler)
    ok, message = scheduler.calculate()
    if not ok:
        print(f"Calculation failed: {message}", file=out)
        return 1
    print(format_report(scheduler), file=out)

    answer = _read_line(input_fn, "\nDo you want to add custom activities? (y/n): ")
    if (answer or "").strip().lower() != "y":
        return 0

    _print_entry_help(out, "O 3 or P 5 A or Q 7 A B")
    added = read_activities(scheduler, input_fn, out)
    if added:
        print(f"\nAdded {added} new activities", file=out)
        print("Recalculating PERT analysis...\n", file=out)
        ok, message = scheduler.calculate()
        if ok:
            print("=== Updated PERT Analysis Results ===", file=out)
        else:
            print(f"Recalculation failed: Please check input data ({message})", file=out)
        print(format_report(scheduler), file=out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute a CPM schedule interactively.")
    parser.add_argument(
        "--mode",
        choices=[MODE_DEFAULT, MODE_MANUAL],
        default=None,
        help="Skip the mode prompt: load the sample project or enter activities manually",
    )
    parser.add_argument(
        "--slack-tolerance",
        type=float,
        default=0.0,
        help="Slack values within this distance of zero are treated as zero (default: exact)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every calculation step")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    scheduler = PERTScheduler(slack_tolerance=args.slack_tolerance)
    logger.debug("Starting console session (mode=%s)", args.mode or "prompt")
    return run_session(scheduler, mode=args.mode)


if __name__ == "__main__":
    sys.exit(main())
