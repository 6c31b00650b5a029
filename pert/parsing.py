"""
Line-oriented activity input.

One activity per line: ``ID DURATION [PREDECESSOR ...]``, e.g. ``C 7 A B``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .engine import PERTScheduler

TERMINATORS = {"done", "q", "quit"}


@dataclass
class ParsedActivity:
    activity_id: str
    duration: float
    predecessors: List[str] = field(default_factory=list)


def is_terminator(line: str) -> bool:
    return line.strip() in TERMINATORS


def parse_activity_line(line: str) -> ParsedActivity:
    """
    Parse a single activity line.

    Raises:
        ValueError: if the line has fewer than two tokens or the duration
            is not a number.
    """
    tokens = line.split()
    if len(tokens) < 2:
        raise ValueError("Format error! Need at least activity name and duration")

    try:
        duration = float(tokens[1])
    except ValueError:
        raise ValueError("Duration must be a number!") from None

    return ParsedActivity(activity_id=tokens[0], duration=duration, predecessors=tokens[2:])


def load_activity_lines(
    scheduler: PERTScheduler, lines: Iterable[str]
) -> List[Tuple[str, bool, str]]:
    """
    Add every activity line to the scheduler.

    Blank lines and ``#`` comments are skipped. Returns ``(line, ok, message)``
    for each line that was attempted.
    """
    results: List[Tuple[str, bool, str]] = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        try:
            parsed = parse_activity_line(line)
        except ValueError as exc:
            results.append((line, False, str(exc)))
            continue
        ok, message = scheduler.add_activity(parsed.activity_id, parsed.duration, parsed.predecessors)
        results.append((line, ok, message))
    return results
