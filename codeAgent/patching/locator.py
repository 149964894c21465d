"""Approximate line-block location for model-authored search text.

The locator answers one question: where in a file does a block of lines
most plausibly live? An exact substring hit wins outright. Otherwise every
window of ``len(pattern)`` consecutive lines is scored by the summed
Levenshtein distance of its whitespace-stripped lines against the stripped
pattern lines, and the cheapest window wins (ties go to the earliest).

A window is only accepted when its distance is at most
``max(total_pattern_chars / 2, 10)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

LOGGER = logging.getLogger(__name__)

__all__ = [
    "LineMatch",
    "LocateFailure",
    "levenshtein",
    "match_threshold",
    "locate",
]

MIN_THRESHOLD = 10


@dataclass(frozen=True, slots=True)
class LineMatch:
    """A located block: ``length`` lines starting at ``start``."""

    start: int
    length: int
    distance: int

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True, slots=True)
class LocateFailure:
    """No acceptable window; carries the closest candidate for diagnostics."""

    best_text: Optional[str]
    distance: Optional[int]
    threshold: float


def levenshtein(a: str, b: str, limit: Optional[int] = None) -> int:
    """Edit distance between two strings over Unicode code points.

    When ``limit`` is given the computation stops as soon as the distance is
    known to exceed it and returns ``limit + 1``.
    """
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        distance = len(a)
        return distance if limit is None or distance <= limit else limit + 1
    if limit is not None and len(a) - len(b) > limit:
        return limit + 1

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (ca != cb),
            ))
        if limit is not None and min(current) > limit:
            return limit + 1
        previous = current
    return previous[-1]


def match_threshold(pattern_lines: Sequence[str]) -> float:
    """Largest accepted distance for a pattern."""
    total_chars = sum(len(line) for line in pattern_lines)
    return max(total_chars / 2, MIN_THRESHOLD)


def _exact_match(file_lines: Sequence[str], pattern_lines: Sequence[str]) -> Optional[LineMatch]:
    haystack = "\n".join(file_lines)
    needle = "\n".join(pattern_lines)
    index = haystack.find(needle)
    if index < 0:
        return None
    start = haystack.count("\n", 0, index)
    return LineMatch(start=start, length=len(pattern_lines), distance=0)


def locate(
    file_lines: Sequence[str],
    pattern_lines: Sequence[str],
) -> Union[LineMatch, LocateFailure]:
    """Find the block of ``file_lines`` that best matches ``pattern_lines``.

    Args:
        file_lines: File content split into lines
        pattern_lines: Search text split into lines (must be non-empty)

    Returns:
        LineMatch on success, LocateFailure when nothing is close enough

    Raises:
        ValueError: If ``pattern_lines`` is empty
    """
    if not pattern_lines:
        raise ValueError("Cannot locate an empty pattern")

    threshold = match_threshold(pattern_lines)
    window = len(pattern_lines)

    if window > len(file_lines):
        LOGGER.debug(f"Pattern ({window} lines) longer than file ({len(file_lines)} lines)")
        return LocateFailure(best_text=None, distance=None, threshold=threshold)

    exact = _exact_match(file_lines, pattern_lines)
    if exact is not None:
        LOGGER.debug(f"Exact match at line {exact.start}")
        return exact

    stripped_file: List[str] = [line.strip() for line in file_lines]
    stripped_pattern: List[str] = [line.strip() for line in pattern_lines]

    best_start: Optional[int] = None
    best_distance: Optional[int] = None

    for start in range(len(file_lines) - window + 1):
        total = 0
        abandoned = False
        for offset, pattern_line in enumerate(stripped_pattern):
            remaining = None if best_distance is None else best_distance - total
            total += levenshtein(stripped_file[start + offset], pattern_line, remaining)
            if best_distance is not None and total > best_distance:
                abandoned = True
                break
        if abandoned:
            continue
        if best_distance is None or total < best_distance:
            best_start, best_distance = start, total
            if total == 0:
                break

    best_text = "\n".join(file_lines[best_start:best_start + window])
    LOGGER.debug(
        f"Closest window at line {best_start}: distance {best_distance}, threshold {threshold}"
    )
    if best_distance <= threshold:
        return LineMatch(start=best_start, length=window, distance=best_distance)
    return LocateFailure(best_text=best_text, distance=best_distance, threshold=threshold)
