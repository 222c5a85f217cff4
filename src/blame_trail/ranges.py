"""Line-number range expressions ("1-3, 7, 9-10")."""

from __future__ import annotations

from typing import Iterable

SEPARATOR = ", "


def compress_lines(lines: Iterable[int | str]) -> list[str]:
    """Collapse line numbers into ascending runs.

    Duplicates are ignored and an empty input gives an empty list.
    """
    ordered = sorted({int(n) for n in lines})
    if not ordered:
        return []

    runs: list[str] = []
    start = end = ordered[0]
    for n in ordered[1:]:
        if n == end + 1:
            end = n
            continue
        runs.append(_run(start, end))
        start = end = n
    runs.append(_run(start, end))
    return runs


def format_line_numbers(lines: Iterable[int | str]) -> str:
    return SEPARATOR.join(compress_lines(lines))


def expand_expression(expression: str) -> list[int]:
    """Inverse of format_line_numbers: "1-3, 7" -> [1, 2, 3, 7]."""
    out: list[int] = []
    for part in expression.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            lo, hi = part.split("-", 1)
            out.extend(range(int(lo), int(hi) + 1))
        else:
            out.append(int(part))
    return out


def _run(start: int, end: int) -> str:
    return str(start) if start == end else f"{start}-{end}"
