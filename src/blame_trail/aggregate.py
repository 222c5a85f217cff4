"""Group per-line attribution into one record per commit."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable

from blame_trail.dates import local_now
from blame_trail.ranges import format_line_numbers
from blame_trail.record import UNCOMMITTED, PartialRecord, ProvenanceRecord, uncommitted_record

logger = logging.getLogger(__name__)


def aggregate(
    partials: Iterable[PartialRecord],
    uncommitted_lines: Iterable[int] = (),
    *,
    now: datetime | None = None,
) -> dict[str, ProvenanceRecord]:
    """Merge partials sharing a commit id; uncommitted lines get one sentinel record.

    Partials are taken in ascending line order. A line listed as uncommitted
    is never also attributed to a commit.
    """
    uncommitted = set(uncommitted_lines)
    by_commit: dict[str, ProvenanceRecord] = {}
    seen: set[int] = set()

    for p in sorted(partials, key=lambda r: r.line_number):
        n = p.line_number
        if n in uncommitted or n in seen:
            continue
        if p.commit_id == UNCOMMITTED:
            uncommitted.add(n)
            continue
        seen.add(n)

        rec = by_commit.get(p.commit_id)
        if rec is None:
            by_commit[p.commit_id] = ProvenanceRecord(
                commit_id=p.commit_id,
                author=p.author,
                author_contact=p.author_contact,
                commit_date=p.commit_date,
                message=p.message,
                lines=[str(n)],
                content=p.content or "",
            )
            continue

        rec.lines.append(str(n))
        if p.content is not None:
            rec.content = f"{rec.content}\n{p.content}"

    if uncommitted:
        by_commit[UNCOMMITTED] = uncommitted_record(sorted(uncommitted), now or local_now())
    logger.debug("merged %d lines into %d records", len(seen) + len(uncommitted), len(by_commit))
    return by_commit


def finalize(by_commit: dict[str, ProvenanceRecord]) -> list[ProvenanceRecord]:
    """Compress each record's lines to one range expression and order the result."""
    return sort_records(
        replace(rec, lines=[format_line_numbers(rec.lines)])
        for rec in by_commit.values()
        if rec.lines
    )


def sort_records(records: Iterable[ProvenanceRecord]) -> list[ProvenanceRecord]:
    """Uncommitted first, then newest commit first.

    The sort is stable, so commits with equal dates keep first-seen order.
    """
    return sorted(
        records,
        key=lambda r: (not r.is_uncommitted, -r.commit_date.timestamp()),
    )
