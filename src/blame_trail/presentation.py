"""Plain-text labels for records; no UI toolkit involved."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import quote

from blame_trail.dates import format_relative_date
from blame_trail.record import ProvenanceRecord

SHORT_ID_LEN = 7


def short_id(commit_id: str) -> str:
    return commit_id[:SHORT_ID_LEN]


def first_line(message: str) -> str:
    return message.split("\n", 1)[0]


def mailto_link(email: str) -> str:
    return f"mailto:{quote(email, safe='@+.')}"


def record_label(record: ProvenanceRecord) -> str:
    lines = f"[Lines: {record.line_expression}]" if record.lines else ""
    return f"{short_id(record.commit_id)} - {lines} {first_line(record.message)}"


def record_tooltip(record: ProvenanceRecord, now: datetime | None = None) -> str:
    return (
        f"{record.author} • {format_relative_date(record.commit_date, now)}\n"
        f"Lines: {record.line_expression}"
    )
