"""Parse raw git output into per-line PartialRecords.

Two shapes are understood:

- ``git blame -L a,b`` output, one text line per source line:
  ``^1a2b3c4 (Jane Doe 2024-01-02 10:11:12 +0100 12) content``
- ``git log -L n,n:path`` output in the labeled format produced by
  ``LOG_FORMAT``: one ``Commit:`` block per historical change of the line.

Malformed entries are dropped, never raised.
"""

from __future__ import annotations

import logging
import re

from blame_trail.dates import parse_git_date
from blame_trail.record import PartialRecord

logger = logging.getLogger(__name__)

LOG_FORMAT = "Commit: %H%nAuthor: %an%nAuthor Email: %ae%nDate: %ad%nMessage: %s%n"

_LOG_FIELDS = ("Author", "Author Email", "Date", "Message")
_MIN_LOG_LINES = 1 + len(_LOG_FIELDS)

_BLAME_RE = re.compile(
    r"^\^?(?P<commit>[0-9a-fA-F]{4,64})"
    r"(?:\s+\S+)*?"  # optional filename column (-f or rename detection)
    r"\s+\((?P<author>.*?)\s+"
    r"(?P<date>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} [+-]\d{4})\s+"
    r"(?P<line>\d+)\)"
    r" ?(?P<content>.*)$"
)
_NULL_COMMIT_RE = re.compile(r"^0+$")
_COMMIT_SPLIT_RE = re.compile(r"^Commit: ", re.MULTILINE)


def is_null_commit(commit_id: str) -> bool:
    """git blame reports not-yet-committed lines under an all-zero id."""
    return bool(_NULL_COMMIT_RE.match(commit_id))


def parse_blame_output(output: str) -> list[PartialRecord]:
    records: list[PartialRecord] = []
    for raw_line in output.split("\n"):
        if not raw_line.strip():
            continue
        m = _BLAME_RE.match(raw_line.rstrip("\r"))
        if not m:
            logger.debug("blame: skipping unrecognised line %r", raw_line)
            continue
        date = parse_git_date(m.group("date"))
        if date is None:
            continue
        records.append(
            PartialRecord(
                commit_id=m.group("commit"),
                line_number=int(m.group("line")),
                author=m.group("author").strip(),
                commit_date=date,
                content=m.group("content"),
            )
        )
    return records


def parse_log_output(output: str, line_number: int) -> list[PartialRecord]:
    """Return one record per well-formed block, most recent first."""
    records: list[PartialRecord] = []
    for block in _COMMIT_SPLIT_RE.split(output):
        if not block.strip():
            continue
        record = _parse_log_block(block, line_number)
        if record is not None:
            records.append(record)
    return records


def _parse_log_block(block: str, line_number: int) -> PartialRecord | None:
    lines = block.strip("\n").splitlines()
    if len(lines) < _MIN_LOG_LINES:
        logger.debug("log: dropping truncated block for line %d", line_number)
        return None

    commit_id = lines[0].strip()
    values: dict[str, str] = {}
    for label, line in zip(_LOG_FIELDS, lines[1:_MIN_LOG_LINES]):
        value = _field(line, label)
        if value is None:
            logger.debug("log: expected %s field, got %r", label, line)
            return None
        values[label] = value

    date = parse_git_date(values["Date"])
    if not commit_id or date is None:
        return None

    return PartialRecord(
        commit_id=commit_id,
        line_number=line_number,
        author=values["Author"],
        author_contact=values["Author Email"],
        commit_date=date,
        message=values["Message"],
    )


def _field(line: str, label: str) -> str | None:
    prefix = f"{label}:"
    if not line.startswith(prefix):
        return None
    return line[len(prefix):].strip()
