"""Line-range attribution pipeline.

Usage:
    runner = GitBackend()
    source = create_source("line", runner)
    records = attribute_lines(path, start_line, end_line, line_count, runner=runner, source=source)
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from blame_trail.aggregate import aggregate, finalize
from blame_trail.backend import (
    CommandRunner,
    committed_line_count,
    has_uncommitted_changes,
    relative_path,
    repo_root,
)
from blame_trail.errors import BackendError, InputError
from blame_trail.record import ProvenanceRecord
from blame_trail.sources import FileTarget, ProvenanceSource

logger = logging.getLogger(__name__)


def validate_range(start_line: int, end_line: int, line_count: int) -> None:
    """Zero-based, inclusive bounds must lie inside the buffer."""
    if line_count <= 0:
        raise InputError(f"line_count must be positive, got {line_count}")
    if start_line < 0 or end_line < start_line:
        raise InputError(f"Invalid line range {start_line}-{end_line}")
    if end_line >= line_count:
        raise InputError(f"Line {end_line + 1} is beyond the end of the buffer ({line_count} lines)")


def resolve_target(runner: CommandRunner, file_path: str | Path) -> FileTarget:
    path = Path(file_path)
    if not path.is_absolute():
        raise InputError(f"Expected an absolute path, got {file_path}")
    try:
        root = repo_root(runner, path)
    except BackendError as e:
        raise InputError(f"{path} is not inside a git repository") from e
    return FileTarget(path=path, root=root, rel_path=relative_path(path, root))


def attribute_lines(
    file_path: str | Path,
    start_line: int,
    end_line: int,
    line_count: int,
    *,
    runner: CommandRunner,
    source: ProvenanceSource,
    now: datetime | None = None,
) -> list[ProvenanceRecord]:
    """Attribute zero-based lines [start_line, end_line] to the commits that last changed them."""
    validate_range(start_line, end_line, line_count)
    target = resolve_target(runner, file_path)

    requested = list(range(start_line + 1, end_line + 2))
    committed = line_count
    # log -L addresses HEAD; blame reads the working tree and marks new lines itself.
    if source.mode == "line" and has_uncommitted_changes(runner, target.root, target.rel_path):
        committed = committed_line_count(runner, target.root, target.rel_path)

    to_query = [n for n in requested if n <= committed]
    uncommitted = [n for n in requested if n > committed]
    if uncommitted:
        logger.debug("%s: lines %d+ are past the committed length %d", target.rel_path, uncommitted[0], committed)

    partials = source.fetch(target, to_query)
    resolved = {p.line_number for p in partials}
    uncommitted.extend(n for n in to_query if n not in resolved)

    records = finalize(aggregate(partials, uncommitted, now=now))
    logger.info(
        "%s lines %d-%d: %d record(s) via %s mode",
        target.rel_path,
        start_line + 1,
        end_line + 1,
        len(records),
        source.mode,
    )
    return records
