"""Attribute line ranges of a file to the commits that last changed them.

Usage:
    runner = GitBackend()
    source = create_source("line", runner)
    records = attribute_lines(path, start_line, end_line, line_count, runner=runner, source=source)
    session = BlameSession()
    session.show(records, str(path))
    session.visible()  # records inside the last six months, uncommitted first
"""

from blame_trail.backend import GitBackend
from blame_trail.dates import DateRange, DateWindow, filter_by_date, format_relative_date, resolve_window
from blame_trail.engine import attribute_lines
from blame_trail.errors import BackendError, BlameTrailError, DateValidationError, InputError
from blame_trail.ranges import compress_lines, format_line_numbers
from blame_trail.record import UNCOMMITTED, PartialRecord, ProvenanceRecord
from blame_trail.session import BlameSession
from blame_trail.sources.factory import create_source

__all__ = [
    "UNCOMMITTED",
    "BackendError",
    "BlameSession",
    "BlameTrailError",
    "DateRange",
    "DateValidationError",
    "DateWindow",
    "GitBackend",
    "InputError",
    "PartialRecord",
    "ProvenanceRecord",
    "attribute_lines",
    "compress_lines",
    "create_source",
    "filter_by_date",
    "format_line_numbers",
    "format_relative_date",
    "resolve_window",
]
