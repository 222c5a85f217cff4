"""Caller-owned view state for one attribution result."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from blame_trail.dates import DEFAULT_WINDOW, DateRange, DateWindow, filter_by_date, resolve_window
from blame_trail.record import ProvenanceRecord

logger = logging.getLogger(__name__)


@dataclass
class BlameSession:
    """Holds the last result and the date window applied to it.

    Named windows are resolved against the clock each time ``visible()`` is
    called; custom bounds are validated when set.
    """

    default_window: DateWindow = DEFAULT_WINDOW
    week_start: str = "sunday"
    file_path: str = ""
    records: list[ProvenanceRecord] = field(default_factory=list)
    window: DateWindow = DEFAULT_WINDOW
    custom_start: str | None = None
    custom_end: str | None = None

    def show(self, records: list[ProvenanceRecord], file_path: str) -> None:
        """Replace the result; every fresh result starts on the default window."""
        self.records = list(records)
        self.file_path = file_path
        self.set_window(self.default_window)

    def set_window(self, window: DateWindow | str) -> None:
        window = DateWindow(window)
        if window is DateWindow.CUSTOM and not self.custom_start:
            raise ValueError("Use set_custom_range() to select a custom window")
        self.window = window

    def set_custom_range(self, start: str, end: str | None = None) -> None:
        # Validate first so a rejected range leaves the current filter in place.
        resolve_window(DateWindow.CUSTOM, custom_start=start, custom_end=end)
        self.custom_start = start
        self.custom_end = end
        self.window = DateWindow.CUSTOM
        logger.debug("custom range %s..%s", start, end or "today")

    def clear_filter(self) -> None:
        self.set_window(DateWindow.ALL_TIME)

    def date_range(self, now: datetime | None = None) -> DateRange:
        return resolve_window(
            self.window,
            now=now,
            custom_start=self.custom_start,
            custom_end=self.custom_end,
            week_start=self.week_start,
        )

    def visible(self, now: datetime | None = None) -> list[ProvenanceRecord]:
        rng = self.date_range(now)
        if rng.unbounded:
            return list(self.records)
        return filter_by_date(self.records, rng.start, rng.end, now=now)

    def find(self, commit_id: str) -> ProvenanceRecord | None:
        return next((r for r in self.records if r.commit_id == commit_id), None)

    @property
    def is_empty(self) -> bool:
        return not self.records
