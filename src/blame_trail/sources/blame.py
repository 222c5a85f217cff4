"""Range mode: a single ``git blame`` call for the whole selection."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from blame_trail.backend import CommandRunner, CommitDetails, commit_details
from blame_trail.errors import BackendError
from blame_trail.parser import is_null_commit, parse_blame_output
from blame_trail.record import PartialRecord
from blame_trail.sources import FileTarget

logger = logging.getLogger(__name__)


class BlameRangeSource:
    mode = "range"

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def fetch(self, target: FileTarget, lines: Sequence[int]) -> list[PartialRecord]:
        if not lines:
            return []
        wanted = set(lines)
        lo, hi = min(wanted), max(wanted)
        try:
            output = self.runner.execute(
                ["blame", "-L", f"{lo},{hi}", "--", target.rel_path],
                target.root,
            )
        except BackendError as e:
            logger.warning("could not blame lines %d-%d of %s: %s", lo, hi, target.rel_path, e)
            return []

        by_line: dict[int, PartialRecord] = {}
        for rec in parse_blame_output(output):
            if rec.line_number not in wanted or is_null_commit(rec.commit_id):
                continue
            by_line.setdefault(rec.line_number, rec)

        details: dict[str, CommitDetails | None] = {}
        return [self._enrich(by_line[n], target, details) for n in sorted(by_line)]

    def _enrich(
        self,
        rec: PartialRecord,
        target: FileTarget,
        cache: dict[str, CommitDetails | None],
    ) -> PartialRecord:
        """Fill in email, exact date and full message from ``git show``."""
        if rec.commit_id not in cache:
            try:
                cache[rec.commit_id] = commit_details(self.runner, target.root, rec.commit_id)
            except BackendError as e:
                logger.debug("enrichment failed for %s: %s", rec.commit_id, e)
                cache[rec.commit_id] = None
        info = cache[rec.commit_id]
        if info is None:
            return rec
        return replace(
            rec,
            author=info.author or rec.author,
            author_contact=info.author_email,
            commit_date=info.date or rec.commit_date,
            message=info.message,
        )
