"""Per-line mode: one ``git log -L n,n:path`` call per line."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Sequence

from blame_trail.backend import CommandRunner
from blame_trail.errors import BackendError
from blame_trail.parser import LOG_FORMAT, parse_log_output
from blame_trail.record import PartialRecord
from blame_trail.sources import FileTarget

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


class LineLogSource:
    mode = "line"

    def __init__(self, runner: CommandRunner, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        self.runner = runner
        self.max_workers = max(1, max_workers)

    def fetch(self, target: FileTarget, lines: Sequence[int]) -> list[PartialRecord]:
        by_line: dict[int, PartialRecord] = {}

        if self.max_workers == 1 or len(lines) <= 1:
            for n in lines:
                rec = self._query(target, n)
                if rec is not None:
                    by_line[n] = rec
        else:
            with ThreadPoolExecutor(
                max_workers=min(self.max_workers, len(lines)), thread_name_prefix="line-worker"
            ) as ex:
                futures = {ex.submit(self._query, target, n): n for n in lines}
                for fut in as_completed(futures):
                    rec = fut.result()
                    if rec is not None:
                        by_line[futures[fut]] = rec

        # Completion order is arbitrary; hand results back in line order.
        return [by_line[n] for n in sorted(by_line)]

    def _query(self, target: FileTarget, line_number: int) -> PartialRecord | None:
        args = [
            "--no-pager",
            "log",
            "-L",
            f"{line_number},{line_number}:{target.rel_path}",
            f"--format={LOG_FORMAT}",
            "--date=iso-strict",
        ]
        try:
            output = self.runner.execute(args, target.root)
        except BackendError as e:
            logger.warning("could not get history for line %d: %s", line_number, e)
            return None

        history = parse_log_output(output, line_number)
        if not history:
            logger.debug("no parseable history for line %d", line_number)
            return None
        # Most recent change first; older entries are not surfaced.
        return history[0]
