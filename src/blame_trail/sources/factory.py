"""Source factory."""

from __future__ import annotations

from blame_trail.backend import CommandRunner
from blame_trail.errors import InputError
from blame_trail.sources import ProvenanceSource
from blame_trail.sources.log import DEFAULT_MAX_WORKERS

MODES = ("line", "range")


def create_source(mode: str, runner: CommandRunner, *, max_workers: int = DEFAULT_MAX_WORKERS) -> ProvenanceSource:
    if mode == "range":
        from blame_trail.sources.blame import BlameRangeSource

        return BlameRangeSource(runner)
    if mode == "line":
        from blame_trail.sources.log import LineLogSource

        return LineLogSource(runner, max_workers=max_workers)
    raise InputError(f"Unknown query mode: {mode}. Available: {list(MODES)}")
