"""Provenance source interface.

A source answers "which commit last touched each of these lines?" for one
file. Lines it cannot answer are simply left out of the result; the engine
files them under the uncommitted record.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from blame_trail.record import PartialRecord


@dataclass(frozen=True)
class FileTarget:
    path: Path  # absolute
    root: Path  # repository top level
    rel_path: str  # repo-root-relative, forward slashes


@runtime_checkable
class ProvenanceSource(Protocol):
    @property
    def mode(self) -> str: ...

    def fetch(self, target: FileTarget, lines: Sequence[int]) -> list[PartialRecord]:
        """Return at most one record per requested 1-based line, ordered by line."""
        ...
