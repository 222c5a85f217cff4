"""Provenance record schema."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

UNCOMMITTED = "uncommitted"
UNCOMMITTED_AUTHOR = "You"
UNCOMMITTED_CONTACT = "local"
UNCOMMITTED_MESSAGE = "Uncommitted changes"


@dataclass(frozen=True)
class PartialRecord:
    """Attribution of a single line, as read from one backend answer."""

    commit_id: str
    line_number: int  # 1-based
    author: str
    commit_date: datetime
    author_contact: str = ""
    message: str = ""
    content: str | None = None  # source line text; range mode only


@dataclass
class ProvenanceRecord:
    commit_id: str
    author: str
    author_contact: str
    commit_date: datetime
    message: str
    lines: list[str] = field(default_factory=list)
    content: str = ""

    @property
    def is_uncommitted(self) -> bool:
        return self.commit_id == UNCOMMITTED

    @property
    def line_expression(self) -> str:
        return ", ".join(self.lines)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "commit": self.commit_id,
            "author": self.author,
            "author_contact": self.author_contact,
            "date": self.commit_date.isoformat(),
            "message": self.message,
            "lines": list(self.lines),
        }
        if self.content:
            d["content"] = self.content
        return d


def uncommitted_record(line_numbers: list[int], now: datetime) -> ProvenanceRecord:
    return ProvenanceRecord(
        commit_id=UNCOMMITTED,
        author=UNCOMMITTED_AUTHOR,
        author_contact=UNCOMMITTED_CONTACT,
        commit_date=now,
        message=UNCOMMITTED_MESSAGE,
        lines=[str(n) for n in line_numbers],
    )
