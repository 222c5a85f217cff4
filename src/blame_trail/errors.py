"""Exception types for blame-trail."""

from __future__ import annotations


class BlameTrailError(Exception):
    """Base class for errors surfaced to callers."""


class InputError(BlameTrailError):
    """Caller supplied a range or path that cannot be attributed."""


class BackendError(BlameTrailError):
    """A git invocation failed (non-zero exit, timeout or missing binary)."""

    def __init__(self, command: list[str], stderr: str = "", returncode: int | None = None) -> None:
        self.command = list(command)
        self.stderr = stderr.strip()
        self.returncode = returncode
        detail = self.stderr or f"exit status {returncode}"
        super().__init__(f"{' '.join(self.command)}: {detail}")


class DateValidationError(BlameTrailError, ValueError):
    """A custom date-range bound is not a valid YYYY-MM-DD date."""
