"""git process collaborator.

Every history query goes through ``GitBackend.execute``; the helpers below
wrap the handful of read-only git commands the engine needs.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from blame_trail.dates import parse_git_date
from blame_trail.errors import BackendError

logger = logging.getLogger(__name__)

_DETAILS_FORMAT = "%an%n%ae%n%aI%n%B"


@runtime_checkable
class CommandRunner(Protocol):
    def execute(self, args: list[str], cwd: Path) -> str: ...


@dataclass(frozen=True)
class CommitDetails:
    author: str
    author_email: str
    date: datetime | None
    message: str


class GitBackend:
    """Runs git synchronously; non-zero exit raises BackendError."""

    def __init__(self, git: str = "git", timeout: float = 30.0) -> None:
        self.git = git
        self.timeout = timeout

    def execute(self, args: list[str], cwd: Path) -> str:
        command = [self.git, *args]
        logger.debug("exec: %s (cwd=%s)", " ".join(command), cwd)
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise BackendError(command, f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise BackendError(command, str(e)) from e
        if result.returncode != 0:
            raise BackendError(command, result.stderr, result.returncode)
        return result.stdout


def repo_root(runner: CommandRunner, file_path: Path) -> Path:
    directory = file_path if file_path.is_dir() else file_path.parent
    out = runner.execute(["rev-parse", "--show-toplevel"], directory).strip()
    if not out:
        raise BackendError(["rev-parse", "--show-toplevel"], "empty output")
    return Path(out)


def relative_path(file_path: Path, root: Path) -> str:
    """Repo-relative path with forward slashes, as git expects in pathspecs."""
    try:
        return file_path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return file_path.relative_to(root).as_posix()


def count_lines(text: str) -> int:
    """Lines as git numbers them: split on "\\n" only, no phantom line after a final newline."""
    if not text:
        return 0
    return text.count("\n") + (0 if text.endswith("\n") else 1)


def has_uncommitted_changes(runner: CommandRunner, root: Path, rel_path: str) -> bool:
    try:
        out = runner.execute(["status", "--porcelain", "--", rel_path], root)
    except BackendError as e:
        logger.warning("uncommitted-changes check failed for %s: %s", rel_path, e)
        return False
    return bool(out.strip())


def committed_line_count(runner: CommandRunner, root: Path, rel_path: str) -> int:
    """Number of lines of *rel_path* at HEAD; 0 if it has never been committed."""
    try:
        out = runner.execute(["show", f"HEAD:{rel_path}"], root)
    except BackendError as e:
        logger.debug("committed line count unavailable for %s: %s", rel_path, e)
        return 0
    return count_lines(out)


def commit_details(runner: CommandRunner, root: Path, commit_id: str) -> CommitDetails:
    out = runner.execute(["show", "-s", f"--format={_DETAILS_FORMAT}", commit_id], root)
    parts = out.split("\n", 3)
    parts += [""] * (4 - len(parts))
    author, email, date, body = parts
    return CommitDetails(
        author=author.strip(),
        author_email=email.strip(),
        date=parse_git_date(date),
        message=body.strip(),
    )


def head_revision(runner: CommandRunner, root: Path) -> str | None:
    try:
        return runner.execute(["rev-parse", "HEAD"], root).strip() or None
    except BackendError as e:
        logger.debug("git rev-parse HEAD failed: %s", e)
        return None


def resolve_commit(runner: CommandRunner, root: Path, ref: str) -> str:
    """Full commit id for *ref* (an abbreviated id, branch or tag)."""
    out = runner.execute(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], root).strip()
    if not out:
        raise BackendError(["rev-parse", "--verify", ref], "unknown revision")
    return out


def commit_stat(runner: CommandRunner, root: Path, commit_id: str) -> str:
    return runner.execute(["--no-pager", "show", "--stat", "--format=", commit_id], root)
