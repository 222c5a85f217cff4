"""In-memory stand-in for GitBackend used across tests."""

from __future__ import annotations

import re
import threading
from pathlib import Path

from blame_trail.errors import BackendError

_LINE_SPEC_RE = re.compile(r"^(\d+),\1:")


def log_block(
    commit: str,
    *,
    date: str = "2024-06-01T10:00:00+00:00",
    author: str = "Ann Author",
    email: str = "ann@example.com",
    message: str = "Change things",
) -> str:
    return (
        f"Commit: {commit}\n"
        f"Author: {author}\n"
        f"Author Email: {email}\n"
        f"Date: {date}\n"
        f"Message: {message}\n"
        "\n"
        "diff --git a/app.py b/app.py\n"
        "--- a/app.py\n"
        "+++ b/app.py\n"
        "@@ -1,1 +1,1 @@\n"
        "+x = 1\n"
    )


class FakeGit:
    """Answers the read-only git commands the engine issues."""

    def __init__(
        self,
        root: Path = Path("/repo"),
        *,
        dirty: bool = False,
        head_text: str | None = None,
        log: dict[int, str] | None = None,
        blame: str | None = None,
        details: dict[str, str] | None = None,
        in_repo: bool = True,
        stats: dict[str, str] | None = None,
    ) -> None:
        self.stats = stats or {}
        self.root = root
        self.dirty = dirty
        self.head_text = head_text
        self.log = log or {}
        self.blame = blame
        self.details = details or {}
        self.in_repo = in_repo
        self.calls: list[list[str]] = []
        self._lock = threading.Lock()

    def execute(self, args: list[str], cwd: Path) -> str:
        with self._lock:
            self.calls.append(list(args))
        cmd = args[1:] if args and args[0] == "--no-pager" else args

        if cmd[:2] == ["rev-parse", "--show-toplevel"]:
            if not self.in_repo:
                raise BackendError(["git", *args], "fatal: not a git repository", 128)
            return f"{self.root}\n"
        if cmd[:2] == ["rev-parse", "HEAD"]:
            return "deadbeefcafe\n"
        if cmd[0] == "status":
            return " M app.py\n" if self.dirty else ""
        if cmd[0] == "show" and cmd[1].startswith("HEAD:"):
            if self.head_text is None:
                raise BackendError(["git", *args], "fatal: path not in HEAD", 128)
            return self.head_text
        if cmd[:2] == ["rev-parse", "--verify"]:
            ref = cmd[-1].removesuffix("^{commit}")
            matches = [c for c in self.details if c.startswith(ref)]
            if len(matches) != 1:
                raise BackendError(["git", *args], "", 1)
            return f"{matches[0]}\n"
        if cmd[:2] == ["show", "--stat"]:
            return self.stats.get(cmd[-1], "")
        if cmd[:2] == ["show", "-s"]:
            commit = cmd[-1]
            if commit not in self.details:
                raise BackendError(["git", *args], "fatal: bad object", 128)
            return self.details[commit]
        if cmd[0] == "log":
            m = _LINE_SPEC_RE.match(cmd[cmd.index("-L") + 1])
            line = int(m.group(1)) if m else -1
            if line not in self.log:
                raise BackendError(["git", *args], f"fatal: file has only {len(self.log)} lines", 128)
            return self.log[line]
        if cmd[0] == "blame":
            if self.blame is None:
                raise BackendError(["git", *args], "fatal: no such path in HEAD", 128)
            return self.blame
        raise AssertionError(f"unexpected git command: {args}")

    def queried_lines(self) -> list[int]:
        out = []
        for call in self.calls:
            if "-L" in call and "log" in call:
                m = _LINE_SPEC_RE.match(call[call.index("-L") + 1])
                if m:
                    out.append(int(m.group(1)))
        return sorted(out)
