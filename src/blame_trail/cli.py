"""CLI for blame-trail."""

from __future__ import annotations

import argparse
import json
import sys
from importlib.metadata import version
from pathlib import Path

import questionary
from rich.console import Console
from rich.table import Table

from . import config as cfg
from . import logging_setup
from .backend import (
    GitBackend,
    commit_details,
    commit_stat,
    count_lines,
    head_revision,
    repo_root,
    resolve_commit,
)
from .dates import DateWindow, date_input_error, format_relative_date
from .engine import attribute_lines, resolve_target
from .errors import BackendError, BlameTrailError, InputError
from .parser import is_null_commit
from .presentation import first_line, mailto_link, record_label, record_tooltip, short_id
from .record import UNCOMMITTED
from .session import BlameSession
from .sources.factory import MODES, create_source

console = Console()
err_console = Console(stderr=True)

WINDOW_CHOICES = [w.value for w in DateWindow if w is not DateWindow.CUSTOM]

_PICK_LABELS: dict[str, DateWindow] = {
    "Last 6 months": DateWindow.LAST_6_MONTHS,
    "Today": DateWindow.TODAY,
    "This week": DateWindow.THIS_WEEK,
    "This month": DateWindow.THIS_MONTH,
    "All time": DateWindow.ALL_TIME,
    "Custom range...": DateWindow.CUSTOM,
}


class _NoTTYError(SystemExit):
    def __init__(self, flag: str) -> None:
        super().__init__(f"No TTY detected. Use {flag} to run non-interactively.")


def _is_tty() -> bool:
    return sys.stdin.isatty()


def _require_tty(flag: str) -> None:
    if not _is_tty():
        raise _NoTTYError(flag)


def _select(message: str, choices: list[str], flag: str) -> str:
    _require_tty(flag)
    selected = questionary.select(message, choices=choices).ask()
    if selected is None:
        raise SystemExit(1)
    return selected


def _ask_date(message: str, *, required: bool) -> str | None:
    _require_tty("--from/--to")

    def _validate(value: str) -> bool | str:
        if not value:
            return "A start date is required" if required else True
        return date_input_error(value) or True

    result = questionary.text(message, validate=_validate).ask()
    if result is None:
        raise SystemExit(1)
    return result or None


def _buffer_line_count(path: Path) -> int:
    try:
        text = path.read_bytes().decode("utf-8", errors="replace")
    except OSError as e:
        raise InputError(f"Cannot read {path}: {e}") from e
    count = count_lines(text)
    if not count:
        raise InputError(f"{path} is empty")
    return count


def _load_settings(args: argparse.Namespace) -> cfg.Settings:
    settings = cfg.load_settings()
    logging_setup.configure(settings.log_file, debug=settings.debug or getattr(args, "debug", False))
    return settings


def _apply_filter(session: BlameSession, args: argparse.Namespace) -> None:
    if getattr(args, "pick", False):
        label = _select("Select date filter", list(_PICK_LABELS), "--window")
        window = _PICK_LABELS[label]
        if window is DateWindow.CUSTOM:
            start = _ask_date("(Step 1 of 2): Enter START date (YYYY-MM-DD)", required=True)
            end = _ask_date("(Step 2 of 2): Enter END date (YYYY-MM-DD). Default is today.", required=False)
            session.set_custom_range(start or "", end)
        else:
            session.set_window(window)
        return

    date_from = getattr(args, "date_from", None)
    date_to = getattr(args, "date_to", None)
    if date_from or date_to:
        if not date_from:
            raise InputError("--to needs --from")
        session.set_custom_range(date_from, date_to)
    elif getattr(args, "window", None):
        session.set_window(args.window)


def _render_plain(records) -> None:
    for rec in records:
        console.print(record_label(rec), markup=False, highlight=False)
        for line in record_tooltip(rec).splitlines():
            console.print(f"    {line}", markup=False, highlight=False)


def _render(session: BlameSession, *, plain: bool = False) -> None:
    if session.is_empty:
        console.print("[dim]No history for the selected lines.[/dim]")
        return

    records = session.visible()
    if not records:
        console.print("[yellow]No commits found in the selected date range[/yellow]")
        console.print("[dim]Try a different --window, or --window allTime to see all commits.[/dim]")
        return

    if plain:
        _render_plain(records)
        return

    table = Table(title=f"{session.file_path} ({session.window.value})")
    table.add_column("Commit")
    table.add_column("Lines")
    table.add_column("Author")
    table.add_column("Date")
    table.add_column("Message")
    for rec in records:
        commit = "[yellow]uncommitted[/yellow]" if rec.is_uncommitted else short_id(rec.commit_id)
        author = f"{rec.author} <{rec.author_contact}>" if rec.author_contact else rec.author
        table.add_row(
            commit,
            rec.line_expression,
            author,
            format_relative_date(rec.commit_date),
            first_line(rec.message),
        )
    console.print(table)


def cmd_show(args: argparse.Namespace) -> int:
    settings = _load_settings(args)
    path = Path(args.file).expanduser().resolve()
    line_count = _buffer_line_count(path)

    start = (args.start if args.start is not None else 1) - 1
    end = (args.end if args.end is not None else line_count) - 1

    runner = GitBackend(git=settings.git, timeout=settings.timeout)
    source = create_source(args.mode or settings.mode, runner, max_workers=settings.max_workers)
    session = BlameSession(default_window=settings.window, week_start=settings.week_start)

    with err_console.status(f"Reading history for lines {start + 1}-{end + 1}..."):
        records = attribute_lines(path, start, end, line_count, runner=runner, source=source)
    session.show(records, str(path))
    _apply_filter(session, args)

    if args.json:
        payload = {
            "file": str(path),
            "revision": head_revision(runner, resolve_target(runner, path).root),
            "window": session.window.value,
            "records": [r.to_dict() for r in session.visible()],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    _render(session, plain=args.plain)
    return 0


def cmd_commit(args: argparse.Namespace) -> int:
    settings = _load_settings(args)
    ref = args.commit
    if ref == UNCOMMITTED or is_null_commit(ref):
        raise InputError("Uncommitted lines have no commit to show")

    runner = GitBackend(git=settings.git, timeout=settings.timeout)
    path = Path(args.path).expanduser().resolve()
    try:
        root = repo_root(runner, path)
    except BackendError as e:
        raise InputError(f"{path} is not inside a git repository") from e
    try:
        commit_id = resolve_commit(runner, root, ref)
        info = commit_details(runner, root, commit_id)
    except BackendError as e:
        raise InputError(f"Commit not found: {ref}") from e

    if args.mailto:
        if not info.author_email:
            raise InputError(f"Commit {short_id(commit_id)} has no author email")
        print(mailto_link(info.author_email))
        return 0

    console.print(f"[yellow]commit {commit_id}[/yellow]")
    author = f"{info.author} <{info.author_email}>" if info.author_email else info.author
    console.print(f"Author: {author}", markup=False, highlight=False)
    if info.date is not None:
        console.print(f"Date:   {info.date.isoformat()} ({format_relative_date(info.date)})", highlight=False)
    console.print()
    for line in info.message.splitlines():
        console.print(f"    {line}", markup=False, highlight=False)
    if args.stat:
        console.print()
        console.print(commit_stat(runner, root, commit_id).rstrip("\n"), markup=False, highlight=False)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="blame-trail",
        description="Show which commits last touched a range of lines",
    )
    sub = parser.add_subparsers(dest="command")

    p_show = sub.add_parser("show", help="Attribute lines of a file to commits")
    p_show.add_argument("file", help="File to inspect")
    p_show.add_argument("--start", type=int, help="First line, 1-based (default: 1)")
    p_show.add_argument("--end", type=int, help="Last line, 1-based (default: last line)")
    p_show.add_argument("--mode", choices=MODES, help="Query git per line or once per range")
    p_show.add_argument("--window", choices=WINDOW_CHOICES, help="Date window (default: last6Months)")
    p_show.add_argument("--from", dest="date_from", metavar="YYYY-MM-DD", help="Custom range start")
    p_show.add_argument("--to", dest="date_to", metavar="YYYY-MM-DD", help="Custom range end (default: today)")
    p_show.add_argument("--pick", action="store_true", help="Choose the date window interactively")
    p_show.add_argument("--json", action="store_true", help="Print records as JSON")
    p_show.add_argument("--plain", action="store_true", help="Print one label per record instead of a table")
    p_show.add_argument("--debug", action="store_true", help="Log debug output to stderr and the log file")

    p_commit = sub.add_parser("commit", help="Show the commit behind a record")
    p_commit.add_argument("commit", help="Commit id (abbreviated ids are fine)")
    p_commit.add_argument("--path", default=".", help="File or directory inside the repository (default: .)")
    p_commit.add_argument("--stat", action="store_true", help="Also list the files the commit changed")
    p_commit.add_argument("--mailto", action="store_true", help="Print a mailto: link for the author instead")
    p_commit.add_argument("--debug", action="store_true", help="Log debug output to stderr and the log file")

    sub.add_parser("version", help="Show version")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(0)

    commands = {
        "show": cmd_show,
        "commit": cmd_commit,
        "version": lambda _: console.print(version("blame-trail")) or 0,
    }
    try:
        rc = commands[args.command](args)
    except BlameTrailError as e:
        err_console.print(f"[red]{e}[/red]")
        rc = 1
    sys.exit(rc)


if __name__ == "__main__":
    main()
