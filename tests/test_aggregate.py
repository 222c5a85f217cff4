"""Tests for commit aggregation and ordering."""

from __future__ import annotations

import tests._path_setup  # noqa: F401

import unittest
from datetime import datetime, timezone

from hypothesis import given, strategies as st

from blame_trail.aggregate import aggregate, finalize, sort_records
from blame_trail.ranges import expand_expression
from blame_trail.record import UNCOMMITTED, PartialRecord, ProvenanceRecord

NOW = datetime(2024, 6, 12, 15, 30, tzinfo=timezone.utc)


def _partial(commit: str, line: int, *, date: datetime | None = None, content: str | None = None) -> PartialRecord:
    return PartialRecord(
        commit_id=commit,
        line_number=line,
        author="Ann",
        commit_date=date or datetime(2024, 1, 1, tzinfo=timezone.utc),
        author_contact="ann@example.com",
        message="msg",
        content=content,
    )


def _record(commit: str, date: datetime) -> ProvenanceRecord:
    return ProvenanceRecord(commit, "Ann", "ann@example.com", date, "msg", ["1"])


class AggregateTest(unittest.TestCase):
    def test_shared_commit_merges_lines(self) -> None:
        out = aggregate([_partial("abc123", 1), _partial("abc123", 2)], now=NOW)
        self.assertEqual(list(out), ["abc123"])
        self.assertEqual(out["abc123"].lines, ["1", "2"])

    def test_partials_processed_in_line_order(self) -> None:
        out = aggregate([_partial("a", 5), _partial("a", 3), _partial("a", 4)], now=NOW)
        self.assertEqual(out["a"].lines, ["3", "4", "5"])

    def test_content_accumulates_one_line_each(self) -> None:
        out = aggregate([_partial("a", 1, content="x = 1"), _partial("a", 2, content="y = 2")], now=NOW)
        self.assertEqual(out["a"].content, "x = 1\ny = 2")

    def test_uncommitted_sentinel(self) -> None:
        out = aggregate([_partial("a", 1)], [3, 2], now=NOW)
        rec = out[UNCOMMITTED]
        self.assertEqual(rec.lines, ["2", "3"])
        self.assertEqual(rec.author, "You")
        self.assertEqual(rec.author_contact, "local")
        self.assertEqual(rec.message, "Uncommitted changes")
        self.assertEqual(rec.commit_date, NOW)

    def test_no_sentinel_without_uncommitted_lines(self) -> None:
        self.assertNotIn(UNCOMMITTED, aggregate([_partial("a", 1)], now=NOW))

    def test_uncommitted_line_is_never_attributed_to_a_commit(self) -> None:
        out = aggregate([_partial("a", 1), _partial("a", 2)], [2], now=NOW)
        self.assertEqual(out["a"].lines, ["1"])
        self.assertEqual(out[UNCOMMITTED].lines, ["2"])

    def test_partial_under_sentinel_id_is_not_merged_as_commit(self) -> None:
        out = aggregate([_partial(UNCOMMITTED, 4), _partial("a", 5)], now=NOW)
        self.assertEqual(out[UNCOMMITTED].author, "You")
        self.assertEqual(out[UNCOMMITTED].lines, ["4"])

    def test_duplicate_line_counted_once(self) -> None:
        out = aggregate([_partial("a", 1), _partial("b", 1)], now=NOW)
        self.assertEqual(list(out), ["a"])

    def test_empty(self) -> None:
        self.assertEqual(aggregate([], now=NOW), {})
        self.assertEqual(finalize({}), [])


class FinalizeTest(unittest.TestCase):
    def test_compresses_and_orders(self) -> None:
        partials = [
            _partial("old", 1, date=datetime(2024, 1, 1, tzinfo=timezone.utc)),
            _partial("new", 2, date=datetime(2024, 6, 1, tzinfo=timezone.utc)),
            _partial("old", 3, date=datetime(2024, 1, 1, tzinfo=timezone.utc)),
            _partial("old", 4, date=datetime(2024, 1, 1, tzinfo=timezone.utc)),
        ]
        records = finalize(aggregate(partials, [7, 6], now=NOW))
        self.assertEqual([r.commit_id for r in records], [UNCOMMITTED, "new", "old"])
        self.assertEqual([r.lines for r in records], [["6-7"], ["2"], ["1, 3-4"]])


class SortRecordsTest(unittest.TestCase):
    def test_uncommitted_first_then_newest(self) -> None:
        jan = _record("jan", datetime(2024, 1, 1, tzinfo=timezone.utc))
        jun = _record("jun", datetime(2024, 6, 1, tzinfo=timezone.utc))
        local = _record(UNCOMMITTED, datetime(2020, 1, 1, tzinfo=timezone.utc))
        ordered = sort_records([jan, local, jun])
        self.assertEqual([r.commit_id for r in ordered], [UNCOMMITTED, "jun", "jan"])

    def test_equal_dates_keep_first_seen_order(self) -> None:
        same = datetime(2024, 3, 1, tzinfo=timezone.utc)
        ordered = sort_records([_record("b", same), _record("a", same), _record("c", same)])
        self.assertEqual([r.commit_id for r in ordered], ["b", "a", "c"])


@st.composite
def _attribution(draw):
    lines = draw(st.lists(st.integers(min_value=1, max_value=200), min_size=1, max_size=60, unique=True))
    commits = st.sampled_from(["c1", "c2", "c3", None])  # None: lookup failed
    owners = [draw(commits) for _ in lines]
    return lines, owners


class TestCoverageProperty:
    @given(_attribution())
    def test_every_line_lands_in_exactly_one_record(self, case) -> None:
        lines, owners = case
        partials = [_partial(c, n) for n, c in zip(lines, owners) if c is not None]
        failed = [n for n, c in zip(lines, owners) if c is None]

        records = finalize(aggregate(partials, failed, now=NOW))

        expanded = [n for r in records for n in expand_expression(r.lines[0])]
        assert sorted(expanded) == sorted(lines)
        assert all(r.lines and r.lines[0] for r in records)
        assert len({r.commit_id for r in records}) == len(records)
        if failed:
            sentinel = next(r for r in records if r.commit_id == UNCOMMITTED)
            assert sorted(expand_expression(sentinel.lines[0])) == sorted(failed)


if __name__ == "__main__":
    unittest.main()
