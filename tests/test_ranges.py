"""Tests for line-number range expressions."""

from __future__ import annotations

import tests._path_setup  # noqa: F401

import unittest

from hypothesis import given, settings, strategies as st

from blame_trail.ranges import compress_lines, expand_expression, format_line_numbers


class CompressLinesTest(unittest.TestCase):
    def test_mixed_runs(self) -> None:
        self.assertEqual(format_line_numbers({1, 2, 3, 7, 9, 10}), "1-3, 7, 9-10")

    def test_single_line(self) -> None:
        self.assertEqual(format_line_numbers({5}), "5")

    def test_empty_input(self) -> None:
        self.assertEqual(compress_lines([]), [])
        self.assertEqual(format_line_numbers([]), "")

    def test_unsorted_strings_with_duplicates(self) -> None:
        self.assertEqual(compress_lines(["12", "10", "11", "11", "20"]), ["10-12", "20"])

    def test_two_adjacent_lines_form_a_range(self) -> None:
        self.assertEqual(compress_lines([4, 5]), ["4-5"])


class ExpandExpressionTest(unittest.TestCase):
    def test_expand(self) -> None:
        self.assertEqual(expand_expression("1-3, 7, 9-10"), [1, 2, 3, 7, 9, 10])

    def test_expand_empty(self) -> None:
        self.assertEqual(expand_expression(""), [])


line_sets = st.sets(st.integers(min_value=1, max_value=5000), max_size=200)


class TestCompressProperties:
    @given(lines=line_sets)
    @settings(max_examples=200)
    def test_round_trip_is_idempotent(self, lines: set[int]) -> None:
        once = format_line_numbers(lines)
        assert format_line_numbers(expand_expression(once)) == once

    @given(lines=line_sets)
    @settings(max_examples=200)
    def test_expansion_covers_exactly_the_input(self, lines: set[int]) -> None:
        assert expand_expression(format_line_numbers(lines)) == sorted(lines)

    @given(lines=st.lists(st.integers(min_value=1, max_value=300), max_size=100))
    def test_runs_are_ascending_and_not_adjacent(self, lines: list[int]) -> None:
        runs = compress_lines(lines)
        bounds = [tuple(int(x) for x in r.split("-")) for r in runs]
        for prev, cur in zip(bounds, bounds[1:]):
            assert cur[0] > prev[-1] + 1


if __name__ == "__main__":
    unittest.main()
