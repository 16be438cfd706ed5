"""Unit tests for metrics calculation."""

import pytest

from bazel_metrics.analyzers.metrics import (
    ROOT_DIRECTORY_NAME,
    directory_breakdown,
    percentage,
    summarize_language,
    top_level_directory,
)
from bazel_metrics.models import Package


def make_package(path: str, build: bool = False, tests: int = 0, targets: int = 0) -> Package:
    return Package(
        path=path,
        language="go",
        has_build_file=build,
        has_test_files=tests > 0,
        source_file_count=1,
        test_file_count=tests,
        test_target_count=targets,
    )


class TestPercentage:
    """Tests for percentage calculation."""

    def test_zero_denominator(self) -> None:
        """Test that an empty denominator yields 0.0."""
        assert percentage(0, 0) == 0.0

    def test_not_rounded(self) -> None:
        """Test that values keep full precision."""
        assert percentage(2, 3) == pytest.approx(66.6666666, rel=1e-6)

    def test_full(self) -> None:
        """Test 100 percent."""
        assert percentage(4, 4) == 100.0


class TestSummarizeLanguage:
    """Tests for per-language summaries."""

    def test_three_package_example(self) -> None:
        """Test the canonical three-package example."""
        packages = [
            make_package("a", build=True, tests=1, targets=1),
            make_package("b", build=True),
            make_package("c", tests=1),
        ]

        summary = summarize_language("go", packages)

        assert summary.language == "go"
        assert summary.total_packages == 3
        assert summary.packages_with_build == 2
        assert summary.packages_with_tests == 2
        assert summary.bazelization_pct == pytest.approx(66.666, abs=0.01)
        assert summary.test_coverage_pct == pytest.approx(66.666, abs=0.01)
        assert summary.bazelized_tests_pct == pytest.approx(50.0)
        assert summary.total_test_targets == 1
        assert summary.total_test_files == 2
        assert summary.total_source_files == 3

    def test_test_target_without_test_files_is_not_bazelized(self) -> None:
        """Test that bazelized tests need local test files."""
        packages = [make_package("a", build=True, targets=2)]

        summary = summarize_language("go", packages)

        assert summary.packages_with_tests == 0
        assert summary.bazelized_tests_pct == 0.0
        assert summary.total_test_targets == 2

    def test_empty(self) -> None:
        """Test that an empty language has all-zero metrics."""
        summary = summarize_language("rust", [])

        assert summary.total_packages == 0
        assert summary.bazelization_pct == 0.0
        assert summary.test_coverage_pct == 0.0
        assert summary.bazelized_tests_pct == 0.0

    def test_percentages_within_bounds(self) -> None:
        """Test that percentages stay in [0, 100]."""
        packages = [make_package(str(i), build=i % 2 == 0, tests=i % 3, targets=i % 2) for i in range(10)]

        summary = summarize_language("go", packages)

        for value in (summary.bazelization_pct, summary.test_coverage_pct, summary.bazelized_tests_pct):
            assert 0.0 <= value <= 100.0


class TestTopLevelDirectory:
    """Tests for top-level directory extraction."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            (".", ROOT_DIRECTORY_NAME),
            ("pkg", "pkg"),
            ("pkg/api/v1", "pkg"),
            ("cmd/server", "cmd"),
        ],
    )
    def test_top_level(self, path: str, expected: str) -> None:
        """Test first path segment extraction."""
        assert top_level_directory(path) == expected


class TestDirectoryBreakdown:
    """Tests for the per-directory breakdown."""

    def test_groups_and_sorts_by_size(self) -> None:
        """Test grouping by first segment, largest group first."""
        packages = [
            make_package("."),
            make_package("cmd/a", build=True),
            make_package("pkg/a", build=True, tests=1),
            make_package("pkg/b", build=True),
            make_package("pkg/c", tests=1),
        ]

        breakdown = directory_breakdown(packages)

        assert [d.name for d in breakdown] == ["pkg", "(root)", "cmd"]
        pkg = breakdown[0]
        assert pkg.total_packages == 3
        assert pkg.bazelized_packages == 2
        assert pkg.packages_with_tests == 2
        assert pkg.bazelization_pct == pytest.approx(200 / 3)

    def test_ties_keep_first_seen_order(self) -> None:
        """Test that equal-sized groups keep input order."""
        packages = [make_package("b/x"), make_package("a/x"), make_package("c/x")]

        breakdown = directory_breakdown(packages)

        assert [d.name for d in breakdown] == ["b", "a", "c"]

    def test_counts_sum_to_total(self) -> None:
        """Test that every package lands in exactly one group."""
        packages = [make_package(p) for p in [".", "a", "a/b", "a/b/c", "d", "e/f"]]

        breakdown = directory_breakdown(packages)

        assert sum(d.total_packages for d in breakdown) == len(packages)
        assert len({d.name for d in breakdown}) == len(breakdown)

    def test_empty(self) -> None:
        """Test the breakdown of no packages."""
        assert directory_breakdown([]) == []
