"""Metrics calculation.

Derives percentage summaries from finalized package lists:
- bazelization: packages with a BUILD file / all packages
- test coverage: packages with test files / all packages
- bazelized tests: packages with test files AND a *_test target /
  packages with test files

A package with a test target but no local test files does not count towards
bazelized tests. Every percentage is 0.0 when its denominator is zero.
Values are not rounded here.
"""

from collections.abc import Sequence
from pathlib import PurePosixPath

from bazel_metrics.models.package import Package
from bazel_metrics.models.report import DirectoryMetrics, LanguageSummary

# Breakdown name for packages at the repository root
ROOT_DIRECTORY_NAME = "(root)"


def percentage(count: int, total: int) -> float:
    """Return 100 * count / total, or 0.0 when total is zero."""
    if total <= 0:
        return 0.0
    return 100 * count / total


def summarize_language(language: str, packages: Sequence[Package]) -> LanguageSummary:
    """Compute the rollup for one language.

    Args:
        language: Language id
        packages: Finalized packages of that language

    Returns:
        LanguageSummary with counts and derived percentages
    """
    total = len(packages)
    with_build = sum(1 for p in packages if p.has_build_file)
    with_tests = sum(1 for p in packages if p.has_test_files)
    bazelized_tests = sum(1 for p in packages if p.has_bazelized_tests)

    return LanguageSummary(
        language=language,
        bazelization_pct=percentage(with_build, total),
        test_coverage_pct=percentage(with_tests, total),
        bazelized_tests_pct=percentage(bazelized_tests, with_tests),
        total_packages=total,
        total_source_files=sum(p.source_file_count for p in packages),
        total_test_files=sum(p.test_file_count for p in packages),
        packages_with_build=with_build,
        packages_with_tests=with_tests,
        total_test_targets=sum(p.test_target_count for p in packages),
    )


def top_level_directory(rel_path: str) -> str:
    """Return the first path segment, or the root sentinel for the root."""
    parts = PurePosixPath(rel_path).parts
    if not parts or parts[0] in {".", "/"}:
        return ROOT_DIRECTORY_NAME
    return parts[0]


def directory_breakdown(packages: Sequence[Package]) -> list[DirectoryMetrics]:
    """Group packages by top-level directory.

    Groups are sorted by package count, descending. Groups with equal counts
    keep the order in which they were first seen in `packages`.

    Args:
        packages: Finalized packages (normally the primary language, sorted)

    Returns:
        One DirectoryMetrics per top-level directory
    """
    groups: dict[str, list[Package]] = {}
    for package in packages:
        groups.setdefault(top_level_directory(package.path), []).append(package)

    breakdown = []
    for name, members in groups.items():
        total = len(members)
        bazelized = sum(1 for p in members if p.has_build_file)
        with_tests = sum(1 for p in members if p.has_test_files)
        breakdown.append(
            DirectoryMetrics(
                name=name,
                total_packages=total,
                bazelized_packages=bazelized,
                packages_with_tests=with_tests,
                bazelization_pct=percentage(bazelized, total),
                test_coverage_pct=percentage(with_tests, total),
            )
        )

    # sorted() is stable, ties stay in first-seen order
    return sorted(breakdown, key=lambda d: d.total_packages, reverse=True)
