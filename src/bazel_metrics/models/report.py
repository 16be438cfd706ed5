"""Report entities.

This module contains the structures serialized into metrics.json:
- LanguageSummary: per-language rollup with derived percentages
- Summary: legacy primary-language summary (pre multi-language schema)
- DirectoryMetrics: primary-language rollup per top-level directory
- PackageInfo: package as exposed to the dashboard
- PackageBenchmark / SpeedReport: native test runner vs bazel test timings
- Report: the complete document

Field names on the wire are camelCase and some are kept for backwards
compatibility with older dashboards (goTestTargetCount, goFileCount).
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from bazel_metrics.languages import get_language

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass(frozen=True)
class LanguageSummary:
    """Per-language rollup.

    Attributes:
        language: Language id
        bazelization_pct: Share of packages with a BUILD file
        test_coverage_pct: Share of packages with test files
        bazelized_tests_pct: Share of test-having packages with a test target
        total_packages: Number of packages
        total_source_files: Non-test source files across packages
        total_test_files: Test files across packages
        packages_with_build: Packages with a BUILD file
        packages_with_tests: Packages with test files
        total_test_targets: *_test rules across packages
    """

    language: str
    bazelization_pct: float = 0.0
    test_coverage_pct: float = 0.0
    bazelized_tests_pct: float = 0.0
    total_packages: int = 0
    total_source_files: int = 0
    total_test_files: int = 0
    packages_with_build: int = 0
    packages_with_tests: int = 0
    total_test_targets: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "language": self.language,
            "bazelizationPct": self.bazelization_pct,
            "testCoveragePct": self.test_coverage_pct,
            "bazelizedTestsPct": self.bazelized_tests_pct,
            "totalPackages": self.total_packages,
            "totalSourceFiles": self.total_source_files,
            "totalTestFiles": self.total_test_files,
            "packagesWithBuild": self.packages_with_build,
            "packagesWithTests": self.packages_with_tests,
            "totalTestTargets": self.total_test_targets,
        }


@dataclass(frozen=True)
class Summary:
    """Legacy summary mirroring the primary language."""

    bazelization_pct: float = 0.0
    test_coverage_pct: float = 0.0
    bazelized_tests_pct: float = 0.0
    total_packages: int = 0
    total_build_files: int = 0
    total_test_files: int = 0
    total_go_files: int = 0
    packages_with_build: int = 0
    packages_with_tests: int = 0
    total_go_test_targets: int = 0

    @classmethod
    def from_language_summary(
        cls, summary: LanguageSummary, total_build_files: int
    ) -> "Summary":
        """Build the legacy view from a language summary."""
        return cls(
            bazelization_pct=summary.bazelization_pct,
            test_coverage_pct=summary.test_coverage_pct,
            bazelized_tests_pct=summary.bazelized_tests_pct,
            total_packages=summary.total_packages,
            total_build_files=total_build_files,
            total_test_files=summary.total_test_files,
            total_go_files=summary.total_source_files,
            packages_with_build=summary.packages_with_build,
            packages_with_tests=summary.packages_with_tests,
            total_go_test_targets=summary.total_test_targets,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "bazelizationPct": self.bazelization_pct,
            "testCoveragePct": self.test_coverage_pct,
            "bazelizedTestsPct": self.bazelized_tests_pct,
            "totalPackages": self.total_packages,
            "totalBuildFiles": self.total_build_files,
            "totalTestFiles": self.total_test_files,
            "totalGoFiles": self.total_go_files,
            "packagesWithBuild": self.packages_with_build,
            "packagesWithTests": self.packages_with_tests,
            "totalGoTestTargets": self.total_go_test_targets,
        }


@dataclass(frozen=True)
class DirectoryMetrics:
    """Primary-language rollup for one top-level directory."""

    name: str
    total_packages: int = 0
    bazelized_packages: int = 0
    packages_with_tests: int = 0
    bazelization_pct: float = 0.0
    test_coverage_pct: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "totalPackages": self.total_packages,
            "bazelizedPackages": self.bazelized_packages,
            "packagesWithTests": self.packages_with_tests,
            "bazelizationPct": self.bazelization_pct,
            "testCoveragePct": self.test_coverage_pct,
        }


@dataclass(frozen=True)
class PackageInfo:
    """Package as exposed in the report."""

    path: str
    language: str
    has_build_file: bool
    has_test_files: bool
    test_file_count: int
    test_target_count: int
    source_file_count: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "path": self.path,
            "language": self.language,
            "hasBuildFile": self.has_build_file,
            "hasTestFiles": self.has_test_files,
            "testFileCount": self.test_file_count,
            # Wire names predate multi-language support
            "goTestTargetCount": self.test_target_count,
            "goFileCount": self.source_file_count,
        }


@dataclass(frozen=True)
class PackageBenchmark:
    """Timings for one package, in milliseconds."""

    path: str
    native_test_ms: int
    bazel_test_cold_ms: int
    bazel_test_warm_ms: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "path": self.path,
            "goTestMs": self.native_test_ms,
            "bazelTestColdMs": self.bazel_test_cold_ms,
            "bazelTestWarmMs": self.bazel_test_warm_ms,
        }


@dataclass(frozen=True)
class SpeedReport:
    """Benchmark results for the sampled packages."""

    packages: tuple[PackageBenchmark, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"packages": [p.to_dict() for p in self.packages]}


@dataclass(frozen=True)
class Report:
    """The complete metrics report.

    Attributes:
        timestamp: Report creation time (UTC)
        repo_path: Absolute repository root
        summary: Legacy primary-language summary
        directory_breakdown: Primary-language metrics per top-level directory
        packages: Legacy package list (primary language)
        languages: Language ids with at least one package, in registry order
        language_summaries: Language id -> summary, in registry order
        language_packages: Language id -> packages, in registry order
        speed_comparison: Benchmark results when benchmarks ran
    """

    timestamp: datetime
    repo_path: Path
    summary: Summary = field(default_factory=Summary)
    directory_breakdown: tuple[DirectoryMetrics, ...] = ()
    packages: tuple[PackageInfo, ...] = ()
    languages: tuple[str, ...] = ()
    language_summaries: dict[str, LanguageSummary] = field(default_factory=dict)
    language_packages: dict[str, tuple[PackageInfo, ...]] = field(default_factory=dict)
    speed_comparison: SpeedReport | None = None

    @property
    def formatted_timestamp(self) -> str:
        return self.timestamp.strftime(TIMESTAMP_FORMAT)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the metrics.json document.

        speedComparison and the per-language package arrays are omitted
        (not null) when absent.
        """
        data: dict[str, Any] = {
            "timestamp": self.formatted_timestamp,
            "repoPath": str(self.repo_path),
            "summary": self.summary.to_dict(),
            "directoryBreakdown": [d.to_dict() for d in self.directory_breakdown],
            "packages": [p.to_dict() for p in self.packages],
        }
        if self.speed_comparison is not None:
            data["speedComparison"] = self.speed_comparison.to_dict()

        data["languages"] = list(self.languages)
        data["languageSummaries"] = {
            lang: summary.to_dict() for lang, summary in self.language_summaries.items()
        }
        for lang, packages in self.language_packages.items():
            if packages:
                data[get_language(lang).packages_key] = [p.to_dict() for p in packages]

        return data
