"""Report assembly.

Combines language summaries, the directory breakdown, package lists and an
optional speed comparison into the final Report.
"""

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime

from bazel_metrics.languages import LANGUAGES, LanguageSpec
from bazel_metrics.models.package import Package, ScanResult
from bazel_metrics.models.report import (
    DirectoryMetrics,
    LanguageSummary,
    PackageInfo,
    Report,
    SpeedReport,
    Summary,
)


def to_package_info(package: Package) -> PackageInfo:
    """Project a Package onto its report representation."""
    return PackageInfo(
        path=package.path,
        language=package.language,
        has_build_file=package.has_build_file,
        has_test_files=package.has_test_files,
        test_file_count=package.test_file_count,
        test_target_count=package.test_target_count,
        source_file_count=package.source_file_count,
    )


def assemble_report(
    scan: ScanResult,
    summaries: Mapping[str, LanguageSummary],
    breakdown: Sequence[DirectoryMetrics],
    speed_comparison: SpeedReport | None = None,
    languages: tuple[LanguageSpec, ...] = LANGUAGES,
    timestamp: datetime | None = None,
) -> Report:
    """Build the Report.

    Only languages with at least one package appear in `languages`, the
    summaries and the per-language package lists. The legacy summary and
    package list mirror the primary (first registered) language and are
    zero/empty when it has no packages.

    Args:
        scan: Materialized scan result
        summaries: Language id -> summary
        breakdown: Primary-language directory breakdown
        speed_comparison: Benchmark results, attached as-is
        languages: Registry order
        timestamp: Report time (defaults to now, UTC)

    Returns:
        Report ready for serialization
    """
    present: list[str] = []
    language_summaries: dict[str, LanguageSummary] = {}
    language_packages: dict[str, tuple[PackageInfo, ...]] = {}

    for spec in languages:
        packages = scan.packages_for(spec.id)
        if not packages:
            continue
        present.append(spec.id)
        language_summaries[spec.id] = summaries[spec.id]
        language_packages[spec.id] = tuple(to_package_info(p) for p in packages)

    primary = languages[0].id
    if primary in language_summaries:
        summary = Summary.from_language_summary(
            language_summaries[primary], total_build_files=scan.manifest_files
        )
    else:
        summary = Summary()

    return Report(
        timestamp=timestamp or datetime.now(UTC),
        repo_path=scan.repo_path,
        summary=summary,
        directory_breakdown=tuple(breakdown),
        packages=language_packages.get(primary, ()),
        languages=tuple(present),
        language_summaries=language_summaries,
        language_packages=language_packages,
        speed_comparison=speed_comparison,
    )
