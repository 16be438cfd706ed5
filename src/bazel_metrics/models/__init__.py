"""bazel-metrics data models.

This module exports the core entities used throughout the application:
- Repository: Source tree being scanned
- Package: Finalized per-(directory, language) record
- ScanResult: Sorted package lists and walk totals
- LanguageSummary / DirectoryMetrics: Derived metrics
- Report: The complete metrics.json document
"""

from bazel_metrics.models.package import (
    DirectoryAggregate,
    LanguageTotals,
    ManifestTargetCounts,
    Package,
    PackageDraft,
    RoleCounts,
    ScanResult,
    WalkResult,
)
from bazel_metrics.models.report import (
    DirectoryMetrics,
    LanguageSummary,
    PackageBenchmark,
    PackageInfo,
    Report,
    SpeedReport,
    Summary,
)
from bazel_metrics.models.repository import Repository

__all__ = [
    "DirectoryAggregate",
    "DirectoryMetrics",
    "LanguageSummary",
    "LanguageTotals",
    "ManifestTargetCounts",
    "Package",
    "PackageBenchmark",
    "PackageDraft",
    "PackageInfo",
    "Report",
    "Repository",
    "RoleCounts",
    "ScanResult",
    "SpeedReport",
    "Summary",
    "WalkResult",
]
