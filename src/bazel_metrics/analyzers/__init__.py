"""bazel-metrics analyzers - the scanning and metrics pipeline stages.

Analyzers, in pipeline order:
- Walker: single pass over the tree, per-directory aggregation
- Manifest: BUILD file rule counting (used by the walker)
- Materializer: sorted, immutable per-language package lists
- Metrics: per-language summaries and directory breakdown
- Assembler: final Report
"""

from bazel_metrics.analyzers.assembler import assemble_report
from bazel_metrics.analyzers.manifest import (
    MANIFEST_NAMES,
    ManifestReadError,
    ManifestTargetCounter,
    count_targets,
)
from bazel_metrics.analyzers.materializer import materialize
from bazel_metrics.analyzers.metrics import directory_breakdown, summarize_language
from bazel_metrics.analyzers.walker import (
    DEFAULT_SKIP_DIRS,
    RepositoryWalker,
    ScanError,
    walk_repository,
)

__all__ = [
    "DEFAULT_SKIP_DIRS",
    "MANIFEST_NAMES",
    "ManifestReadError",
    "ManifestTargetCounter",
    "RepositoryWalker",
    "ScanError",
    "assemble_report",
    "count_targets",
    "directory_breakdown",
    "materialize",
    "summarize_language",
    "walk_repository",
]
