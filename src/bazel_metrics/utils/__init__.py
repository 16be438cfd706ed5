"""bazel-metrics utility modules.

- logging: Standardized logging with human/verbose/JSON modes
- preflight: Benchmark toolchain availability checks
"""

from bazel_metrics.utils.logging import get_logger, setup_logging
from bazel_metrics.utils.preflight import PreflightChecker, PreflightResult

__all__ = [
    "get_logger",
    "setup_logging",
    "PreflightChecker",
    "PreflightResult",
]
