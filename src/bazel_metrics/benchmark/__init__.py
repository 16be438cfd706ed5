"""Speed benchmarks: native test runners vs bazel test.

- base: ToolAdapter interface and tool errors
- adapters: go test and bazel test adapters
- runner: candidate selection and timing loop
"""

from bazel_metrics.benchmark.adapters import BazelTestAdapter, GoTestAdapter
from bazel_metrics.benchmark.base import (
    TimedRun,
    ToolAdapter,
    ToolExecutionError,
    ToolNotAvailableError,
)
from bazel_metrics.benchmark.runner import BenchmarkRunner

__all__ = [
    "BazelTestAdapter",
    "BenchmarkRunner",
    "GoTestAdapter",
    "TimedRun",
    "ToolAdapter",
    "ToolExecutionError",
    "ToolNotAvailableError",
]
