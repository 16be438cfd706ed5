"""Benchmark runner comparing native test runs with bazel test.

For a small sample of primary-language packages that already have both test
files and test targets, times:
1. the native test runner (go test)
2. bazel test after `bazel clean` (cold)
3. bazel test again (warm)
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from bazel_metrics.benchmark.adapters import BazelTestAdapter, GoTestAdapter
from bazel_metrics.benchmark.base import ToolAdapter, ToolExecutionError, ToolNotAvailableError
from bazel_metrics.models.package import Package
from bazel_metrics.models.report import PackageBenchmark, SpeedReport

logger = logging.getLogger(__name__)

DEFAULT_MAX_PACKAGES = 5
DEFAULT_MAX_TEST_FILES = 20


class BenchmarkRunner:
    """Times native and Bazel test runs for sampled packages.

    Usage:
        runner = BenchmarkRunner(repo_path, max_packages=5)
        speed_report = runner.run(scan.packages_for("go"))
    """

    def __init__(
        self,
        repo_path: Path,
        max_packages: int = DEFAULT_MAX_PACKAGES,
        max_test_files: int = DEFAULT_MAX_TEST_FILES,
        native: ToolAdapter | None = None,
        bazel: BazelTestAdapter | None = None,
        timeout: int = 300,
        clean_timeout: int = 120,
    ) -> None:
        """Initialize the runner.

        Args:
            repo_path: Repository root
            max_packages: Maximum packages to benchmark (non-positive -> default)
            max_test_files: Skip packages with more test files than this
            native: Native test runner (defaults to go test)
            bazel: Bazel test runner
            timeout: Timeout in seconds per test command
            clean_timeout: Timeout in seconds for bazel clean
        """
        self.repo_path = repo_path
        self.max_packages = max_packages if max_packages > 0 else DEFAULT_MAX_PACKAGES
        self.max_test_files = max_test_files
        self.native = native or GoTestAdapter(timeout=timeout)
        self.bazel = bazel or BazelTestAdapter(timeout=timeout, clean_timeout=clean_timeout)

    def select_candidates(self, packages: Sequence[Package]) -> list[Package]:
        """Pick packages worth benchmarking.

        Candidates have test files, at least one test target, and no more
        than `max_test_files` test files. Smaller packages come first so the
        benchmark finishes quickly.
        """
        candidates = [
            p
            for p in packages
            if p.has_test_files
            and p.test_target_count > 0
            and 0 < p.test_file_count <= self.max_test_files
        ]
        candidates.sort(key=lambda p: p.test_file_count)
        return candidates[: self.max_packages]

    def run(self, packages: Sequence[Package]) -> SpeedReport:
        """Benchmark the selected packages.

        Packages whose native run fails are left out of the report.
        """
        candidates = self.select_candidates(packages)
        if not candidates:
            logger.info("No packages eligible for benchmarking")
            return SpeedReport()

        results: list[PackageBenchmark] = []
        for package in candidates:
            logger.info("Benchmarking %s", package.path)
            try:
                results.append(self.benchmark_package(package))
            except (ToolNotAvailableError, ToolExecutionError) as e:
                logger.warning("Failed to benchmark %s: %s", package.path, e)

        return SpeedReport(packages=tuple(results))

    def benchmark_package(self, package: Package) -> PackageBenchmark:
        """Time one package.

        Raises:
            ToolNotAvailableError: If the native test runner is missing
            ToolExecutionError: If the native test run cannot complete
        """
        native_run = self.native.execute(self.repo_path, package)

        self.bazel.clean(self.repo_path)
        cold_ms = self._time_bazel(package, "cold")
        warm_ms = self._time_bazel(package, "warm")

        return PackageBenchmark(
            path=package.path,
            native_test_ms=native_run.elapsed_ms,
            bazel_test_cold_ms=cold_ms,
            bazel_test_warm_ms=warm_ms,
        )

    def _time_bazel(self, package: Package, label: str) -> int:
        # Bazel failures still produce a timing
        try:
            run = self.bazel.execute(self.repo_path, package)
        except ToolNotAvailableError as e:
            logger.warning("bazel test (%s) could not run for %s: %s", label, package.path, e)
            return 0
        except ToolExecutionError as e:
            logger.warning("bazel test (%s) had issues for %s: %s", label, package.path, e)
            return e.elapsed_ms or 0

        if not run.succeeded:
            logger.warning(
                "bazel test (%s) exited with %d for %s", label, run.exit_code, package.path
            )
        return run.elapsed_ms
