"""Scan pipeline orchestrator.

Coordinates the stages that turn a source tree into a Report:
1. Walk the tree and count BUILD file targets
2. Materialize sorted per-language package lists
3. Summarize each language and break the primary language down by directory
4. Optionally benchmark native vs Bazel test runs
5. Assemble the report
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from bazel_metrics.analyzers import (
    assemble_report,
    directory_breakdown,
    materialize,
    summarize_language,
)
from bazel_metrics.analyzers.walker import RepositoryWalker
from bazel_metrics.benchmark import BenchmarkRunner
from bazel_metrics.config import MetricsConfig
from bazel_metrics.languages import LANGUAGES, LanguageSpec
from bazel_metrics.models import Report, Repository, ScanResult, SpeedReport
from bazel_metrics.utils.logging import get_logger
from bazel_metrics.utils.preflight import PreflightChecker

logger = logging.getLogger(__name__)


@dataclass
class PipelineOptions:
    """Options for controlling pipeline execution.

    Attributes:
        run_benchmarks: Time go test vs bazel test for sampled packages
        max_benchmarks: Maximum packages to benchmark (overrides config)
        extra_skip_dirs: Directory names to exclude (added to config's list)
    """

    run_benchmarks: bool = False
    max_benchmarks: int | None = None
    extra_skip_dirs: list[str] = field(default_factory=list)


class ScanPipeline:
    """Runs every scan stage for one repository.

    The pipeline holds no state between runs; calling run() twice on an
    unchanged tree yields reports that differ only in their timestamp.

    Usage:
        pipeline = ScanPipeline(config)
        report = pipeline.run(Repository.from_path("."))
    """

    def __init__(
        self,
        config: MetricsConfig | None = None,
        languages: tuple[LanguageSpec, ...] = LANGUAGES,
    ) -> None:
        """Initialize the scan pipeline.

        Args:
            config: bazel-metrics configuration (uses defaults if None)
            languages: Language registry, primary language first
        """
        self.config = config or MetricsConfig()
        self.languages = languages

    def run(
        self,
        repository: Repository,
        options: PipelineOptions | None = None,
    ) -> Report:
        """Execute the full scan pipeline.

        Args:
            repository: Repository to scan
            options: Pipeline execution options

        Returns:
            Report ready for serialization

        Raises:
            ValueError: If repository validation fails
            ScanError: If the repository root cannot be walked
        """
        options = options or PipelineOptions()

        for warning in repository.validate():
            logger.warning("Repository warning: %s", warning)

        logger.info("Scanning %s for packages and BUILD files", repository.path)
        scan = self.scan(repository.path, options)

        found = ", ".join(
            f"{len(scan.packages_for(spec.id))} {spec.display_name} packages"
            for spec in self.languages
        )
        logger.info("Found: %s, %d BUILD files", found, scan.manifest_files)

        summaries = {
            spec.id: summarize_language(spec.id, scan.packages_for(spec.id))
            for spec in self.languages
        }
        primary = self.languages[0]
        breakdown = directory_breakdown(scan.packages_for(primary.id))

        speed_comparison = None
        if options.run_benchmarks:
            speed_comparison = self._run_benchmarks(repository.path, scan, options)

        report = assemble_report(
            scan,
            summaries,
            breakdown,
            speed_comparison=speed_comparison,
            languages=self.languages,
        )

        get_logger().structured(
            logging.INFO,
            "Scan complete",
            repo=str(report.repo_path),
            languages=list(report.languages),
            packages={lang: len(pkgs) for lang, pkgs in report.language_packages.items()},
            build_files=scan.manifest_files,
            benchmarked=len(speed_comparison.packages) if speed_comparison else 0,
        )
        return report

    def scan(self, repo_path: Path, options: PipelineOptions | None = None) -> ScanResult:
        """Walk the repository and materialize per-language package lists.

        Args:
            repo_path: Repository root
            options: Pipeline execution options

        Returns:
            ScanResult with sorted, immutable package lists
        """
        options = options or PipelineOptions()
        skip_dirs = [*self.config.scan.extra_skip_dirs, *options.extra_skip_dirs]

        walker = RepositoryWalker(
            repo_path,
            languages=self.languages,
            extra_skip_dirs=skip_dirs,
        )
        return materialize(walker.walk(), self.languages)

    def _run_benchmarks(
        self,
        repo_path: Path,
        scan: ScanResult,
        options: PipelineOptions,
    ) -> SpeedReport | None:
        """Run benchmarks, returning None if they cannot run at all.

        Missing go or bazel skips benchmarking entirely; per-package
        failures are handled by the runner.
        """
        primary = self.languages[0]
        packages = scan.packages_for(primary.id)
        if not packages:
            logger.info("No %s packages to benchmark", primary.display_name)
            return None

        bench = self.config.benchmark
        max_packages = (
            options.max_benchmarks if options.max_benchmarks is not None else bench.max_packages
        )
        runner = BenchmarkRunner(
            repo_path,
            max_packages=max_packages,
            max_test_files=bench.max_test_files,
            timeout=bench.timeout,
            clean_timeout=bench.clean_timeout,
        )

        preflight = PreflightChecker([runner.native, runner.bazel]).check_all(benchmark=True)
        if not preflight.success:
            for error in preflight.errors:
                logger.warning(error)
            logger.warning("Skipping benchmarks")
            return None

        logger.info(
            "Running speed benchmarks (%s), this may take several minutes",
            primary.display_name,
        )
        try:
            return runner.run(packages)
        except Exception as e:
            logger.warning("Benchmarks failed, omitting speed comparison: %s", e)
            return None


def serialize_report(report: Report, pretty: bool = True) -> str:
    """Serialize a report to JSON.

    Args:
        report: Report to serialize
        pretty: Indent with 2 spaces (compact otherwise)

    Returns:
        JSON document
    """
    if pretty:
        return json.dumps(report.to_dict(), indent=2)
    return json.dumps(report.to_dict(), separators=(",", ":"))


def write_report(report: Report, output_path: Path, pretty: bool = True) -> Path:
    """Write a report as JSON, creating parent directories.

    Args:
        report: Report to write
        output_path: Destination file
        pretty: Indent with 2 spaces (compact otherwise)

    Returns:
        Path to written file

    Raises:
        OSError: If the file cannot be written
    """
    content = serialize_report(report, pretty)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content + "\n", encoding="utf-8")
    logger.info("Wrote metrics to %s", output_path)

    return output_path
