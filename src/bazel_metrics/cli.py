"""bazel-metrics CLI interface.

Commands:
- scan: Scan a repository and write metrics.json
- check: Validate benchmark tool availability (go, bazel)
- init: Initialize bazel-metrics configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log lines for CI
- --version: Show version and exit
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from bazel_metrics import __version__
from bazel_metrics.config import MetricsConfig, create_default_config, load_config
from bazel_metrics.utils.logging import configure_from_cli, get_logger

# Create Typer app
app = typer.Typer(
    name="bazel-metrics",
    help="Measure Bazel adoption and test coverage across a source tree",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: MetricsConfig | None = None
_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"bazel-metrics {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log output",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """bazel-metrics - Bazel adoption metrics for Go, Python and Rust.

    Walks a repository, counts BUILD files and *_test targets, and writes a
    metrics.json report for dashboards.
    """
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


# =============================================================================
# scan command
# =============================================================================


@app.command()
def scan(
    repo: Annotated[
        Path,
        typer.Option(
            "--repo",
            "-r",
            help="Repository path to scan",
        ),
    ] = Path("."),
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output JSON file (overrides config)",
        ),
    ] = None,
    benchmark: Annotated[
        bool,
        typer.Option(
            "--benchmark",
            help="Benchmark go test vs bazel test (slow)",
        ),
    ] = False,
    max_benchmarks: Annotated[
        int | None,
        typer.Option(
            "--max-benchmarks",
            help="Maximum packages to benchmark",
        ),
    ] = None,
    pretty: Annotated[
        bool | None,
        typer.Option(
            "--pretty/--no-pretty",
            help="Indent the JSON output (overrides config)",
        ),
    ] = None,
) -> None:
    """Scan a repository and write a metrics report.

    Exit codes:
        0: Report written
        1: Invalid repository, scan failure, or write failure
    """
    from bazel_metrics.analyzers import ScanError
    from bazel_metrics.models import Repository
    from bazel_metrics.pipeline import PipelineOptions, ScanPipeline, write_report
    from bazel_metrics.templates import SummaryRenderer

    config = _config or MetricsConfig()

    output_path = output or Path(config.output.path)
    pretty_output = config.output.pretty if pretty is None else pretty
    run_benchmarks = benchmark or config.benchmark.enabled

    repository = Repository.from_path(repo)
    _logger.info(f"Analyzing repository: {repository.path}")

    options = PipelineOptions(
        run_benchmarks=run_benchmarks,
        max_benchmarks=max_benchmarks,
    )
    pipeline = ScanPipeline(config=config)

    try:
        report = pipeline.run(repository, options)
    except ValueError as e:
        _logger.error(f"Invalid repository: {e}")
        raise typer.Exit(1)
    except ScanError as e:
        _logger.error(f"Scan failed: {e}")
        raise typer.Exit(1)

    typer.echo(SummaryRenderer().render(report))

    try:
        written = write_report(report, output_path, pretty=pretty_output)
    except (OSError, TypeError, ValueError) as e:
        _logger.error(f"Failed to write metrics: {e}")
        raise typer.Exit(1)

    typer.echo(f"Metrics written to: {written}")


# =============================================================================
# check command
# =============================================================================


@app.command()
def check(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON",
        ),
    ] = False,
) -> None:
    """Validate benchmark tool availability.

    Scanning needs no external tools; `scan --benchmark` needs go and bazel.

    Exit codes:
        0: All tools available
        1: One or more tools missing
    """
    from bazel_metrics.utils.preflight import PreflightChecker

    result = PreflightChecker().check_all(benchmark=True)

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        raise typer.Exit(0 if result.success else 1)

    typer.echo("\nPreflight Check Results\n")

    for check_result in result.checks:
        status = "[ok]" if check_result.available else "[missing]"
        version_str = f" ({check_result.version})" if check_result.version else ""

        typer.echo(f"  {status} {check_result.name}{version_str}")
        if check_result.available and check_result.path:
            typer.echo(f"     └─ {check_result.path}")
        elif not check_result.available:
            typer.echo(f"     └─ {check_result.message}")

    typer.echo()

    if result.errors:
        typer.echo("Preflight check FAILED")
        for error in result.errors:
            typer.echo(f"   • {error}")
        raise typer.Exit(1)

    typer.echo("All preflight checks passed")
    raise typer.Exit(0)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Initialize bazel-metrics configuration.

    Creates .bazel-metrics/config.yaml with the default settings.
    """
    config_dir = Path(".bazel-metrics")
    config_file = config_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_dir.mkdir(exist_ok=True)
    config_file.write_text(create_default_config())
    _logger.info(f"Created config: {config_file}")

    typer.echo("bazel-metrics configuration initialized")
    typer.echo(f"   Config: {config_file}")
    raise typer.Exit(0)


if __name__ == "__main__":
    app()
