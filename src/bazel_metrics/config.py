"""bazel-metrics configuration system.

Configuration is YAML-based with per-run CLI overrides (--output, --pretty,
--benchmark, --max-benchmarks). Supports environment variable substitution
(${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.bazel-metrics/config.yaml
3. ./bazel-metrics.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        path: Path of the metrics JSON file
        pretty: Indent the JSON output
    """

    path: str = "metrics.json"
    pretty: bool = True


@dataclass
class ScanConfig:
    """Repository walk configuration.

    Attributes:
        extra_skip_dirs: Directory names to exclude in addition to the
            built-in denylist (.git, bazel-*, node_modules, vendor, ...)
    """

    extra_skip_dirs: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate scan configuration."""
        for name in self.extra_skip_dirs:
            if not isinstance(name, str) or not name or "/" in name:
                raise ValueError(f"Invalid skip directory name: {name!r}")


@dataclass
class BenchmarkConfig:
    """Benchmark configuration.

    Attributes:
        enabled: Run benchmarks by default
        max_packages: Maximum packages to benchmark
        max_test_files: Skip packages with more test files than this
        timeout: Timeout in seconds per test command
        clean_timeout: Timeout in seconds for `bazel clean`
    """

    enabled: bool = False
    max_packages: int = 5
    max_test_files: int = 20
    timeout: int = 300
    clean_timeout: int = 120

    def __post_init__(self) -> None:
        """Validate benchmark configuration."""
        if self.max_packages <= 0:
            self.max_packages = 5

        if self.max_test_files <= 0:
            raise ValueError(f"max_test_files must be positive (got {self.max_test_files})")

        if self.timeout <= 0 or self.clean_timeout <= 0:
            raise ValueError("Benchmark timeouts must be positive")


@dataclass
class MetricsConfig:
    """Top-level bazel-metrics configuration.

    Attributes:
        output: Output path and formatting
        scan: Repository walk settings
        benchmark: Benchmark settings
    """

    output: OutputConfig = field(default_factory=OutputConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    benchmark: BenchmarkConfig = field(default_factory=BenchmarkConfig)

    # Runtime overrides (set by CLI)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.
    Example: ${METRICS_OUTPUT} -> value of METRICS_OUTPUT

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.bazel-metrics/config.yaml
    2. ./bazel-metrics.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".bazel-metrics" / "config.yaml",
        start_path / "bazel-metrics.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in {"true", "false"}:
        return value.lower() == "true"
    raise ValueError(f"{name} must be a boolean (got {value!r})")


def load_config_from_dict(data: dict[str, Any]) -> MetricsConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        MetricsConfig instance
    """
    data = substitute_env_vars(data)

    config = MetricsConfig()

    if "output" in data:
        output_data = data["output"] or {}
        config.output = OutputConfig(
            path=str(output_data.get("path", config.output.path)),
            pretty=_as_bool(output_data.get("pretty", config.output.pretty), "output.pretty"),
        )

    if "scan" in data:
        scan_data = data["scan"] or {}
        config.scan = ScanConfig(
            extra_skip_dirs=list(scan_data.get("extra_skip_dirs") or []),
        )

    if "benchmark" in data:
        bench_data = data["benchmark"] or {}
        defaults = BenchmarkConfig()
        config.benchmark = BenchmarkConfig(
            enabled=_as_bool(bench_data.get("enabled", defaults.enabled), "benchmark.enabled"),
            max_packages=int(bench_data.get("max_packages", defaults.max_packages)),
            max_test_files=int(bench_data.get("max_test_files", defaults.max_test_files)),
            timeout=int(bench_data.get("timeout", defaults.timeout)),
            clean_timeout=int(bench_data.get("clean_timeout", defaults.clean_timeout)),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> MetricsConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        MetricsConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {found_path}")
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = MetricsConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return """# bazel-metrics configuration

# Output settings
output:
  path: "metrics.json"
  pretty: true

# Repository walk
scan:
  # Directory names to skip in addition to the built-in list
  # (.git, bazel-*, node_modules, vendor, __pycache__, target, venv, ...)
  extra_skip_dirs: []

# go test vs bazel test benchmarks
benchmark:
  enabled: false
  max_packages: 5      # packages to sample
  max_test_files: 20   # skip packages with more test files
  timeout: 300         # seconds per test command
  clean_timeout: 120   # seconds for bazel clean
"""
