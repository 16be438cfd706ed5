"""Test runner adapters for go test and bazel test."""

import logging
import os
from pathlib import Path

from bazel_metrics.benchmark.base import (
    TimedRun,
    ToolAdapter,
    ToolExecutionError,
    ToolNotAvailableError,
)
from bazel_metrics.models.package import Package

logger = logging.getLogger(__name__)


def package_dir(repo_path: Path, package: Package) -> Path:
    """Absolute directory of a package."""
    return repo_path if package.path == "." else repo_path / package.path


class GoTestAdapter(ToolAdapter):
    """Runs `go test -count=1` for a single Go package.

    Tests run from the nearest enclosing Go module (the directory holding
    go.mod), falling back to the repository root. Cgo is disabled so timings
    do not depend on a local C toolchain.
    """

    version_args = ("version",)
    purpose = "Native test runner (go test)"
    install_hint = "Install from: https://go.dev/dl"

    def __init__(self, timeout: int = 300) -> None:
        super().__init__(name="go", timeout=timeout)

    def parse_version(self, line: str) -> str:
        # Output format: "go version go1.22.1 linux/amd64"
        parts = line.split()
        if len(parts) >= 3 and parts[:2] == ["go", "version"]:
            return parts[2]
        return line

    @staticmethod
    def find_module_root(repo_path: Path, directory: Path) -> Path | None:
        """Find the closest directory at or above `directory` holding go.mod.

        The search stops at the repository root.
        """
        current = directory
        while True:
            if (current / "go.mod").is_file():
                return current
            if current == repo_path or repo_path not in current.parents:
                return None
            current = current.parent

    def execute(self, repo_path: Path, package: Package) -> TimedRun:
        """Time `go test` for the package.

        A failing test run still yields a timing.
        """
        directory = package_dir(repo_path, package)
        module_root = self.find_module_root(repo_path, directory) or repo_path
        import_path = "./" + Path(os.path.relpath(directory, module_root)).as_posix()

        env = dict(os.environ)
        env["CGO_ENABLED"] = "0"

        logger.debug("Running go test %s in %s", import_path, module_root)
        return self.run_timed(["go", "test", "-count=1", import_path], cwd=module_root, env=env)


class BazelTestAdapter(ToolAdapter):
    """Runs `bazel test //<package>:all` from the repository root."""

    purpose = "Build system test runner (bazel test)"
    install_hint = "Install bazelisk from: https://github.com/bazelbuild/bazelisk"

    def __init__(self, timeout: int = 300, clean_timeout: int = 120) -> None:
        super().__init__(name="bazel", timeout=timeout)
        self.clean_timeout = clean_timeout

    def parse_version(self, line: str) -> str:
        # Output format: "bazel 7.1.0"
        if line.startswith("bazel "):
            return line.split()[-1]
        return line

    @staticmethod
    def target_pattern(package: Package) -> str:
        """All targets in the package's directory (root package is ``//:all``)."""
        if package.path == ".":
            return "//:all"
        return f"//{package.path}:all"

    def execute(self, repo_path: Path, package: Package) -> TimedRun:
        target = self.target_pattern(package)
        logger.debug("Running bazel test %s", target)
        return self.run_timed(["bazel", "test", target, "--test_output=errors"], cwd=repo_path)

    def clean(self, repo_path: Path) -> None:
        """Run `bazel clean` so the next test run starts cold.

        Failures are logged and ignored.
        """
        try:
            run = self.run_timed(["bazel", "clean"], cwd=repo_path, timeout=self.clean_timeout)
        except (ToolNotAvailableError, ToolExecutionError) as e:
            logger.debug("bazel clean failed: %s", e)
            return
        if not run.succeeded:
            logger.debug("bazel clean exited with %d", run.exit_code)
