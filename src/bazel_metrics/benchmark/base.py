"""Abstract base class for test runner adapters.

Benchmarks shell out to external test runners (go test, bazel test). Each
adapter:
1. Locates its executable on PATH and reports its version
2. Runs the tests for one package
3. Reports the elapsed wall time in milliseconds
"""

import shutil
import subprocess
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from bazel_metrics.models.package import Package


@dataclass(frozen=True)
class TimedRun:
    """Outcome of one timed command.

    Attributes:
        elapsed_ms: Wall time in milliseconds
        exit_code: Process exit code
    """

    elapsed_ms: int
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class ToolAdapter(ABC):
    """Abstract interface for pluggable test runners.

    Subclasses describe their tool with class attributes and implement
    execute(); discovery and version probing are shared.

    Attributes:
        name: Executable name (e.g., "go", "bazel")
        timeout: Timeout in seconds for a single test run
        version_args: Arguments that print the tool version
        purpose: What the tool is used for in a benchmark
        install_hint: Shown when the tool is missing
    """

    version_args: tuple[str, ...] = ("--version",)
    purpose: str = ""
    install_hint: str = ""

    def __init__(self, name: str, timeout: int = 300) -> None:
        """Initialize the adapter.

        Args:
            name: Executable name
            timeout: Timeout in seconds for a single test run
        """
        self.name = name
        self.timeout = timeout

    def locate(self) -> str | None:
        """Return the executable's path on PATH, or None."""
        return shutil.which(self.name)

    def check_available(self) -> bool:
        """Verify tool is installed and accessible."""
        return self.locate() is not None

    def get_version(self, timeout: int = 10) -> str | None:
        """Probe the tool version.

        Args:
            timeout: Timeout in seconds for the version command

        Returns:
            Parsed version, or None if the probe fails
        """
        try:
            result = subprocess.run(
                [self.name, *self.version_args],
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except (subprocess.TimeoutExpired, OSError):
            return None
        if result.returncode != 0:
            return None

        output = result.stdout.strip() or result.stderr.strip()
        if not output:
            return None
        return self.parse_version(output.splitlines()[0])

    def parse_version(self, line: str) -> str:
        """Extract the version from the first line of version output."""
        return line

    @abstractmethod
    def execute(self, repo_path: Path, package: Package) -> TimedRun:
        """Run the package's tests and time them.

        Args:
            repo_path: Repository root
            package: Package to test

        Returns:
            TimedRun (a non-zero exit code is not an error)

        Raises:
            ToolNotAvailableError: If the tool is not installed
            ToolExecutionError: If the tool cannot be started or times out
        """

    def run_timed(
        self,
        args: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> TimedRun:
        """Run a command and measure its wall time.

        Raises:
            ToolNotAvailableError: If the executable is missing
            ToolExecutionError: If the command times out or cannot start
        """
        timeout = timeout or self.timeout
        start = time.monotonic()
        try:
            result = subprocess.run(
                args,
                cwd=cwd,
                env=env,
                capture_output=True,
                timeout=timeout,
            )
        except FileNotFoundError as e:
            raise ToolNotAvailableError(self.name) from e
        except subprocess.TimeoutExpired as e:
            raise ToolExecutionError(
                self.name,
                f"timed out after {timeout}s",
                elapsed_ms=int((time.monotonic() - start) * 1000),
            ) from e
        except OSError as e:
            raise ToolExecutionError(self.name, str(e)) from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        return TimedRun(elapsed_ms=elapsed_ms, exit_code=result.returncode)


class ToolNotAvailableError(Exception):
    """Raised when a required tool is not installed or accessible."""

    def __init__(self, tool_name: str, message: str | None = None) -> None:
        self.tool_name = tool_name
        self.message = message or f"Tool not available: {tool_name}"
        super().__init__(self.message)


class ToolExecutionError(Exception):
    """Raised when a tool execution fails.

    Attributes:
        elapsed_ms: Wall time spent before the failure, when known
    """

    def __init__(
        self,
        tool_name: str,
        message: str,
        exit_code: int | None = None,
        stderr: str | None = None,
        elapsed_ms: int | None = None,
    ) -> None:
        self.tool_name = tool_name
        self.exit_code = exit_code
        self.stderr = stderr
        self.elapsed_ms = elapsed_ms
        full_message = f"Tool execution failed: {tool_name} - {message}"
        if exit_code is not None:
            full_message += f" (exit code: {exit_code})"
        super().__init__(full_message)
