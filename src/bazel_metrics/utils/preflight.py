"""Preflight validation for the benchmark toolchain.

Benchmarks shell out to `go` and `bazel`. Checking both up front gives a
clear error instead of a run where every package fails to benchmark.
Scanning itself needs no external tools.

Checks are built from the same test runner adapters the benchmark uses, so
the tools that are checked are exactly the tools that will run.
"""

from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

from bazel_metrics.benchmark.adapters import BazelTestAdapter, GoTestAdapter
from bazel_metrics.benchmark.base import ToolAdapter


@dataclass(frozen=True)
class ToolCheck:
    """Availability of one test runner.

    Attributes:
        name: Executable name
        available: Whether the executable is on PATH
        required: Whether the run fails without it
        version: Parsed tool version, when it could be probed
        path: Executable path, when available
        message: What the tool is for, or how to install it
    """

    name: str
    available: bool
    required: bool = True
    version: str | None = None
    path: str | None = None
    message: str = ""

    @classmethod
    def from_adapter(
        cls, adapter: ToolAdapter, required: bool = True, timeout: int = 10
    ) -> "ToolCheck":
        """Locate an adapter's tool and probe its version."""
        path = adapter.locate()
        if path is None:
            return cls(
                name=adapter.name,
                available=False,
                required=required,
                message=adapter.install_hint,
            )
        return cls(
            name=adapter.name,
            available=True,
            required=required,
            version=adapter.get_version(timeout=timeout),
            path=path,
            message=adapter.purpose,
        )

    @property
    def problem(self) -> str | None:
        """Error or warning text for a missing tool."""
        if self.available:
            return None
        kind = "Required" if self.required else "Optional"
        return f"{kind} tool not found: {self.name}"


@dataclass
class PreflightResult:
    """Collected tool checks.

    success, errors and warnings are derived from the checks.
    """

    checks: list[ToolCheck] = field(default_factory=list)

    def add_check(self, check: ToolCheck) -> None:
        self.checks.append(check)

    @property
    def success(self) -> bool:
        return all(c.available or not c.required for c in self.checks)

    @property
    def errors(self) -> list[str]:
        return [c.problem for c in self.checks if c.problem and c.required]

    @property
    def warnings(self) -> list[str]:
        return [c.problem for c in self.checks if c.problem and not c.required]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "success": self.success,
            "checks": [asdict(c) for c in self.checks],
            "errors": self.errors,
            "warnings": self.warnings,
        }


class PreflightChecker:
    """Validates that benchmark tools are installed.

    Usage:
        checker = PreflightChecker()
        result = checker.check_all()
        if not result.success:
            raise typer.Exit(1)
    """

    def __init__(
        self,
        adapters: Sequence[ToolAdapter] | None = None,
        timeout: int = 10,
    ) -> None:
        """Initialize preflight checker.

        Args:
            adapters: Test runners to check (defaults to go test and bazel test)
            timeout: Timeout in seconds for version probes
        """
        if adapters is None:
            adapters = (GoTestAdapter(), BazelTestAdapter())
        self.adapters = tuple(adapters)
        self.timeout = timeout

    def check_tool(self, adapter: ToolAdapter, required: bool = True) -> ToolCheck:
        """Check a single test runner."""
        return ToolCheck.from_adapter(adapter, required=required, timeout=self.timeout)

    def check_all(self, benchmark: bool = True) -> PreflightResult:
        """Run all preflight checks.

        Args:
            benchmark: Whether benchmarks will run (tools are optional otherwise)

        Returns:
            PreflightResult with one check per adapter
        """
        result = PreflightResult()
        for adapter in self.adapters:
            result.add_check(self.check_tool(adapter, required=benchmark))
        return result
