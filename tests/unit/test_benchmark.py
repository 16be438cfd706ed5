"""Unit tests for benchmark adapters and runner."""

import logging
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from bazel_metrics.benchmark import (
    BazelTestAdapter,
    BenchmarkRunner,
    GoTestAdapter,
    TimedRun,
    ToolAdapter,
    ToolExecutionError,
    ToolNotAvailableError,
)
from bazel_metrics.models import Package


def make_package(
    path: str = "pkg/a",
    tests: int = 1,
    targets: int = 1,
) -> Package:
    return Package(
        path=path,
        language="go",
        has_build_file=True,
        has_test_files=tests > 0,
        source_file_count=1,
        test_file_count=tests,
        test_target_count=targets,
    )


class FakeAdapter(ToolAdapter):
    """Adapter returning canned timings (or raising)."""

    def __init__(self, name: str, results: list[TimedRun | Exception]) -> None:
        super().__init__(name=name)
        self.results = list(results)
        self.calls: list[str] = []
        self.cleaned = 0

    def execute(self, repo_path: Path, package: Package) -> TimedRun:
        self.calls.append(package.path)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def clean(self, repo_path: Path) -> None:
        self.cleaned += 1


class TestRunTimed:
    """Tests for timing external commands."""

    def test_returns_exit_code_and_elapsed(self, tmp_path: Path) -> None:
        """Test that a completed command yields a timing."""
        adapter = GoTestAdapter()
        completed = subprocess.CompletedProcess(args=[], returncode=1)

        with patch("subprocess.run", return_value=completed) as mock_run:
            run = adapter.run_timed(["go", "test"], cwd=tmp_path)

        assert run.exit_code == 1
        assert run.succeeded is False
        assert run.elapsed_ms >= 0
        assert mock_run.call_args.kwargs["timeout"] == 300

    def test_missing_executable(self, tmp_path: Path) -> None:
        """Test that a missing binary raises ToolNotAvailableError."""
        with patch("subprocess.run", side_effect=FileNotFoundError("go")):
            with pytest.raises(ToolNotAvailableError):
                GoTestAdapter().run_timed(["go", "test"], cwd=tmp_path)

    def test_timeout(self, tmp_path: Path) -> None:
        """Test that a timeout raises ToolExecutionError with elapsed time."""
        error = subprocess.TimeoutExpired(cmd="go", timeout=5)
        with patch("subprocess.run", side_effect=error):
            with pytest.raises(ToolExecutionError) as exc_info:
                GoTestAdapter(timeout=5).run_timed(["go", "test"], cwd=tmp_path)

        assert "timed out after 5s" in str(exc_info.value)
        assert exc_info.value.elapsed_ms is not None


class TestGoTestAdapter:
    """Tests for the go test adapter."""

    def test_find_module_root(self, tmp_path: Path) -> None:
        """Test finding the nearest go.mod."""
        (tmp_path / "services" / "api" / "handlers").mkdir(parents=True)
        (tmp_path / "services" / "api" / "go.mod").write_text("module api\n")

        root = GoTestAdapter.find_module_root(tmp_path, tmp_path / "services" / "api" / "handlers")

        assert root == tmp_path / "services" / "api"

    def test_find_module_root_none(self, tmp_path: Path) -> None:
        """Test that no go.mod up to the repo root returns None."""
        (tmp_path / "pkg").mkdir()

        assert GoTestAdapter.find_module_root(tmp_path, tmp_path / "pkg") is None

    def test_execute_command(self, tmp_path: Path) -> None:
        """Test the go test invocation."""
        (tmp_path / "go.mod").write_text("module sample\n")
        (tmp_path / "pkg" / "a").mkdir(parents=True)
        completed = subprocess.CompletedProcess(args=[], returncode=0)

        with patch("subprocess.run", return_value=completed) as mock_run:
            run = GoTestAdapter().execute(tmp_path, make_package("pkg/a"))

        assert run.succeeded
        args, kwargs = mock_run.call_args
        assert args[0] == ["go", "test", "-count=1", "./pkg/a"]
        assert kwargs["cwd"] == tmp_path
        assert kwargs["env"]["CGO_ENABLED"] == "0"

    def test_execute_relative_to_nested_module(self, tmp_path: Path) -> None:
        """Test that the import path is relative to the nested module."""
        (tmp_path / "svc" / "x").mkdir(parents=True)
        (tmp_path / "svc" / "go.mod").write_text("module svc\n")
        completed = subprocess.CompletedProcess(args=[], returncode=0)

        with patch("subprocess.run", return_value=completed) as mock_run:
            GoTestAdapter().execute(tmp_path, make_package("svc/x"))

        args, kwargs = mock_run.call_args
        assert args[0][-1] == "./x"
        assert kwargs["cwd"] == tmp_path / "svc"

    def test_get_version(self) -> None:
        """Test parsing `go version` output."""
        completed = subprocess.CompletedProcess(
            args=[], returncode=0, stdout="go version go1.22.1 linux/amd64\n", stderr=""
        )
        with patch("subprocess.run", return_value=completed) as mock_run:
            assert GoTestAdapter().get_version() == "go1.22.1"

        assert mock_run.call_args.args[0] == ["go", "version"]

    def test_get_version_failure(self) -> None:
        """Test that a failing version command yields None."""
        completed = subprocess.CompletedProcess(args=[], returncode=2, stdout="", stderr="boom")
        with patch("subprocess.run", return_value=completed):
            assert GoTestAdapter().get_version() is None

    def test_locate(self) -> None:
        """Test PATH lookup of the go executable."""
        with patch("shutil.which", return_value="/usr/local/go/bin/go") as mock_which:
            adapter = GoTestAdapter()
            assert adapter.locate() == "/usr/local/go/bin/go"
            assert adapter.check_available() is True

        mock_which.assert_called_with("go")


class TestBazelTestAdapter:
    """Tests for the bazel test adapter."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [(".", "//:all"), ("pkg/api", "//pkg/api:all")],
    )
    def test_target_pattern(self, path: str, expected: str) -> None:
        """Test the bazel target pattern for a package."""
        assert BazelTestAdapter.target_pattern(make_package(path)) == expected

    def test_execute_command(self, tmp_path: Path) -> None:
        """Test the bazel test invocation."""
        completed = subprocess.CompletedProcess(args=[], returncode=3)

        with patch("subprocess.run", return_value=completed) as mock_run:
            run = BazelTestAdapter().execute(tmp_path, make_package("pkg/api"))

        assert run.exit_code == 3
        args, kwargs = mock_run.call_args
        assert args[0] == ["bazel", "test", "//pkg/api:all", "--test_output=errors"]
        assert kwargs["cwd"] == tmp_path

    def test_get_version(self) -> None:
        """Test parsing `bazel --version` output."""
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="bazel 7.1.0\n", stderr="")
        with patch("subprocess.run", return_value=completed) as mock_run:
            assert BazelTestAdapter().get_version() == "7.1.0"

        assert mock_run.call_args.args[0] == ["bazel", "--version"]

    def test_unavailable(self) -> None:
        """Test that bazel missing from PATH is reported."""
        with patch("shutil.which", return_value=None):
            assert BazelTestAdapter().check_available() is False

    def test_clean_ignores_failures(self, tmp_path: Path) -> None:
        """Test that bazel clean errors are swallowed."""
        with patch("subprocess.run", side_effect=FileNotFoundError("bazel")):
            BazelTestAdapter().clean(tmp_path)

    def test_clean_uses_clean_timeout(self, tmp_path: Path) -> None:
        """Test that bazel clean has its own timeout."""
        completed = subprocess.CompletedProcess(args=[], returncode=0)

        with patch("subprocess.run", return_value=completed) as mock_run:
            BazelTestAdapter(clean_timeout=42).clean(tmp_path)

        assert mock_run.call_args.args[0] == ["bazel", "clean"]
        assert mock_run.call_args.kwargs["timeout"] == 42


class TestSelectCandidates:
    """Tests for benchmark candidate selection."""

    def test_filters_and_orders(self, tmp_path: Path) -> None:
        """Test eligibility rules and ordering by test file count."""
        packages = [
            make_package("big", tests=30),
            make_package("no-target", tests=2, targets=0),
            make_package("no-tests", tests=0),
            make_package("three", tests=3),
            make_package("one", tests=1),
            make_package("edge", tests=20),
        ]
        runner = BenchmarkRunner(tmp_path, native=MagicMock(), bazel=MagicMock())

        candidates = runner.select_candidates(packages)

        assert [p.path for p in candidates] == ["one", "three", "edge"]

    def test_stable_for_equal_counts(self, tmp_path: Path) -> None:
        """Test that equal test counts keep their input order."""
        packages = [make_package("b"), make_package("a"), make_package("c")]
        runner = BenchmarkRunner(tmp_path, native=MagicMock(), bazel=MagicMock())

        assert [p.path for p in runner.select_candidates(packages)] == ["b", "a", "c"]

    def test_capped_at_max_packages(self, tmp_path: Path) -> None:
        """Test truncation to max_packages."""
        packages = [make_package(f"p{i}") for i in range(10)]
        runner = BenchmarkRunner(tmp_path, max_packages=2, native=MagicMock(), bazel=MagicMock())

        assert len(runner.select_candidates(packages)) == 2

    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_max_uses_default(self, tmp_path: Path, value: int) -> None:
        """Test that a non-positive cap means 5."""
        runner = BenchmarkRunner(tmp_path, max_packages=value, native=MagicMock(), bazel=MagicMock())

        assert runner.max_packages == 5


class TestBenchmarkRunner:
    """Tests for the timing loop."""

    def test_cold_then_warm(self, tmp_path: Path) -> None:
        """Test the per-package sequence of native, clean, cold, warm."""
        native = FakeAdapter("go", [TimedRun(120, 0)])
        bazel = FakeAdapter("bazel", [TimedRun(4000, 0), TimedRun(300, 0)])
        runner = BenchmarkRunner(tmp_path, native=native, bazel=bazel)  # type: ignore[arg-type]

        report = runner.run([make_package("pkg/a")])

        assert len(report.packages) == 1
        result = report.packages[0]
        assert (result.native_test_ms, result.bazel_test_cold_ms, result.bazel_test_warm_ms) == (
            120,
            4000,
            300,
        )
        assert bazel.cleaned == 1
        assert bazel.calls == ["pkg/a", "pkg/a"]

    def test_native_failure_skips_package(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that a native launch failure drops the package with a warning."""
        native = FakeAdapter(
            "go",
            [ToolExecutionError("go", "timed out after 300s"), TimedRun(50, 0)],
        )
        bazel = FakeAdapter("bazel", [TimedRun(10, 0), TimedRun(5, 0)])
        runner = BenchmarkRunner(tmp_path, native=native, bazel=bazel)  # type: ignore[arg-type]

        report = runner.run([make_package("a"), make_package("b")])

        assert [p.path for p in report.packages] == ["b"]
        assert "Failed to benchmark a" in caplog.text

    def test_failing_tests_still_timed(self, tmp_path: Path) -> None:
        """Test that non-zero exits keep their timings."""
        native = FakeAdapter("go", [TimedRun(80, 1)])
        bazel = FakeAdapter("bazel", [TimedRun(900, 3), TimedRun(100, 3)])
        runner = BenchmarkRunner(tmp_path, native=native, bazel=bazel)  # type: ignore[arg-type]

        result = runner.run([make_package()]).packages[0]

        assert (result.native_test_ms, result.bazel_test_cold_ms, result.bazel_test_warm_ms) == (
            80,
            900,
            100,
        )

    def test_bazel_errors_keep_partial_timing(self, tmp_path: Path) -> None:
        """Test that bazel timeouts report elapsed time and missing bazel reports 0."""
        native = FakeAdapter("go", [TimedRun(10, 0)])
        bazel = FakeAdapter(
            "bazel",
            [
                ToolExecutionError("bazel", "timed out", elapsed_ms=300000),
                ToolNotAvailableError("bazel"),
            ],
        )
        runner = BenchmarkRunner(tmp_path, native=native, bazel=bazel)  # type: ignore[arg-type]

        result = runner.run([make_package()]).packages[0]

        assert result.bazel_test_cold_ms == 300000
        assert result.bazel_test_warm_ms == 0

    def test_no_candidates(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Test that no eligible packages yields an empty report."""
        runner = BenchmarkRunner(tmp_path, native=MagicMock(), bazel=MagicMock())

        with caplog.at_level(logging.INFO):
            report = runner.run([make_package(tests=0)])

        assert report.packages == ()
        assert "No packages eligible for benchmarking" in caplog.text
