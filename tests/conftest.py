"""Shared pytest fixtures for bazel-metrics tests.

Fixtures are organized by category:
- Repository fixtures: source trees built under tmp_path
- Configuration fixtures: config dictionaries for various scenarios
- Logging fixtures: handler cleanup between tests
"""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from bazel_metrics.utils.logging import LOGGER_NAME

TreeBuilder = Callable[[dict[str, str]], Path]


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Create files (and their parent directories) under root.

    Args:
        root: Directory to create the tree in
        files: Relative POSIX path -> file content

    Returns:
        The root directory
    """
    root.mkdir(parents=True, exist_ok=True)
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


# Mixed Go/Python/Rust workspace used across unit and integration tests.
#
# Go packages: ".", cmd/server, pkg/api, pkg/db, pkg/util
#   BUILD in 4/5, tests in pkg/api + pkg/util, go_test only in pkg/api
# Python packages: python/app (tested, bazelized), python/lib
# Rust packages: rust/core (rust_test), rust/cli
# Excluded: bazel-out, vendor, node_modules, .hidden
SAMPLE_REPO_FILES: dict[str, str] = {
    "MODULE.bazel": 'module(name = "sample")\n',
    "BUILD.bazel": 'go_binary(\n    name = "tool",\n)\n',
    "main.go": "package main\n",
    "cmd/server/main.go": "package main\n",
    "cmd/server/BUILD.bazel": 'go_binary(name = "server")\n',
    "pkg/api/handler.go": "package api\n",
    "pkg/api/handler_test.go": "package api\n",
    "pkg/api/BUILD.bazel": (
        'go_library(\n    name = "api",\n)\n\ngo_test(\n    name = "api_test",\n)\n'
    ),
    "pkg/db/db.go": "package db\n",
    "pkg/db/BUILD": 'go_library(name = "db")\n',
    "pkg/util/util.go": "package util\n",
    "pkg/util/util_test.go": "package util\n",
    "python/app/app.py": "print('app')\n",
    "python/app/test_app.py": "def test_app():\n    pass\n",
    "python/app/BUILD.bazel": 'py_library(name = "app")\npy_test(name = "test_app")\n',
    "python/lib/lib.py": "VALUE = 1\n",
    "rust/core/lib.rs": "pub fn f() {}\n",
    "rust/core/BUILD.bazel": 'rust_library(name = "core")\nrust_test(name = "core_test")\n',
    "rust/cli/main.rs": "fn main() {}\n",
    "bazel-out/k8-fastbuild/gen.go": "package gen\n",
    "vendor/github.com/dep/dep.go": "package dep\n",
    "node_modules/pkg/index.py": "\n",
    ".hidden/secret.go": "package secret\n",
}


# =============================================================================
# Repository Fixtures
# =============================================================================


@pytest.fixture
def make_tree(tmp_path: Path) -> TreeBuilder:
    """Return a builder that writes a file tree into a fresh directory."""
    counter = 0

    def _make(files: dict[str, str]) -> Path:
        nonlocal counter
        counter += 1
        return write_tree(tmp_path / f"repo{counter}", files)

    return _make


@pytest.fixture
def sample_repo(make_tree: TreeBuilder) -> Path:
    """Create the mixed-language sample workspace."""
    return make_tree(SAMPLE_REPO_FILES)


@pytest.fixture
def empty_repo(tmp_path: Path) -> Path:
    """Create an empty directory."""
    repo = tmp_path / "empty"
    repo.mkdir()
    return repo


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def minimal_config() -> dict[str, Any]:
    """Return a minimal valid configuration."""
    return {
        "output": {
            "path": "out/metrics.json",
        }
    }


@pytest.fixture
def full_config() -> dict[str, Any]:
    """Return a complete configuration with all options."""
    return {
        "output": {
            "path": "reports/metrics.json",
            "pretty": False,
        },
        "scan": {
            "extra_skip_dirs": ["third_party", "generated"],
        },
        "benchmark": {
            "enabled": True,
            "max_packages": 3,
            "max_test_files": 10,
            "timeout": 60,
            "clean_timeout": 30,
        },
    }


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop handlers installed by the CLI so they don't outlive a test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
