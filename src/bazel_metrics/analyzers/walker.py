"""Repository walker.

Walks a source tree once, classifying every file by language and test status
and collecting one DirectoryAggregate per directory. BUILD files are counted
as they are found; their target counts are merged into the per-language
package drafts once the walk completes.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from bazel_metrics.analyzers.manifest import (
    ManifestReadError,
    ManifestTargetCounter,
    is_manifest,
)
from bazel_metrics.languages import LANGUAGES, LanguageSpec
from bazel_metrics.models.package import DirectoryAggregate, LanguageTotals, WalkResult

logger = logging.getLogger(__name__)

# Directories never descended into
DEFAULT_SKIP_DIRS = frozenset(
    {
        # Version control
        ".git",
        # Bazel output
        "bazel-bin",
        "bazel-out",
        "bazel-testlogs",
        # Dependencies and caches
        "node_modules",
        ".cache",
        "vendor",
        # Python
        "__pycache__",
        ".venv",
        "venv",
        # Rust build output
        "target",
    }
)

# Bazel convenience symlinks (bazel-<workspace>, bazel-bin, ...)
BAZEL_OUTPUT_PREFIX = "bazel-"


class ScanError(Exception):
    """Raised when the repository root cannot be walked."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"Cannot scan {path}: {message}")


def should_skip_dir(name: str, skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS) -> bool:
    """Check if a directory should be excluded from the walk.

    Args:
        name: Directory base name
        skip_dirs: Denylisted directory names

    Returns:
        True if the directory (and everything below it) is skipped
    """
    return name.startswith(".") or name in skip_dirs or name.startswith(BAZEL_OUTPUT_PREFIX)


class RepositoryWalker:
    """Single-pass walk producing per-directory aggregates.

    Each call to walk() builds its own aggregate map; nothing is shared
    between walks.

    Usage:
        walker = RepositoryWalker(repo_path)
        result = walker.walk()
    """

    def __init__(
        self,
        repo_path: Path,
        languages: tuple[LanguageSpec, ...] = LANGUAGES,
        extra_skip_dirs: Iterable[str] = (),
        counter: ManifestTargetCounter | None = None,
    ) -> None:
        """Initialize the walker.

        Args:
            repo_path: Repository root
            languages: Languages to classify files for
            extra_skip_dirs: Directory names to exclude on top of the defaults
            counter: BUILD file target counter (defaults to one for `languages`)
        """
        self.repo_path = Path(repo_path).resolve()
        self.languages = languages
        self.skip_dirs = DEFAULT_SKIP_DIRS | frozenset(extra_skip_dirs)
        self.counter = counter or ManifestTargetCounter(languages)
        self._languages_by_id = {spec.id: spec for spec in languages}

    def walk(self) -> WalkResult:
        """Walk the repository.

        Returns:
            WalkResult with one aggregate per directory holding files

        Raises:
            ScanError: If the repository root cannot be enumerated
        """
        aggregates: dict[Path, DirectoryAggregate] = {}
        totals = {spec.id: LanguageTotals() for spec in self.languages}
        manifest_files = 0

        logger.debug("Walking %s", self.repo_path)

        for dirpath, dirnames, filenames in os.walk(self.repo_path, onerror=self._on_walk_error):
            # Prune in place so os.walk never descends into excluded trees
            kept = []
            for name in dirnames:
                if should_skip_dir(name, self.skip_dirs):
                    logger.debug("Skipping directory %s", os.path.join(dirpath, name))
                else:
                    kept.append(name)
            dirnames[:] = sorted(kept)

            directory = Path(dirpath)
            for filename in sorted(filenames):
                aggregate = aggregates.get(directory)
                if aggregate is None:
                    aggregate = DirectoryAggregate(
                        path=directory,
                        rel_path=self._relative(directory),
                    )
                    aggregates[directory] = aggregate

                if is_manifest(filename):
                    manifest_files += 1
                    self._read_manifest(aggregate, directory / filename)

                self._classify_file(aggregate, filename, totals)

        result = WalkResult(
            repo_path=self.repo_path,
            aggregates=list(aggregates.values()),
            totals=totals,
            manifest_files=manifest_files,
        )
        self._finalize(result)

        logger.debug(
            "Walked %d directories, found %d BUILD files",
            len(result.aggregates),
            manifest_files,
        )
        return result

    def _on_walk_error(self, error: OSError) -> None:
        """Abort on root enumeration failures, skip anything below the root."""
        failed = Path(error.filename) if error.filename else None
        if failed is None or failed.resolve() == self.repo_path:
            raise ScanError(self.repo_path, error.strerror or str(error)) from error
        logger.warning("Skipping unreadable directory %s: %s", failed, error.strerror)

    def _relative(self, directory: Path) -> str:
        return Path(os.path.relpath(directory, self.repo_path)).as_posix()

    def _read_manifest(self, aggregate: DirectoryAggregate, path: Path) -> None:
        # Presence is recorded even when the file cannot be parsed. Files are
        # visited in sorted order, so BUILD.bazel replaces BUILD targets.
        aggregate.has_manifest = True
        try:
            aggregate.targets = self.counter.count_file(path)
        except ManifestReadError as e:
            logger.warning("%s; treating as having no targets", e)

    def _classify_file(
        self,
        aggregate: DirectoryAggregate,
        filename: str,
        totals: dict[str, LanguageTotals],
    ) -> None:
        for spec in self.languages:
            if not spec.matches(filename):
                continue

            draft = aggregate.draft_for(spec.id)
            if spec.is_test_file(filename):
                draft.has_test_files = True
                draft.test_file_count += 1
                totals[spec.id].test_files += 1
            else:
                draft.source_file_count += 1
                totals[spec.id].source_files += 1

    def _finalize(self, result: WalkResult) -> None:
        """Copy BUILD file data onto each directory's package drafts."""
        for aggregate in result.aggregates:
            for language_id, draft in aggregate.drafts.items():
                draft.has_build_file = aggregate.has_manifest
                if aggregate.targets is None:
                    continue

                roles = aggregate.targets.for_language(language_id)
                draft.test_target_count = roles.tests
                draft.library_target_count = roles.libraries
                draft.binary_target_count = roles.binaries

                language_totals = result.totals[language_id]
                language_totals.test_targets += roles.tests

                spec = self._languages_by_id[language_id]
                if spec.infers_tests_from_manifest and roles.tests > 0:
                    draft.has_test_files = True
                    draft.test_file_count = roles.tests
                    language_totals.test_files += roles.tests


def walk_repository(repo_path: Path, extra_skip_dirs: Iterable[str] = ()) -> WalkResult:
    """Walk a repository with the default language registry.

    Convenience function for repository walking.
    """
    return RepositoryWalker(repo_path, extra_skip_dirs=extra_skip_dirs).walk()
