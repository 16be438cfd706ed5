"""Scan entities.

This module contains the records produced while walking a repository:
- RoleCounts / ManifestTargetCounts: rule invocations counted in a BUILD file
- PackageDraft: per-language package being filled in during the walk
- DirectoryAggregate: everything the walk learned about one directory
- LanguageTotals: running per-language file and target totals
- Package: finalized, immutable per-(directory, language) record
- WalkResult / ScanResult: hand-off structures between pipeline stages
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class RoleCounts:
    """Test/library/binary rule counts for one language."""

    tests: int = 0
    libraries: int = 0
    binaries: int = 0


@dataclass(frozen=True)
class ManifestTargetCounts:
    """Rule invocation counts parsed from one BUILD file.

    Attributes:
        by_language: Language id -> RoleCounts (missing languages count as zero)
    """

    by_language: dict[str, RoleCounts] = field(default_factory=dict)

    def for_language(self, language_id: str) -> RoleCounts:
        return self.by_language.get(language_id, RoleCounts())


@dataclass(frozen=True)
class Package:
    """A directory holding at least one file of a language.

    Subdirectories are independent packages.

    Attributes:
        path: Directory path relative to the repository root ("." for the root)
        language: Language id
        has_build_file: Directory contains BUILD or BUILD.bazel
        has_test_files: At least one test file (or inferred test target)
        source_file_count: Non-test source files directly in the directory
        test_file_count: Test files directly in the directory
        test_target_count: *_test rules in the BUILD file
        library_target_count: *_library rules in the BUILD file
        binary_target_count: *_binary rules in the BUILD file
    """

    path: str
    language: str
    has_build_file: bool = False
    has_test_files: bool = False
    source_file_count: int = 0
    test_file_count: int = 0
    test_target_count: int = 0
    library_target_count: int = 0
    binary_target_count: int = 0

    @property
    def has_bazelized_tests(self) -> bool:
        """Package has local tests and its BUILD file declares a test target."""
        return self.has_test_files and self.test_target_count > 0


@dataclass
class PackageDraft:
    """Mutable package record owned by the walker until materialization."""

    path: str
    language: str
    has_build_file: bool = False
    has_test_files: bool = False
    source_file_count: int = 0
    test_file_count: int = 0
    test_target_count: int = 0
    library_target_count: int = 0
    binary_target_count: int = 0

    def freeze(self) -> Package:
        """Return the immutable Package for this draft."""
        return Package(
            path=self.path,
            language=self.language,
            has_build_file=self.has_build_file,
            has_test_files=self.has_test_files,
            source_file_count=self.source_file_count,
            test_file_count=self.test_file_count,
            test_target_count=self.test_target_count,
            library_target_count=self.library_target_count,
            binary_target_count=self.binary_target_count,
        )


@dataclass
class DirectoryAggregate:
    """Everything the walk learned about one directory.

    Attributes:
        path: Absolute directory path
        rel_path: Path relative to the repository root ("." for the root)
        has_manifest: A BUILD/BUILD.bazel file was seen
        targets: Parsed rule counts (None until a manifest parses successfully)
        drafts: Language id -> PackageDraft for languages present here
    """

    path: Path
    rel_path: str
    has_manifest: bool = False
    targets: ManifestTargetCounts | None = None
    drafts: dict[str, PackageDraft] = field(default_factory=dict)

    def draft_for(self, language_id: str) -> PackageDraft:
        """Get or create the package draft for a language."""
        draft = self.drafts.get(language_id)
        if draft is None:
            draft = PackageDraft(path=self.rel_path, language=language_id)
            self.drafts[language_id] = draft
        return draft


@dataclass
class LanguageTotals:
    """Repository-wide counts for one language."""

    source_files: int = 0
    test_files: int = 0
    test_targets: int = 0


@dataclass
class WalkResult:
    """Output of one repository walk.

    Attributes:
        repo_path: Absolute repository root
        aggregates: One aggregate per directory that held at least one file
        totals: Language id -> LanguageTotals
        manifest_files: Number of BUILD/BUILD.bazel files seen
    """

    repo_path: Path
    aggregates: list[DirectoryAggregate] = field(default_factory=list)
    totals: dict[str, LanguageTotals] = field(default_factory=dict)
    manifest_files: int = 0


@dataclass(frozen=True)
class ScanResult:
    """Finalized scan: sorted per-language package lists plus totals.

    Attributes:
        repo_path: Absolute repository root
        packages: Language id -> packages sorted by path, in registry order
        totals: Language id -> LanguageTotals computed during the walk
        manifest_files: Number of BUILD/BUILD.bazel files seen
    """

    repo_path: Path
    packages: dict[str, tuple[Package, ...]]
    totals: dict[str, LanguageTotals]
    manifest_files: int = 0

    def packages_for(self, language_id: str) -> tuple[Package, ...]:
        return self.packages.get(language_id, ())

    def totals_for(self, language_id: str) -> LanguageTotals:
        return self.totals.get(language_id, LanguageTotals())
