"""Language registry.

Each supported language is described by a single LanguageSpec record:
- which files belong to it (source suffix)
- how test files are recognised (file naming, or inferred from BUILD targets)
- which Bazel rules count as its test/library/binary targets

Adding a language means adding one entry to LANGUAGES. The first entry is the
primary language (legacy summary, directory breakdown, benchmarks).
"""

from dataclasses import dataclass
from enum import Enum


class DetectionMode(Enum):
    """How a language's test files are detected."""

    FILE_NAMING = "file_naming"  # test files recognised by name
    MANIFEST_TARGETS = "manifest_targets"  # tests inline, counted from *_test rules


class TargetRole(Enum):
    """Role of a Bazel rule invocation."""

    TEST = "test"
    LIBRARY = "library"
    BINARY = "binary"


@dataclass(frozen=True)
class LanguageSpec:
    """Capabilities of a single language.

    Attributes:
        id: Language identifier used in the report ("go", "python", "rust")
        display_name: Human-readable name
        source_suffix: File suffix that marks a file of this language
        test_suffixes: Filename endings that mark a test file
        test_prefixes: Filename prefixes that mark a test file
        test_detection: Test detection mode
        rule_prefix: Prefix of the Bazel rules (go -> go_test, go_library, go_binary)
        packages_key: Report key for this language's package list
    """

    id: str
    display_name: str
    source_suffix: str
    test_suffixes: tuple[str, ...] = ()
    test_prefixes: tuple[str, ...] = ()
    test_detection: DetectionMode = DetectionMode.FILE_NAMING
    rule_prefix: str = ""
    packages_key: str = ""

    def matches(self, filename: str) -> bool:
        """Return True if the file belongs to this language."""
        return filename.endswith(self.source_suffix)

    def is_test_file(self, filename: str) -> bool:
        """Return True if the file is a test file by naming convention."""
        if self.test_detection is not DetectionMode.FILE_NAMING:
            return False
        return filename.endswith(self.test_suffixes) or filename.startswith(self.test_prefixes)

    def rule_name(self, role: TargetRole) -> str:
        """Bazel rule name for a target role (e.g. ``py_library``)."""
        return f"{self.rule_prefix}_{role.value}"

    @property
    def infers_tests_from_manifest(self) -> bool:
        return self.test_detection is DetectionMode.MANIFEST_TARGETS


GO = LanguageSpec(
    id="go",
    display_name="Go",
    source_suffix=".go",
    test_suffixes=("_test.go",),
    rule_prefix="go",
    packages_key="goPackages",
)

PYTHON = LanguageSpec(
    id="python",
    display_name="Python",
    source_suffix=".py",
    test_suffixes=("_test.py", "_tests.py"),
    test_prefixes=("test_",),
    rule_prefix="py",
    packages_key="pythonPackages",
)

# Rust tests live inline (#[cfg(test)]), so they are only visible via rust_test targets
RUST = LanguageSpec(
    id="rust",
    display_name="Rust",
    source_suffix=".rs",
    test_detection=DetectionMode.MANIFEST_TARGETS,
    rule_prefix="rust",
    packages_key="rustPackages",
)

# Registry order is report order
LANGUAGES: tuple[LanguageSpec, ...] = (GO, PYTHON, RUST)

PRIMARY_LANGUAGE = LANGUAGES[0]


def get_language(language_id: str) -> LanguageSpec:
    """Look up a registered language by id.

    Raises:
        KeyError: If the language is not registered
    """
    for spec in LANGUAGES:
        if spec.id == language_id:
            return spec
    raise KeyError(f"Unknown language: {language_id}")
