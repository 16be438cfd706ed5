"""BUILD file target counting.

Counts rule invocations such as ``go_test(`` or ``py_library(`` in a BUILD
file. This is pattern matching, not Starlark parsing: a match is a line that
starts (after optional whitespace) with the rule name followed by ``(``.
Macros are not expanded, and commented-out invocations (``# go_test(``) are
counted too. Only a single leading ``#`` is tolerated: ``## go_test(`` and a
trailing comment such as ``x = 1  # go_test(`` do not count.
"""

import re
from pathlib import Path

from bazel_metrics.languages import LANGUAGES, LanguageSpec, TargetRole
from bazel_metrics.models.package import ManifestTargetCounts, RoleCounts

# Accepted BUILD file names
MANIFEST_NAMES = frozenset({"BUILD", "BUILD.bazel"})


class ManifestReadError(Exception):
    """Raised when a BUILD file cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read BUILD file {path}: {reason}")


def is_manifest(filename: str) -> bool:
    """Return True if the filename is a BUILD file."""
    return filename in MANIFEST_NAMES


def _rule_pattern(rule_name: str) -> re.Pattern[str]:
    return re.compile(rf"^\s*(?:#\s*)?{re.escape(rule_name)}\s*\(", re.MULTILINE)


class ManifestTargetCounter:
    """Counts test/library/binary rule invocations per language.

    Usage:
        counter = ManifestTargetCounter()
        counts = counter.count(build_text)
        counts.for_language("go").tests
    """

    def __init__(self, languages: tuple[LanguageSpec, ...] = LANGUAGES) -> None:
        """Initialize the counter.

        Args:
            languages: Languages whose rules are recognised
        """
        self.languages = languages
        self._patterns: dict[tuple[str, TargetRole], re.Pattern[str]] = {
            (spec.id, role): _rule_pattern(spec.rule_name(role))
            for spec in languages
            for role in TargetRole
        }

    def count(self, text: str) -> ManifestTargetCounts:
        """Count rule invocations in BUILD file text.

        Args:
            text: Full BUILD file content

        Returns:
            ManifestTargetCounts with one RoleCounts per language
        """
        by_language: dict[str, RoleCounts] = {}
        for spec in self.languages:
            by_language[spec.id] = RoleCounts(
                tests=self._count_role(text, spec, TargetRole.TEST),
                libraries=self._count_role(text, spec, TargetRole.LIBRARY),
                binaries=self._count_role(text, spec, TargetRole.BINARY),
            )
        return ManifestTargetCounts(by_language=by_language)

    def _count_role(self, text: str, spec: LanguageSpec, role: TargetRole) -> int:
        return len(self._patterns[(spec.id, role)].findall(text))

    def count_file(self, path: Path) -> ManifestTargetCounts:
        """Read a BUILD file and count its rule invocations.

        Args:
            path: Path to the BUILD file

        Returns:
            ManifestTargetCounts for the file

        Raises:
            ManifestReadError: If the file cannot be read or decoded
        """
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestReadError(path, str(e)) from e

        return self.count(text)


def count_targets(text: str) -> ManifestTargetCounts:
    """Count rule invocations in BUILD file text for all registered languages.

    Convenience function for manifest counting.
    """
    return ManifestTargetCounter().count(text)
