"""Package materialization.

Turns the walker's per-directory drafts into immutable, sorted,
per-language package lists.
"""

from bazel_metrics.languages import LANGUAGES, LanguageSpec
from bazel_metrics.models.package import Package, ScanResult, WalkResult


def materialize(
    walk: WalkResult,
    languages: tuple[LanguageSpec, ...] = LANGUAGES,
) -> ScanResult:
    """Flatten directory aggregates into per-language package lists.

    Lists are sorted by relative path using plain string comparison, so
    "a-b" sorts before "a/b". Totals are carried over from the walk as-is.

    Args:
        walk: Result of a repository walk
        languages: Registry order for the output mapping

    Returns:
        ScanResult with one sorted tuple per language (empty when absent)
    """
    packages: dict[str, list[Package]] = {spec.id: [] for spec in languages}

    for aggregate in walk.aggregates:
        for language_id, draft in aggregate.drafts.items():
            packages[language_id].append(draft.freeze())

    return ScanResult(
        repo_path=walk.repo_path,
        packages={
            language_id: tuple(sorted(items, key=lambda p: p.path))
            for language_id, items in packages.items()
        },
        totals=dict(walk.totals),
        manifest_files=walk.manifest_files,
    )
