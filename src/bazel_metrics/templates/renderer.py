"""Console summary renderer.

Renders a Report to the plain-text summary printed after a scan, using the
packaged Jinja2 template. Output is deterministic for a given report.
"""

import logging
from typing import Any

from jinja2 import Environment, PackageLoader, TemplateError

from bazel_metrics.languages import PRIMARY_LANGUAGE, TargetRole, get_language
from bazel_metrics.models import Report
from bazel_metrics.renderers.filters import format_ms, pct

logger = logging.getLogger(__name__)

# Number of directories shown in the breakdown section
TOP_DIRECTORIES = 10


class SummaryRenderer:
    """Renders the human-readable scan summary.

    Usage:
        renderer = SummaryRenderer()
        typer.echo(renderer.render(report))
    """

    def __init__(self, top_directories: int = TOP_DIRECTORIES) -> None:
        """Initialize the summary renderer.

        Args:
            top_directories: Directories to list in the breakdown section
        """
        self.top_directories = top_directories

        self._env = Environment(
            loader=PackageLoader("bazel_metrics", "templates"),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self._env.filters["pct"] = pct
        self._env.filters["format_ms"] = format_ms

    def render(self, report: Report, template_name: str = "summary.txt.j2") -> str:
        """Render a report summary.

        Args:
            report: Report from the scan pipeline
            template_name: Template file to use

        Returns:
            Rendered summary text

        Raises:
            ValueError: If the template cannot be loaded or rendered
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**self._build_context(report))
        except TemplateError as e:
            logger.error("Summary rendering failed: %s", e)
            raise ValueError(f"Summary rendering failed: {e}") from e

    def _build_context(self, report: Report) -> dict[str, Any]:
        languages = []
        for language_id in report.languages:
            spec = get_language(language_id)
            languages.append(
                {
                    "id": spec.id,
                    "name": spec.display_name,
                    "summary": report.language_summaries[language_id],
                    "test_rule": spec.rule_name(TargetRole.TEST),
                    "tests_from_manifest": spec.infers_tests_from_manifest,
                }
            )

        speed = report.speed_comparison

        return {
            "repo_path": str(report.repo_path),
            "timestamp": report.formatted_timestamp,
            "languages": languages,
            "primary_name": PRIMARY_LANGUAGE.display_name,
            "directories": list(report.directory_breakdown[: self.top_directories]),
            "benchmarks": list(speed.packages) if speed is not None else None,
            "native_runner": "go test",
        }
