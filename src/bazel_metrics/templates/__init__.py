"""bazel-metrics template rendering.

Jinja2-based rendering of the console summary printed after a scan.
"""

from bazel_metrics.templates.renderer import SummaryRenderer

__all__ = ["SummaryRenderer"]
