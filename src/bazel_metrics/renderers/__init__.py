"""Jinja2 filters used by the console summary template."""

from bazel_metrics.renderers.filters import format_ms, pct

__all__ = ["format_ms", "pct"]
