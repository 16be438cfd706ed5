"""Entry point for running bazel-metrics as a module.

Usage:
    python -m bazel_metrics [command] [options]

Example:
    python -m bazel_metrics scan --repo . --output metrics.json
    python -m bazel_metrics check
"""

from bazel_metrics.cli import app

if __name__ == "__main__":
    app()
