"""bazel-metrics - Bazel adoption metrics for polyglot repositories.

bazel-metrics walks a source tree once and reports, per language (Go,
Python, Rust), how many packages have a BUILD file, how many have tests,
and how many of those tests are declared as Bazel test targets. The
report is written as metrics.json for dashboards and CI trend tracking.
Optionally it benchmarks `go test` against cold and warm `bazel test`
runs for a small sample of packages.
"""

__version__ = "0.1.0"
__author__ = "bazel-metrics Contributors"
