"""Jinja2 filters for the console summary.

Numbers are formatted here rather than in the template so the JSON report
keeps unrounded values while the console shows one decimal place.
"""


def pct(value: float | int | None) -> str:
    """Format a percentage with one decimal place.

    Args:
        value: Percentage in the range 0-100

    Returns:
        String like "66.7%" ("0.0%" for None)
    """
    if value is None:
        value = 0.0
    return f"{value:.1f}%"


def format_ms(value: int | None) -> str:
    """Format a duration in milliseconds ("1234ms")."""
    return f"{value or 0}ms"
