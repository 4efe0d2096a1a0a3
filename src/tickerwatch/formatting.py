"""Pure number-to-string helpers used by the chart titles and status strip.

Price thresholds are inclusive: 1000 already renders with grouping and
1_000_000 already renders as ``$1.0M``.
"""

_THOUSAND = 1_000.0
_MILLION = 1_000_000.0
_BILLION = 1_000_000_000.0


def format_currency(value: float) -> str:
    """Format a price with a dollar sign and exactly two decimals.

    Values of 1000 and above are rounded to cents first, then grouped with
    thousands separators: 42069.42 -> ``$42,069.42``.
    """
    if value >= _THOUSAND:
        return f"${round(value, 2):,.2f}"
    return f"${value:.2f}"


def format_compact_currency(value: float) -> str:
    """Short price form for axis labels: ``$1.5M``, ``$1.5k``, ``$0.50``."""
    if value >= _MILLION:
        return f"${value / _MILLION:.1f}M"
    if value >= _THOUSAND:
        return f"${value / _THOUSAND:.1f}k"
    return f"${value:.2f}"


def format_compact_magnitude(value: float) -> str:
    """Short volume form: ``1.5B``, ``1.5M``, ``1.5K`` or a whole number."""
    if value >= _BILLION:
        return f"{value / _BILLION:.1f}B"
    if value >= _MILLION:
        return f"{value / _MILLION:.1f}M"
    if value >= _THOUSAND:
        return f"{value / _THOUSAND:.1f}K"
    return f"{value:.0f}"


def format_change(percent: float) -> str:
    """24h change with a direction arrow; zero counts as up."""
    arrow = "▲" if percent >= 0 else "▼"
    return f"{arrow} {abs(percent):.2f}%"


def format_age(seconds: float | None) -> str:
    """How long ago the last refresh completed."""
    if seconds is None:
        return "Never"
    secs = int(seconds)
    if secs < 60:
        return f"{secs}s ago"
    return f"{secs // 60}m ago"
