"""Terminal rendering of the expiry graph, status table and stats."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .status import SOON_THRESHOLD_DAYS

if TYPE_CHECKING:
    from .tracker import EntryRow, TrackerStats

MIN_BAR_PERCENT = 6

_BAR_CHARS = {
    "expired": "▓",
    "soon": "▒",
    "fresh": "█",
}


def graph_scale(rows: list[EntryRow]) -> int:
    """Largest day magnitude on the graph, never below a week."""
    return max([
        SOON_THRESHOLD_DAYS,
        *(abs(r.status.days_left) for r in rows),
        *(r.status.days_left for r in rows),
    ])


def bar_percent(days_left: int, max_abs_days: int) -> float:
    return max(MIN_BAR_PERCENT, min(100, abs(days_left) / max_abs_days * 100))


def render_stats(stats: TrackerStats) -> str:
    return (
        f"Total foods: {stats.total}   "
        f"Expired: {stats.expired}   "
        f"Safe / fresh: {stats.safe}"
    )


def render_graph(rows: list[EntryRow], width: int = 40) -> str:
    if not rows:
        return "No foods yet. Add one and the expiry graph appears here."

    scale = graph_scale(rows)
    name_width = max(len(r.food_name) for r in rows)
    lines: list[str] = []
    for row in rows:
        pct = bar_percent(row.status.days_left, scale)
        cells = max(1, round(pct / 100 * width))
        bar = _BAR_CHARS[row.status.display_type] * cells
        lines.append(
            f"{row.food_name:<{name_width}}  {bar:<{width}}  "
            f"{row.formatted_date}  {row.status.text}"
        )
    return "\n".join(lines)


def render_table(rows: list[EntryRow]) -> str:
    if not rows:
        return "No entries to show."

    headers = ("ID", "Food", "Expiry date", "Status")
    body = [
        (r.id[:8], r.food_name, r.formatted_date, r.status.short)
        for r in rows
    ]
    widths = [
        max(len(headers[i]), *(len(b[i]) for b in body))
        for i in range(len(headers))
    ]

    def fmt(cols) -> str:
        return "  ".join(f"{c:<{w}}" for c, w in zip(cols, widths)).rstrip()

    lines = [fmt(headers), "  ".join("─" * w for w in widths)]
    lines.extend(fmt(b) for b in body)
    return "\n".join(lines)


def render_all(rows: list[EntryRow], stats: TrackerStats, width: int = 40) -> str:
    return "\n\n".join([
        render_stats(stats),
        render_graph(rows, width),
        render_table(rows),
    ])
