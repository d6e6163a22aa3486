"""
Small explainability formatting helpers.

Used by the CLI to print compact summaries of optimization results.
"""

from __future__ import annotations

from tripwise.domain.models import DayReport, ItineraryDay


def one_line_summary(report: DayReport) -> str:
    """Render a compact single-line summary for a day report."""
    parts = [f"risk={report.risk_level}", f"clusters={len(report.clusters)}"]
    parts.append(f"route={report.original_distance_km:.1f}->{report.optimized_distance_km:.1f}km")
    if report.affected_activity_ids:
        parts.append("affected=" + ",".join(report.affected_activity_ids))
    if not report.forecast_available:
        parts.append("no forecast")
    return " | ".join(parts)


def activity_lines(day: ItineraryDay) -> list[str]:
    """One line per activity in visiting order, with its annotations."""
    lines: list[str] = []
    for i, a in enumerate(day.activities, start=1):
        line = f"{i:>2}. {a.name} [{a.category}, {a.preferred_time_of_day}] risk={a.risk_level}"
        if a.weather_note:
            line += f"  ({a.weather_note})"
        lines.append(line)
        if a.alternatives:
            lines.append("      alternatives: " + "; ".join(a.alternatives))
    return lines
