"""Rendering of compatibility reports.

Why in adapters:
- The text layout is a presentation detail (Jinja2 template).
- The Core only knows `ComparisonResult`; it never builds strings for humans.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from core.domain.models import ComparisonResult, Difference, DifferenceKind, Severity


_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

REPORT_TITLE = "Act Compatibility Report"
NO_BASELINE_REPORT = "No baseline available. Run `create-baseline` to record one."

SEVERITY_ICONS: dict[Severity, str] = {
    Severity.ERROR: "🚨",
    Severity.WARNING: "⚠️",
    Severity.INFO: "ℹ️",
}


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def _format_timestamp(value: datetime | None) -> str:
    if value is None:
        return "unknown"
    return value.isoformat()


def describe_difference(diff: Difference) -> list[str]:
    """Kind-specific detail lines for one difference."""

    if diff.kind is DifferenceKind.VERSION_CHANGE:
        return [f"Version: {diff.baseline_value} → {diff.current_value}"]
    if diff.kind is DifferenceKind.MISSING_FLAG:
        return [f"Missing flag: {diff.flag}"]
    if diff.kind is DifferenceKind.NEW_FLAG:
        return [f"New flag: {diff.flag}"]
    if diff.description:
        return [diff.description]
    return []


def _difference_view(diff: Difference) -> dict[str, Any]:
    return {
        "icon": SEVERITY_ICONS[diff.severity],
        "kind": diff.kind.value,
        "details": describe_difference(diff),
    }


def format_comparison_report(result: ComparisonResult) -> str:
    """Render `result` as a human-readable report (pure and deterministic)."""

    if not result.has_baseline:
        return NO_BASELINE_REPORT

    template = _get_env().get_template("compatibility_report.txt.j2")
    return template.render(
        title=REPORT_TITLE,
        baseline_timestamp=_format_timestamp(result.baseline_timestamp),
        current_timestamp=_format_timestamp(result.current_timestamp),
        tool_available=result.tool_available,
        unavailable_status="⚠️  Tool unavailable",
        message=result.message or "",
        status="✅ Compatible" if result.is_compatible else "⚠️  Issues Found",
        differences=[_difference_view(d) for d in result.differences],
    )
