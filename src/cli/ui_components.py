"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Lets several commands reuse the same summaries.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from core.domain.models import ComparisonResult, Difference, DifferenceKind, Severity, Snapshot


def _date(value: datetime | None) -> str:
    return value.date().isoformat() if value is not None else "unknown"


def _difference_label(diff: Difference) -> str:
    return escape(f"{diff.kind.value}: {diff.description or diff.flag or 'See details'}")


def print_snapshot_summary(console: Console, snapshot: Snapshot, path: Path) -> None:
    """What `create-baseline` recorded."""

    console.print("[green]✅ Baseline created successfully![/green]")
    console.print(f"📅 Timestamp: {snapshot.timestamp.isoformat()}")
    console.print(f"💾 Saved to: {escape(str(path))}")
    if snapshot.version:
        console.print(f"📦 Act version: {escape(snapshot.version.replace('act version ', ''))}")
    if snapshot.help_flags is not None:
        console.print(f"🔧 Captured {len(snapshot.help_flags)} command flags")
    if snapshot.list_summary is not None:
        state = "working" if snapshot.list_summary.has_output else "no output"
        console.print(f"📋 List command: {state}")


def print_comparison_summary(console: Console, result: ComparisonResult) -> None:
    """Short verdict printed by `check`."""

    console.print("🔍 Checking act compatibility...")

    if not result.has_baseline:
        console.print('[red]❌ No baseline found. Run "create-baseline" first.[/red]')
        return

    if not result.tool_available:
        console.print("[yellow]⚠️  Act not available - skipping compatibility check[/yellow]")
        console.print("✅ CI compatibility check passed (act not required)")
        return

    console.print(f"📅 Baseline from: {_date(result.baseline_timestamp)}")
    console.print(f"🕐 Current check: {_date(result.current_timestamp)}")

    if result.is_compatible:
        console.print("[green]✅ Act is compatible with baseline[/green]")
        if result.differences:
            console.print(f"ℹ️  Found {len(result.differences)} non-breaking change(s):")
            for diff in result.differences:
                if diff.kind is DifferenceKind.VERSION_CHANGE:
                    console.print(
                        f"  📦 Version updated: {escape(str(diff.baseline_value))} → {escape(str(diff.current_value))}"
                    )
                elif diff.kind is DifferenceKind.NEW_FLAG:
                    console.print(f"  🆕 New flag: {escape(diff.flag or '')}")
                elif diff.kind is DifferenceKind.MISSING_FLAG:
                    console.print(f"  ⚠️  Missing flag: {escape(diff.flag or '')}")
                else:
                    console.print(f"  - {_difference_label(diff)}")
        return

    console.print("[red]⚠️  Compatibility issues detected![/red]")
    errors = result.by_severity(Severity.ERROR)
    warnings = result.by_severity(Severity.WARNING)
    if errors:
        console.print(f"🚨 {len(errors)} breaking change(s):")
        for diff in errors:
            console.print(f"  - {_difference_label(diff)}")
    if warnings:
        console.print(f"⚠️  {len(warnings)} warning(s):")
        for diff in warnings:
            console.print(f"  - {_difference_label(diff)}")
    console.print("\n🔧 Consider updating the MCP tools to handle these changes")
