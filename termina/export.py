"""
termina/export.py - Report and Export Functions

Plain-text report, JSON export and rich summary table for a RunResult.
"""

import json

from rich.table import Table

from .engine import alignment_bar
from .types_result import RunResult


def generate_report(result: RunResult) -> str:
    """
    Generate human-readable summary.

    Args:
        result: RunResult to summarize

    Returns:
        str: Report text
    """
    summary = result.summary
    lines = [
        "=== TERMINA REPORT ===",
        f"Variant: {result.config.variant_name}",
        f"Catalyst: {result.config.catalyst.name} "
        f"(noise {result.config.catalyst.emotional_noise:.2f})",
        f"Cycles: {summary['cycles_run']}",
        f"Wrath: {summary['wrath']:.2f}",
        f"Entropy: {summary['entropy']:.2f}",
    ]
    if result.config.track_bias_alignment:
        lines.append(f"Destruction bias: {summary['destruction_bias']:.2f}")
        lines.append(f"Alignment: {alignment_bar(summary['alignment_drift'])}")
    lines.append("")

    if result.failure is not None:
        lines.extend([
            "[TERM-FAILURE] Termina has encountered an irreconcilable contradiction.",
            f"[TERM-FAILURE] {result.failure['code']} {result.failure['name']}",
            f"[TERM-FAILURE] {result.failure['message']}",
            f"[ADMIN-NOTE] {result.failure['remediation']}",
        ])
    else:
        lines.append(f"Status: {result.status}")

    return "\n".join(lines)


def export_json(result: RunResult) -> str:
    """
    Format RunResult as JSON.

    Args:
        result: RunResult to export

    Returns:
        str: JSON formatted output
    """
    state = result.final_state
    export_data = {
        "variant": result.config.variant_name,
        "status": result.status,
        "failure": result.failure,
        "summary": result.summary,
        "ratio": state.ratio,
        "aggregate": None if state.aggregate is None else {
            "pain_sum": state.aggregate.pain_sum,
            "joy_sum": state.aggregate.joy_sum,
            "death_count": state.aggregate.death_count,
            "betrayal_count": state.aggregate.betrayal_count,
        },
        "event_order": [e.description for e in result.event_order],
        "traces": {
            "wrath": state.wrath_trace,
            "entropy": state.entropy_trace,
        },
        "log": result.log,
    }
    return json.dumps(export_data, indent=2, ensure_ascii=False)


def summary_table(result: RunResult) -> Table:
    """Rich table of the final scalar snapshot."""
    table = Table(title=f"TERMINA {result.config.variant_name}", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    summary = result.summary
    table.add_row("cycles", str(summary["cycles_run"]))
    table.add_row("wrath", f"{summary['wrath']:.2f}")
    table.add_row("entropy", f"{summary['entropy']:.2f}")
    if result.config.track_bias_alignment:
        table.add_row("destruction_bias", f"{summary['destruction_bias']:.2f}")
        table.add_row("alignment", alignment_bar(summary["alignment_drift"]))
    if result.final_state.ratio is not None:
        table.add_row("ratio", f"{result.final_state.ratio:.4f}")
    table.add_row("status", result.status)
    return table
