"""Text reports for the sweep monitor.

Builds the operator-facing blocks as strings; SweepMonitor prints them.

Per-generation block:

    ── Generation 1042 ──────────────────────────
    p = 0.3120, q = 0.6880
    Expected (AA, Aa, aa):  97.34  429.31  473.35
    Observed (AA, Aa, aa):     99     426     475
    Chi-square = 0.0545 (p = 0.8154): not significant

Final block:

    ══ Generation 1733: FIXED ══
    23 generations significant, of 500 (4.6%)
"""

from __future__ import annotations

from typing import Optional, Sequence

from sweep_hwe.hwe import is_significant
from sweep_hwe.types import (
    CHI2_CRITICAL_DF1,
    GenerationRecord,
    SweepOutcome,
    SweepSummary,
)


def summarize_history(
    history: Sequence[float],
    critical_value: float = CHI2_CRITICAL_DF1,
) -> Optional[SweepSummary]:
    """Reduce a chi-square history to a significance summary.

    Args:
        history: Chi-square statistics, one per evaluated generation.
        critical_value: Significance threshold (≥ counts as significant;
            nan counts too).

    Returns:
        SweepSummary, or None for an empty history (sweep resolved before
        any evaluation).
    """
    n_total = len(history)
    if n_total == 0:
        return None
    n_significant = sum(1 for h in history if is_significant(h, critical_value))
    return SweepSummary(
        n_significant=n_significant,
        n_total=n_total,
        percent=100.0 * n_significant / n_total,
    )


def format_summary(summary: SweepSummary) -> str:
    """'<sig> generations significant, of <total> (<percent>%)'."""
    return (
        f"{summary.n_significant} generations significant, "
        f"of {summary.n_total} ({summary.percent:.4g}%)"
    )


def format_generation_report(record: GenerationRecord) -> str:
    """Per-generation block: p/q, expected, observed, statistic, verdict."""
    e_AA, e_Aa, e_aa = record.expected
    o_AA, o_Aa, o_aa = record.observed
    verdict = "SIGNIFICANT" if record.significant else "not significant"
    header = f"── Generation {record.generation} "
    lines = [
        f"{header:─<46}",
        f"p = {record.p:.4f}, q = {record.q:.4f}",
        f"Expected (AA, Aa, aa): {e_AA:>8.2f} {e_Aa:>8.2f} {e_aa:>8.2f}",
        f"Observed (AA, Aa, aa): {o_AA:>8d} {o_Aa:>8d} {o_aa:>8d}",
        f"Chi-square = {record.statistic:.4f} "
        f"(p = {record.p_value:.4g}): {verdict}",
    ]
    return '\n'.join(lines)


def format_resolution_report(
    generation: int,
    outcome: SweepOutcome,
    summary: Optional[SweepSummary],
) -> str:
    """FIXED/LOST marker, then the summary line when there is one."""
    lines = [f"══ Generation {generation}: {outcome.name} ══"]
    if summary is not None:
        lines.append(format_summary(summary))
    return '\n'.join(lines)
