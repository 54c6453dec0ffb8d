"""Sweep and HWE-deviation visualizations for sweep-hwe.

Every function:
  - Accepts a SweepSimResult as input
  - Returns a matplotlib Figure
  - Has an optional ``save_path`` parameter (saves PNG when given)
  - Uses the shared dark theme from ``sweep_hwe.viz.style``

matplotlib backend is forced to Agg (no display) on import.
"""

from __future__ import annotations

import matplotlib
matplotlib.use('Agg')

from typing import Optional, TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np

from sweep_hwe.types import GENOTYPE_LABELS
from sweep_hwe.viz.style import (
    ANCESTRAL_COLOR,
    DERIVED_COLOR,
    GENOTYPE_COLORS,
    SIGNIFICANT_COLOR,
    TEXT_COLOR,
    dark_figure,
    legend_kwargs,
    save_figure,
)

if TYPE_CHECKING:
    from sweep_hwe.model import SweepSimResult


def _outcome_label(result: 'SweepSimResult') -> str:
    return result.outcome.name if result.outcome is not None else 'UNRESOLVED'


# ═══════════════════════════════════════════════════════════════════════
# 1. ALLELE FREQUENCY TRAJECTORY
# ═══════════════════════════════════════════════════════════════════════

def plot_allele_trajectory(
    result: 'SweepSimResult',
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Derived (p) and ancestral (q) allele frequency per evaluated generation.

    Args:
        result: SweepSimResult with generations and p.
        save_path: Path to save figure.

    Returns:
        matplotlib Figure.
    """
    fig, ax = dark_figure()
    gens = result.generations

    ax.plot(gens, result.p, color=DERIVED_COLOR, linewidth=2.0, label='p (derived)')
    ax.plot(gens, 1.0 - result.p, color=ANCESTRAL_COLOR, linewidth=1.5,
            alpha=0.8, label='q (ancestral)')
    ax.axvline(result.introduction_generation, color=TEXT_COLOR, linestyle=':',
               linewidth=1.0, alpha=0.6,
               label=f'Introduced (gen {result.introduction_generation})')

    ax.set_ylim(-0.02, 1.02)
    ax.set_xlabel('Generation', fontsize=12)
    ax.set_ylabel('Allele frequency', fontsize=12)
    ax.set_title(f'Sweep trajectory: {_outcome_label(result)}',
                 fontsize=14, fontweight='bold')
    ax.legend(loc='center right', **legend_kwargs())

    if save_path:
        save_figure(fig, save_path)
    return fig


# ═══════════════════════════════════════════════════════════════════════
# 2. CHI-SQUARE HISTORY
# ═══════════════════════════════════════════════════════════════════════

def plot_chi_square_history(
    result: 'SweepSimResult',
    log_scale: bool = True,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Chi-square statistic per generation against the critical value.

    Significant generations are highlighted. Non-finite statistics
    (zero expected counts) are left out of the line.

    Args:
        result: SweepSimResult with statistic and significant.
        log_scale: Plot the statistic on a symlog y-axis.
        save_path: Path to save figure.

    Returns:
        matplotlib Figure.
    """
    fig, ax = dark_figure()
    gens = result.generations
    stat = result.statistic
    finite = np.isfinite(stat)

    ax.plot(gens[finite], stat[finite], color=ANCESTRAL_COLOR,
            linewidth=1.0, alpha=0.8, label='χ² (df = 1)')
    sig = result.significant & finite
    ax.scatter(gens[sig], stat[sig], color=SIGNIFICANT_COLOR, s=14,
               zorder=3, label='significant')
    ax.axhline(result.critical_value, color=DERIVED_COLOR, linestyle='--',
               linewidth=1.2, label=f'critical value {result.critical_value:g}')

    if log_scale:
        ax.set_yscale('symlog', linthresh=1.0)

    if result.summary is not None:
        s = result.summary
        ax.text(0.02, 0.95,
                f'{s.n_significant}/{s.n_total} significant ({s.percent:.3g}%)',
                transform=ax.transAxes, color=TEXT_COLOR, fontsize=10,
                va='top')

    ax.set_xlabel('Generation', fontsize=12)
    ax.set_ylabel('Chi-square statistic', fontsize=12)
    ax.set_title('Deviation from Hardy-Weinberg proportions',
                 fontsize=14, fontweight='bold')
    ax.legend(loc='upper right', **legend_kwargs())

    if save_path:
        save_figure(fig, save_path)
    return fig


# ═══════════════════════════════════════════════════════════════════════
# 3. GENOTYPE COMPOSITION
# ═══════════════════════════════════════════════════════════════════════

def plot_genotype_composition(
    result: 'SweepSimResult',
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Observed genotype proportions (stacked) with HWE expectations overlaid.

    Args:
        result: SweepSimResult with observed and expected counts.
        save_path: Path to save figure.

    Returns:
        matplotlib Figure.
    """
    fig, ax = dark_figure()
    gens = result.generations
    n = result.observed.sum(axis=1, keepdims=True)
    obs_frac = result.observed / np.maximum(n, 1)
    exp_frac = result.expected / np.maximum(n, 1)

    ax.stackplot(
        gens, obs_frac.T,
        colors=[GENOTYPE_COLORS[g] for g in GENOTYPE_LABELS],
        alpha=0.55, labels=[f'{g} observed' for g in GENOTYPE_LABELS],
    )
    # Expected class boundaries: AA, AA + Aa
    bounds = np.cumsum(exp_frac, axis=1)
    ax.plot(gens, bounds[:, 0], color=TEXT_COLOR,
            linestyle='--', linewidth=1.0, label='HWE boundaries')
    ax.plot(gens, bounds[:, 1], color=TEXT_COLOR,
            linestyle='--', linewidth=1.0)

    ax.set_ylim(0.0, 1.0)
    ax.set_xlabel('Generation', fontsize=12)
    ax.set_ylabel('Genotype proportion', fontsize=12)
    ax.set_title('Genotype composition vs HWE expectation',
                 fontsize=14, fontweight='bold')
    ax.legend(loc='center right', **legend_kwargs())

    if save_path:
        save_figure(fig, save_path)
    return fig
