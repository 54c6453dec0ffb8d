"""Hardy-Weinberg expectations and the chi-square goodness-of-fit test.

Expected genotype counts for derived-allele frequency p (q = 1 − p) in a
cohort of n individuals:

  AA = p²·n    Aa = 2pq·n    aa = q²·n

Deviation is scored with the one-df chi-square statistic

  χ² = Σ (O − E)² / E

over the three classes and judged against the fixed critical value 3.84
(alpha = 0.05).

Known limitation: when an expected count is close to zero, a single
individual in that class contributes an outsized term and the test flags
the generation. An expected count of exactly zero yields inf (or nan when
the observed count is also zero). Both are returned as computed and both
count as significant.
"""

from __future__ import annotations

import warnings
from typing import Sequence, Tuple

import numpy as np
from scipy import stats as sp_stats

from sweep_hwe.types import CHI2_CRITICAL_DF1


# ═══════════════════════════════════════════════════════════════════════
# HWE EXPECTATION
# ═══════════════════════════════════════════════════════════════════════


def expected_genotype_counts(p: float, n: int) -> Tuple[float, float, float]:
    """Expected (AA, Aa, aa) counts under Hardy-Weinberg proportions.

    Values are real, not rounded. p outside [0, 1] is the caller's error
    and is not checked.

    Args:
        p: Derived-allele frequency.
        n: Cohort size.

    Returns:
        (p²n, 2pqn, q²n)
    """
    q = 1.0 - p
    return p * p * n, 2.0 * p * q * n, q * q * n


# ═══════════════════════════════════════════════════════════════════════
# CHI-SQUARE TEST
# ═══════════════════════════════════════════════════════════════════════


def chi_square_statistic(
    expected: Sequence[float],
    observed: Sequence[float],
) -> float:
    """Σ (O − E)² / E over the three genotype classes.

    Zero expected counts are divided through in IEEE arithmetic; a
    RuntimeWarning names the degenerate classes.
    """
    exp = np.asarray(expected, dtype=np.float64)
    obs = np.asarray(observed, dtype=np.float64)
    if exp.shape != (3,) or obs.shape != (3,):
        raise ValueError(
            f"expected and observed must hold 3 classes, "
            f"got {exp.shape} and {obs.shape}"
        )

    zero = exp == 0.0
    if np.any(zero):
        warnings.warn(
            f"Zero expected count in class(es) {np.flatnonzero(zero).tolist()}; "
            f"chi-square statistic is undefined",
            RuntimeWarning,
            stacklevel=3,
        )

    with np.errstate(divide='ignore', invalid='ignore'):
        terms = (obs - exp) ** 2 / exp
    return float(terms.sum())


def chi_square_test(
    expected: Sequence[float],
    observed: Sequence[float],
    critical_value: float = CHI2_CRITICAL_DF1,
) -> Tuple[float, bool]:
    """Chi-square statistic and significance verdict.

    Args:
        expected: (AA, Aa, aa) expected counts.
        observed: (AA, Aa, aa) observed counts.
        critical_value: Threshold; default 3.84 (alpha = 0.05, df = 1).

    Returns:
        (statistic, verdict) with the verdict from is_significant().
    """
    statistic = chi_square_statistic(expected, observed)
    return statistic, is_significant(statistic, critical_value)


def is_significant(
    statistic: float,
    critical_value: float = CHI2_CRITICAL_DF1,
) -> bool:
    """statistic ≥ critical_value, with an undefined (nan) statistic
    treated as significant like inf.
    """
    return bool(np.isnan(statistic) or statistic >= critical_value)


def chi_square_p_value(statistic: float, df: int = 1) -> float:
    """Upper-tail p-value of a chi-square statistic.

    Reported alongside the statistic; the verdict is always taken from
    the critical value, not from this number.
    """
    return float(sp_stats.chi2.sf(statistic, df))
