"""Genotype classification at the tracked locus.

Each individual in a cohort owns two genome copies. Counting the copies
that carry the tracked allele instance places it in one zygosity class:

  2 copies → AA (derived homozygote)
  1 copy   → Aa (heterozygote)
  0 copies → aa (ancestral homozygote)

Classification is defined for a single allele instance. The caller must
not invoke it while more than one instance of the tracked type segregates;
see SweepMonitor.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np


def _check_cohort(cohort: np.ndarray) -> np.ndarray:
    cohort = np.asarray(cohort)
    if cohort.ndim != 2 or cohort.shape[1] != 2:
        raise ValueError(
            f"cohort must have shape (n_individuals, 2), got {cohort.shape}"
        )
    if cohort.shape[0] == 0:
        raise ValueError("cohort must contain at least one individual")
    return cohort


def copies_carrying(cohort: np.ndarray, allele: int) -> np.ndarray:
    """Number of genome copies carrying ``allele`` for each individual.

    Args:
        cohort: (n_individuals, 2) int array of allele-instance ids.
        allele: Id of the allele instance to count.

    Returns:
        (n_individuals,) int array with values in {0, 1, 2}.

    Raises:
        ValueError: If the cohort is empty or not diploid.
    """
    cohort = _check_cohort(cohort)
    return (cohort == allele).sum(axis=1)


def classify_genotypes(cohort: np.ndarray, allele: int) -> Tuple[int, int, int]:
    """Count individuals in each zygosity class for ``allele``.

    Args:
        cohort: (n_individuals, 2) int array of allele-instance ids.
        allele: Id of the single tracked allele instance.

    Returns:
        (n_AA, n_Aa, n_aa), summing exactly to n_individuals.
    """
    n_copies = copies_carrying(cohort, allele)
    # bincount index = number of copies → (aa, Aa, AA)
    counts = np.bincount(n_copies, minlength=3)
    return int(counts[2]), int(counts[1]), int(counts[0])
