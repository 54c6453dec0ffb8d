"""Core data types for sweep-hwe.

This module is the SINGLE SOURCE OF TRUTH for:
  - MonitorState, SweepOutcome enumerations
  - Genotype constants (ANCESTRAL id, class labels, critical value)
  - Per-generation and terminal records (GenerationRecord, SweepSummary)
  - SimulationView: the read-only queries the monitor makes of its host

Cohort layout used throughout:
  (n_individuals, 2) integer array. Axis 1 holds the two genome copies of
  a diploid individual; each entry is the id of the allele instance that
  copy carries at the tracked locus, 0 for the ancestral allele.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Protocol, Tuple

import numpy as np


# ═══════════════════════════════════════════════════════════════════════
# ENUMERATIONS
# ═══════════════════════════════════════════════════════════════════════

class MonitorState(IntEnum):
    """Lifecycle of a SweepMonitor.

    WAITING_TO_START → MONITORING:  sweep allele introduced (begin())
    MONITORING       → RESOLVED:    no segregating instance left
    """
    WAITING_TO_START = 0   # Before the introduction generation; inert
    MONITORING       = 1   # One HWE evaluation per generation
    RESOLVED         = 2   # Fixed or lost; summary emitted


class SweepOutcome(IntEnum):
    """Terminal outcome of the tracked allele."""
    FIXED = 1   # Recorded as a substitution
    LOST  = 2   # Not fixed ⇒ lost (no third outcome)


# ═══════════════════════════════════════════════════════════════════════
# GENOTYPE CONSTANTS
# ═══════════════════════════════════════════════════════════════════════

ANCESTRAL = 0  # Instance id of an unmutated genome copy

# Zygosity classes, in the order used by every count triple:
# derived homozygote (2 copies), heterozygote (1), ancestral homozygote (0)
GENOTYPE_LABELS = ("AA", "Aa", "aa")

# Chi-square critical value, alpha = 0.05, df = 1.
# Fixed constant; df = 3 classes − 1 estimated parameter (p) − 1.
CHI2_CRITICAL_DF1 = 3.84


# ═══════════════════════════════════════════════════════════════════════
# RECORDS
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class GenerationRecord:
    """One HWE evaluation. Created once per generation, never mutated."""
    generation: int
    p: float                                  # derived allele frequency
    q: float                                  # 1 − p
    expected: Tuple[float, float, float]      # (AA, Aa, aa) under HWE
    observed: Tuple[int, int, int]            # (AA, Aa, aa) counted
    statistic: float                          # chi-square, df = 1
    p_value: float                            # upper tail, informational only
    significant: bool                         # statistic ≥ critical value

    @property
    def n(self) -> int:
        """Cohort size."""
        return sum(self.observed)


@dataclass(frozen=True)
class SweepSummary:
    """Reduction of the chi-square history at resolution."""
    n_significant: int
    n_total: int
    percent: float


# ═══════════════════════════════════════════════════════════════════════
# HOST INTERFACE
# ═══════════════════════════════════════════════════════════════════════

class SimulationView(Protocol):
    """Narrow read-only view of the host simulation.

    The host guarantees population state is quiescent while the monitor
    queries it; the monitor never writes through this interface.
    """

    def frequency_of(self, mutation_type: int) -> Optional[float]:
        """Population frequency of the type, None if nothing segregates."""
        ...

    def instances_of_type(self, mutation_type: int) -> np.ndarray:
        """Ids of the segregating instances of the type."""
        ...

    def current_cohort(self) -> np.ndarray:
        """(n_individuals, 2) instance ids of the live cohort."""
        ...

    def substitutions_containing_type(self, mutation_type: int) -> int:
        """Number of fixed substitutions of the type."""
        ...
