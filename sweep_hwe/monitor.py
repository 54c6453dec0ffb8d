"""Per-generation Hardy-Weinberg monitor for a single selective sweep.

SweepMonitor is driven by its host, once per generation:

    monitor = SweepMonitor(mutation_type=2)
    ...
    host.introduce_sweep(rng)        # one-time action at the start generation
    monitor.begin(generation)
    ...
    record = monitor.on_generation(generation, host)
    if monitor.resolved:
        break

State machine:
  WAITING_TO_START  inert until begin()
  MONITORING        while exactly one instance of the tracked type
                    segregates: classify cohort, HWE expectation,
                    chi-square, append to history, report
  RESOLVED          entered when no instance segregates; FIXED if a
                    substitution of the type exists, LOST otherwise

Generations with more than one segregating instance (recurrent mutation
of the tracked type) are skipped: the test is only defined for a single
sweep locus.

The chi-square history is owned by the monitor. It is created at begin(),
reduced to a SweepSummary at resolution, then discarded.
"""

from __future__ import annotations

import sys
import warnings
from typing import List, Optional, TextIO, Tuple

from sweep_hwe.genotypes import classify_genotypes
from sweep_hwe.hwe import (
    chi_square_p_value,
    chi_square_test,
    expected_genotype_counts,
)
from sweep_hwe.report import (
    format_generation_report,
    format_resolution_report,
    summarize_history,
)
from sweep_hwe.types import (
    CHI2_CRITICAL_DF1,
    GenerationRecord,
    MonitorState,
    SimulationView,
    SweepOutcome,
    SweepSummary,
)


class SweepMonitor:
    """Tracks one sweep and tests HWE every generation until it resolves."""

    def __init__(
        self,
        mutation_type: int,
        critical_value: float = CHI2_CRITICAL_DF1,
        stream: Optional[TextIO] = None,
        verbose: bool = True,
    ):
        """
        Args:
            mutation_type: Type id of the tracked allele.
            critical_value: Chi-square threshold for significance.
            stream: Text stream for reports (default sys.stdout).
            verbose: False = no text output; state is unaffected.
        """
        self.mutation_type = mutation_type
        self.critical_value = critical_value
        self.stream = stream
        self.verbose = verbose
        self.reset()

    def reset(self) -> None:
        """Return to WAITING_TO_START for a new run."""
        self._state = MonitorState.WAITING_TO_START
        self._history: Optional[List[float]] = None
        self._start_generation: Optional[int] = None
        self._resolved_generation: Optional[int] = None
        self._outcome: Optional[SweepOutcome] = None
        self._summary: Optional[SweepSummary] = None
        self.n_evaluated = 0
        self.n_skipped = 0

    # ── read-only state ──────────────────────────────────────────────

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def resolved(self) -> bool:
        return self._state == MonitorState.RESOLVED

    @property
    def start_generation(self) -> Optional[int]:
        return self._start_generation

    @property
    def resolved_generation(self) -> Optional[int]:
        return self._resolved_generation

    @property
    def outcome(self) -> Optional[SweepOutcome]:
        return self._outcome

    @property
    def summary(self) -> Optional[SweepSummary]:
        """Summary of the run; None until resolved or if nothing was evaluated."""
        return self._summary

    @property
    def history(self) -> Tuple[float, ...]:
        """Snapshot of the chi-square history (empty outside MONITORING)."""
        return tuple(self._history) if self._history is not None else ()

    # ── transitions ──────────────────────────────────────────────────

    def begin(self, generation: int) -> None:
        """Enter MONITORING; called when the sweep allele is introduced.

        Raises:
            RuntimeError: If the monitor is not WAITING_TO_START.
        """
        if self._state != MonitorState.WAITING_TO_START:
            raise RuntimeError(
                f"begin() requires state WAITING_TO_START, got {self._state.name}"
            )
        self._state = MonitorState.MONITORING
        self._start_generation = generation
        self._history = []

    def on_generation(
        self,
        generation: int,
        view: SimulationView,
    ) -> Optional[GenerationRecord]:
        """Run this generation's evaluation.

        Args:
            generation: Host generation index.
            view: Read-only view of the host population.

        Returns:
            The GenerationRecord when an evaluation took place, else None
            (inert state, skipped generation, or resolution).
        """
        if self._state != MonitorState.MONITORING:
            return None

        instances = view.instances_of_type(self.mutation_type)
        n_instances = len(instances)

        if n_instances == 0:
            self._resolve(generation, view)
            return None

        if n_instances > 1:
            self.n_skipped += 1
            warnings.warn(
                f"Generation {generation}: {n_instances} segregating instances "
                f"of mutation type {self.mutation_type}; HWE test skipped",
                RuntimeWarning,
                stacklevel=2,
            )
            return None

        record = self._evaluate(generation, int(instances[0]), view)
        self._history.append(record.statistic)
        self.n_evaluated += 1
        self._emit(format_generation_report(record))
        return record

    # ── internals ────────────────────────────────────────────────────

    def _evaluate(
        self,
        generation: int,
        allele: int,
        view: SimulationView,
    ) -> GenerationRecord:
        p = float(view.frequency_of(self.mutation_type))
        cohort = view.current_cohort()
        observed = classify_genotypes(cohort, allele)
        expected = expected_genotype_counts(p, len(cohort))
        statistic, significant = chi_square_test(
            expected, observed, self.critical_value
        )
        return GenerationRecord(
            generation=generation,
            p=p,
            q=1.0 - p,
            expected=expected,
            observed=observed,
            statistic=statistic,
            p_value=chi_square_p_value(statistic),
            significant=significant,
        )

    def _resolve(self, generation: int, view: SimulationView) -> None:
        if view.substitutions_containing_type(self.mutation_type) > 0:
            self._outcome = SweepOutcome.FIXED
        else:
            self._outcome = SweepOutcome.LOST

        self._summary = summarize_history(self._history, self.critical_value)
        self._emit(format_resolution_report(
            generation, self._outcome, self._summary
        ))

        self._history = None
        self._resolved_generation = generation
        self._state = MonitorState.RESOLVED

    def _emit(self, text: str) -> None:
        if self.verbose:
            print(text, file=self.stream if self.stream is not None else sys.stdout)
