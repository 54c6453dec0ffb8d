"""Driving loop: host population + sweep monitor, one call per generation.

run_sweep_simulation() owns the generation clock:

  for generation in 1 .. max_generations:
      1. Reproduction (from generation 2 on)
      2. At start_generation: introduce the sweep allele, monitor.begin()
      3. monitor.on_generation(generation, population)
      4. Stop as soon as the monitor resolves (FIXED or LOST)

The generation ceiling is the only cancellation mechanism. A sweep that
neither fixes nor is lost by then leaves the result's outcome as None.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Union

import numpy as np
import yaml

from sweep_hwe.config import SweepConfig, config_to_dict, default_config
from sweep_hwe.monitor import SweepMonitor
from sweep_hwe.population import SweepPopulation
from sweep_hwe.report import summarize_history
from sweep_hwe.rng import create_rng_hierarchy
from sweep_hwe.types import GenerationRecord, SweepOutcome, SweepSummary


# ═══════════════════════════════════════════════════════════════════════
# SWEEP SIMULATION RESULT
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class SweepSimResult:
    """Results from one monitored sweep."""
    introduction_generation: int = 0
    final_generation: int = 0
    outcome: Optional[SweepOutcome] = None     # None = ceiling reached first
    summary: Optional[SweepSummary] = None     # None = nothing evaluated
    n_skipped: int = 0                         # Multi-instance generations
    critical_value: float = 3.84

    # Per-evaluation timeseries (length = number of evaluated generations)
    generations: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))
    p: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))
    expected: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.float64))
    observed: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.int64))
    statistic: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))
    p_value: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))
    significant: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=bool))

    config_yaml: str = ""

    @property
    def n_evaluated(self) -> int:
        return len(self.generations)

    @property
    def resolved(self) -> bool:
        return self.outcome is not None

    def save(self, path: Union[str, Path]) -> None:
        """Save to a compressed npz file."""
        summary = self.summary
        arrays = {
            'generations': self.generations,
            'p': self.p,
            'expected': self.expected,
            'observed': self.observed,
            'statistic': self.statistic,
            'p_value': self.p_value,
            'significant': self.significant,
            'meta_ints': np.array([
                self.introduction_generation,
                self.final_generation,
                int(self.outcome) if self.outcome is not None else 0,
                self.n_skipped,
                summary.n_significant if summary is not None else -1,
                summary.n_total if summary is not None else -1,
            ], dtype=np.int64),
            'meta_floats': np.array([
                self.critical_value,
                summary.percent if summary is not None else np.nan,
            ], dtype=np.float64),
            'config_yaml': np.array(self.config_yaml),
        }
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        np.savez_compressed(path, **arrays)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'SweepSimResult':
        """Load a result written by save()."""
        with np.load(path) as data:
            intro, final, outcome, n_skipped, n_sig, n_total = (
                int(v) for v in data['meta_ints']
            )
            critical_value, percent = (float(v) for v in data['meta_floats'])
            summary = None
            if n_total >= 0:
                summary = SweepSummary(
                    n_significant=n_sig, n_total=n_total, percent=percent,
                )
            return cls(
                introduction_generation=intro,
                final_generation=final,
                outcome=SweepOutcome(outcome) if outcome else None,
                summary=summary,
                n_skipped=n_skipped,
                critical_value=critical_value,
                generations=data['generations'],
                p=data['p'],
                expected=data['expected'],
                observed=data['observed'],
                statistic=data['statistic'],
                p_value=data['p_value'],
                significant=data['significant'],
                config_yaml=str(data['config_yaml']),
            )


def records_to_result(
    records: Sequence[GenerationRecord],
    **kwargs,
) -> SweepSimResult:
    """Stack per-generation records into a SweepSimResult.

    Extra keyword arguments are passed through to SweepSimResult.
    """
    result = SweepSimResult(**kwargs)
    if not records:
        return result
    result.generations = np.array([r.generation for r in records], dtype=np.int64)
    result.p = np.array([r.p for r in records], dtype=np.float64)
    result.expected = np.array([r.expected for r in records], dtype=np.float64)
    result.observed = np.array([r.observed for r in records], dtype=np.int64)
    result.statistic = np.array([r.statistic for r in records], dtype=np.float64)
    result.p_value = np.array([r.p_value for r in records], dtype=np.float64)
    result.significant = np.array([r.significant for r in records], dtype=bool)
    return result


# ═══════════════════════════════════════════════════════════════════════
# DRIVING LOOP
# ═══════════════════════════════════════════════════════════════════════

def run_sweep_simulation(
    config: Optional[SweepConfig] = None,
    stream: Optional[TextIO] = None,
) -> SweepSimResult:
    """Introduce a selected allele and monitor HWE until it fixes or is lost.

    Args:
        config: Run configuration; uses default_config() if None.
        stream: Text stream for monitor reports (default sys.stdout).

    Returns:
        SweepSimResult with the per-generation records and the outcome.
    """
    if config is None:
        config = default_config()

    sim_cfg = config.simulation
    sw_cfg = config.sweep
    mon_cfg = config.monitor

    rngs = create_rng_hierarchy(sim_cfg.seed)
    population = SweepPopulation(
        size=config.population.size,
        mutation_type=sw_cfg.mutation_type,
        selection_coefficient=sw_cfg.selection_coefficient,
        dominance=sw_cfg.dominance,
        mutation_rate=sw_cfg.mutation_rate,
    )
    monitor = SweepMonitor(
        mutation_type=sw_cfg.mutation_type,
        critical_value=mon_cfg.critical_value,
        stream=stream,
        verbose=mon_cfg.verbose,
    )

    records: List[GenerationRecord] = []
    generation = 0
    for generation in range(1, sim_cfg.max_generations + 1):
        if generation > 1:
            population.step(rngs['reproduction'], rngs['mutation'])

        if generation == sw_cfg.start_generation:
            population.introduce_sweep(rngs['introduction'])
            monitor.begin(generation)

        record = monitor.on_generation(generation, population)
        if record is not None:
            records.append(record)
        if monitor.resolved:
            break
    else:
        warnings.warn(
            f"Sweep unresolved after {sim_cfg.max_generations} generations",
            RuntimeWarning,
            stacklevel=2,
        )

    return records_to_result(
        records,
        introduction_generation=sw_cfg.start_generation,
        final_generation=generation,
        outcome=monitor.outcome,
        summary=(monitor.summary if monitor.resolved
                 else summarize_history(monitor.history, mon_cfg.critical_value)),
        n_skipped=monitor.n_skipped,
        critical_value=mon_cfg.critical_value,
        config_yaml=yaml.safe_dump(config_to_dict(config), sort_keys=False),
    )
