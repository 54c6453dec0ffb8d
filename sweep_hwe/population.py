"""Single-locus Wright-Fisher host population for sweep monitoring.

A deliberately small host that implements the SimulationView queries:
  - N diploid individuals, one tracked locus, no recombination
  - Allele-instance ids per genome copy (0 = ancestral)
  - Fitness 1 / 1 + h·s / 1 + s for 0 / 1 / 2 copies of the tracked type
  - Parents drawn with replacement in proportion to fitness
  - Mendelian transmission: one random copy from each parent
  - Optional recurrent mutation of ancestral copies to new instances,
    starting once the sweep is introduced
  - Instances present in all 2N copies become substitutions and leave
    the segregating set

Generation 1 is the founding population; each step() produces the next.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from sweep_hwe.types import ANCESTRAL


@dataclass(frozen=True)
class Substitution:
    """An allele instance that reached fixation."""
    instance_id: int
    mutation_type: int
    origin_generation: int
    fixation_generation: int


class SweepPopulation:
    """Host population carrying one tracked mutation type.

    Implements SimulationView.
    """

    def __init__(
        self,
        size: int,
        mutation_type: int = 2,
        selection_coefficient: float = 0.1,
        dominance: float = 0.5,
        mutation_rate: float = 0.0,
    ):
        """
        Args:
            size: Number of diploid individuals N (constant).
            mutation_type: Type id of the tracked allele.
            selection_coefficient: s; homozygote fitness is 1 + s.
            dominance: h; heterozygote fitness is 1 + h·s.
            mutation_rate: Per genome copy per generation probability that
                an ancestral copy mutates to a new tracked instance. Applies
                only after introduce_sweep().
        """
        if size < 1:
            raise ValueError(f"size must be >= 1, got {size}")
        self.size = size
        self.mutation_type = mutation_type
        self.selection_coefficient = selection_coefficient
        self.dominance = dominance
        self.mutation_rate = mutation_rate

        self.generation = 1
        self.genomes = np.zeros((size, 2), dtype=np.int64)
        self.substitutions: List[Substitution] = []
        self.introduced_instance: Optional[int] = None

        # instance id → origin generation, for instances still segregating
        self._origins: Dict[int, int] = {}
        self._next_id = 1

    # ── sweep introduction ───────────────────────────────────────────

    def introduce_sweep(self, rng: np.random.Generator) -> int:
        """Add the sweep allele to one genome copy of one random individual.

        Returns:
            Id of the new allele instance.

        Raises:
            RuntimeError: If the sweep has already been introduced.
        """
        if self.introduced_instance is not None:
            raise RuntimeError(
                f"Sweep already introduced (instance {self.introduced_instance})"
            )
        individual = int(rng.integers(0, self.size))
        copy = int(rng.integers(0, 2))
        instance = self._new_instance()
        self.genomes[individual, copy] = instance
        self.introduced_instance = instance
        return instance

    def _new_instance(self) -> int:
        instance = self._next_id
        self._next_id += 1
        self._origins[instance] = self.generation
        return instance

    # ── reproduction ─────────────────────────────────────────────────

    def fitness(self) -> np.ndarray:
        """(N,) fitness from the number of tracked copies each individual carries."""
        n_copies = (self.genomes != ANCESTRAL).sum(axis=1)
        s = self.selection_coefficient
        h = self.dominance
        return np.where(
            n_copies == 2, 1.0 + s,
            np.where(n_copies == 1, 1.0 + h * s, 1.0),
        )

    def step(
        self,
        reproduction_rng: np.random.Generator,
        mutation_rng: Optional[np.random.Generator] = None,
    ) -> None:
        """Advance one non-overlapping generation."""
        n = self.size
        w = self.fitness()
        prob = w / w.sum()

        mothers = reproduction_rng.choice(n, size=n, p=prob)
        fathers = reproduction_rng.choice(n, size=n, p=prob)
        choice = reproduction_rng.integers(0, 2, size=(n, 2))

        offspring = np.empty_like(self.genomes)
        offspring[:, 0] = self.genomes[mothers, choice[:, 0]]
        offspring[:, 1] = self.genomes[fathers, choice[:, 1]]

        self.genomes = offspring
        self.generation += 1

        if (self.mutation_rate > 0.0 and mutation_rng is not None
                and self.introduced_instance is not None):
            self._apply_mutations(mutation_rng)
        self._update_segregating()

    def _apply_mutations(self, rng: np.random.Generator) -> int:
        hits = (self.genomes == ANCESTRAL) & (rng.random(self.genomes.shape) < self.mutation_rate)
        rows, cols = np.nonzero(hits)
        for i, c in zip(rows, cols):
            self.genomes[i, c] = self._new_instance()
        return len(rows)

    def _update_segregating(self) -> None:
        """Convert fixed instances to substitutions; forget lost ones."""
        ids, counts = np.unique(
            self.genomes[self.genomes != ANCESTRAL], return_counts=True
        )
        present = set(int(i) for i in ids)
        for instance, count in zip(ids, counts):
            if count == 2 * self.size:
                instance = int(instance)
                self.substitutions.append(Substitution(
                    instance_id=instance,
                    mutation_type=self.mutation_type,
                    origin_generation=self._origins[instance],
                    fixation_generation=self.generation,
                ))
                self.genomes[self.genomes == instance] = ANCESTRAL
                present.discard(instance)
        self._origins = {
            k: v for k, v in self._origins.items() if k in present
        }

    # ── SimulationView ───────────────────────────────────────────────

    def instances_of_type(self, mutation_type: int) -> np.ndarray:
        if mutation_type != self.mutation_type:
            return np.zeros(0, dtype=np.int64)
        return np.array(sorted(self._origins), dtype=np.int64)

    def frequency_of(self, mutation_type: int) -> Optional[float]:
        if len(self.instances_of_type(mutation_type)) == 0:
            return None
        n_copies = int((self.genomes != ANCESTRAL).sum())
        return n_copies / (2.0 * self.size)

    def current_cohort(self) -> np.ndarray:
        cohort = self.genomes.view()
        cohort.flags.writeable = False
        return cohort

    def substitutions_containing_type(self, mutation_type: int) -> int:
        return sum(1 for s in self.substitutions if s.mutation_type == mutation_type)
