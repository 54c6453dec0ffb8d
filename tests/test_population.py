"""Tests for sweep_hwe.population: single-locus Wright-Fisher host."""

import numpy as np
import pytest

from sweep_hwe.population import Substitution, SweepPopulation
from sweep_hwe.types import ANCESTRAL

MUT_TYPE = 2


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def pop():
    return SweepPopulation(size=50, mutation_type=MUT_TYPE,
                           selection_coefficient=0.1, dominance=0.5)


# ── construction & introduction ──────────────────────────────────────

class TestIntroduction:
    def test_initial_state(self, pop):
        assert pop.generation == 1
        assert pop.genomes.shape == (50, 2)
        assert np.all(pop.genomes == ANCESTRAL)
        assert len(pop.instances_of_type(MUT_TYPE)) == 0
        assert pop.frequency_of(MUT_TYPE) is None
        assert pop.substitutions_containing_type(MUT_TYPE) == 0

    def test_rejects_empty_population(self):
        with pytest.raises(ValueError):
            SweepPopulation(size=0)

    def test_single_copy(self, pop, rng):
        instance = pop.introduce_sweep(rng)
        assert int((pop.genomes == instance).sum()) == 1
        np.testing.assert_array_equal(pop.instances_of_type(MUT_TYPE), [instance])
        assert pop.frequency_of(MUT_TYPE) == pytest.approx(1.0 / 100.0)

    def test_second_introduction_raises(self, pop, rng):
        pop.introduce_sweep(rng)
        with pytest.raises(RuntimeError, match="already introduced"):
            pop.introduce_sweep(rng)

    def test_carrier_sampled_across_population(self):
        carriers = set()
        for seed in range(40):
            p = SweepPopulation(size=20)
            instance = p.introduce_sweep(np.random.default_rng(seed))
            carriers.add(int(np.flatnonzero((p.genomes == instance).any(axis=1))[0]))
        assert len(carriers) > 5

    def test_other_type_not_reported(self, pop, rng):
        pop.introduce_sweep(rng)
        assert len(pop.instances_of_type(MUT_TYPE + 1)) == 0
        assert pop.frequency_of(MUT_TYPE + 1) is None


# ── SimulationView queries ───────────────────────────────────────────

class TestView:
    def test_cohort_is_read_only(self, pop):
        cohort = pop.current_cohort()
        with pytest.raises(ValueError):
            cohort[0, 0] = 5

    def test_cohort_reflects_state(self, pop, rng):
        instance = pop.introduce_sweep(rng)
        assert int((pop.current_cohort() == instance).sum()) == 1

    def test_frequency_counts_copies(self, pop, rng):
        instance = pop.introduce_sweep(rng)
        pop.genomes[:] = ANCESTRAL
        pop.genomes[:10, :] = instance
        pop.genomes[10:15, 0] = instance
        assert pop.frequency_of(MUT_TYPE) == pytest.approx(25.0 / 100.0)


# ── reproduction ─────────────────────────────────────────────────────

class TestStep:
    def test_size_and_generation(self, pop, rng):
        pop.introduce_sweep(rng)
        pop.step(rng)
        assert pop.genomes.shape == (50, 2)
        assert pop.generation == 2

    def test_fitness_values(self):
        pop = SweepPopulation(size=3, selection_coefficient=0.2, dominance=0.25)
        pop.genomes[:] = [[1, 1], [1, 0], [0, 0]]
        np.testing.assert_allclose(pop.fitness(), [1.2, 1.05, 1.0])

    def test_transmission_only_from_parents(self, rng):
        pop = SweepPopulation(size=30, selection_coefficient=0.0)
        instance = pop.introduce_sweep(rng)
        pop.step(rng)
        assert set(np.unique(pop.genomes)) <= {ANCESTRAL, instance}

    def test_reproducible(self):
        results = []
        for _ in range(2):
            p = SweepPopulation(size=40, selection_coefficient=0.3)
            rng = np.random.default_rng(11)
            p.introduce_sweep(rng)
            for _ in range(10):
                p.step(rng)
            results.append(p.genomes.copy())
        np.testing.assert_array_equal(results[0], results[1])

    def test_fixation_becomes_substitution(self, rng):
        pop = SweepPopulation(size=10, mutation_type=MUT_TYPE)
        instance = pop.introduce_sweep(rng)
        pop.genomes[:] = instance
        pop.step(rng)

        assert pop.substitutions_containing_type(MUT_TYPE) == 1
        assert pop.substitutions[0] == Substitution(
            instance_id=instance,
            mutation_type=MUT_TYPE,
            origin_generation=1,
            fixation_generation=2,
        )
        assert len(pop.instances_of_type(MUT_TYPE)) == 0
        assert pop.frequency_of(MUT_TYPE) is None
        assert np.all(pop.genomes == ANCESTRAL)

    def test_loss_forgets_instance(self, rng):
        pop = SweepPopulation(size=10)
        pop.introduce_sweep(rng)
        pop.genomes[:] = ANCESTRAL
        pop.step(rng)
        assert len(pop.instances_of_type(MUT_TYPE)) == 0
        assert pop.substitutions_containing_type(MUT_TYPE) == 0

    def test_strong_selection_raises_frequency(self):
        rng = np.random.default_rng(5)
        pop = SweepPopulation(size=200, selection_coefficient=1.0, dominance=0.5)
        instance = pop.introduce_sweep(rng)
        pop.genomes[:40, 0] = instance   # start at p = 0.1
        for _ in range(15):
            pop.step(rng)
        freq = pop.frequency_of(MUT_TYPE)
        assert freq is None or freq > 0.3


class TestRecurrentMutation:
    def test_new_instances_arise(self, rng):
        pop = SweepPopulation(size=20, mutation_rate=1.0)
        pop.introduce_sweep(rng)
        pop.step(rng, mutation_rng=np.random.default_rng(3))
        assert np.all(pop.genomes != ANCESTRAL)
        assert len(pop.instances_of_type(MUT_TYPE)) > 1

    def test_no_mutation_without_stream(self, rng):
        pop = SweepPopulation(size=20, mutation_rate=1.0)
        instance = pop.introduce_sweep(rng)
        pop.step(rng)
        assert set(np.unique(pop.genomes)) <= {ANCESTRAL, instance}

    def test_zero_rate(self, rng):
        pop = SweepPopulation(size=20, mutation_rate=0.0)
        instance = pop.introduce_sweep(rng)
        for _ in range(5):
            pop.step(rng, mutation_rng=np.random.default_rng(3))
        assert set(np.unique(pop.genomes)) <= {ANCESTRAL, instance}

    def test_no_mutation_before_introduction(self, rng):
        pop = SweepPopulation(size=20, mutation_rate=1.0)
        for _ in range(3):
            pop.step(rng, mutation_rng=np.random.default_rng(3))
        assert np.all(pop.genomes == ANCESTRAL)
        assert pop.substitutions_containing_type(MUT_TYPE) == 0
        assert len(pop.instances_of_type(MUT_TYPE)) == 0

    def test_lost_sweep_not_masked_by_background_fixation(self, rng):
        pop = SweepPopulation(size=5, mutation_rate=1.0)
        for _ in range(10):
            pop.step(rng, mutation_rng=np.random.default_rng(3))
        pop.introduce_sweep(rng)
        pop.genomes[:] = ANCESTRAL
        pop.step(rng)
        assert pop.substitutions_containing_type(MUT_TYPE) == 0
