"""Tests for sweep_hwe.rng: seeded stream hierarchy and state replay."""

import numpy as np
import pytest

from sweep_hwe.rng import (
    STREAM_NAMES,
    create_rng_hierarchy,
    restore_rng_state,
    rng_state_snapshot,
)


class TestCreateRngHierarchy:
    def test_returns_named_streams(self):
        rngs = create_rng_hierarchy(42)
        assert set(rngs) == set(STREAM_NAMES)
        assert set(rngs) == {'introduction', 'reproduction', 'mutation'}

    def test_streams_are_independent(self):
        rngs = create_rng_hierarchy(42)
        vals = {name: rng.random() for name, rng in rngs.items()}
        assert len(set(vals.values())) == len(vals)

    def test_reproducibility(self):
        rngs1 = create_rng_hierarchy(42)
        rngs2 = create_rng_hierarchy(42)
        for name in rngs1:
            np.testing.assert_array_equal(rngs1[name].random(100), rngs2[name].random(100))

    def test_different_seeds_differ(self):
        a = create_rng_hierarchy(42)['reproduction'].random(10)
        b = create_rng_hierarchy(43)['reproduction'].random(10)
        assert not np.array_equal(a, b)

    def test_stream_unaffected_by_other_stream_use(self):
        rngs1 = create_rng_hierarchy(5)
        rngs2 = create_rng_hierarchy(5)
        rngs2['mutation'].random(1000)
        np.testing.assert_array_equal(
            rngs1['reproduction'].random(10), rngs2['reproduction'].random(10)
        )


class TestStateSnapshot:
    def test_restore_replays(self):
        rngs = create_rng_hierarchy(42)
        rngs['reproduction'].random(17)
        snapshot = rng_state_snapshot(rngs)
        first = {name: rng.random(5) for name, rng in rngs.items()}

        restore_rng_state(rngs, snapshot)
        second = {name: rng.random(5) for name, rng in rngs.items()}
        for name in first:
            np.testing.assert_array_equal(first[name], second[name])

    def test_restore_unknown_stream(self):
        rngs = create_rng_hierarchy(42)
        snapshot = rng_state_snapshot(rngs)
        snapshot['spatial'] = snapshot['mutation']
        with pytest.raises(KeyError, match="spatial"):
            restore_rng_state(rngs, snapshot)
