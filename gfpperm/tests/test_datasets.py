import numpy as np
import pytest

from gfpperm import datasets, gfp


def test_simulate_trials():
    "Test datasets.simulate_trials()"
    a, b = datasets.simulate_trials(4, (10, 5), n_channels=8, n_samples=30, seed=0)
    assert len(a) == len(b) == 4
    for x_a, x_b in zip(a, b):
        assert x_a.shape[:2] == x_b.shape[:2] == (8, 30)
        assert 8 <= x_a.shape[2] <= 10
        assert 4 <= x_b.shape[2] <= 5
        # average referenced
        assert np.allclose(x_a.mean(0), 0)
    # effect in the middle third by default
    a_gfp = np.mean([gfp(x).mean(1) for x in a], 0)
    b_gfp = np.mean([gfp(x).mean(1) for x in b], 0)
    assert a_gfp[15] - b_gfp[15] > a_gfp[2] - b_gfp[2]
    # short trials
    a, b = datasets.simulate_trials(1, n_samples=6)
    assert a[0].shape[1] == 6
    with pytest.raises(ValueError):
        datasets.simulate_trials(1, n_samples=20, effect=(20, 40))


def test_constant_trials():
    "Test datasets.constant_trials()"
    a, b = datasets.constant_trials([3, 0], [4, 2])
    assert a.shape == (4, 10, 4)
    assert b.shape == (4, 10, 2)
    assert np.allclose(gfp(a), 3)
    assert np.allclose(gfp(b), 0)
    with pytest.raises(ValueError):
        datasets.constant_trials([1], [2], n_channels=3)
