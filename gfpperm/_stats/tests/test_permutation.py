import numpy as np
from numpy.testing import assert_allclose, assert_array_equal
import pytest

from gfpperm import datasets, gfp, within_subject_permutation
from gfpperm._exceptions import DimensionMismatchError
from gfpperm._stats.permutation import as_random_state, permute_partition, random_seeds


def test_permute_partition():
    "Test permute_partition()"
    partitions = list(permute_partition(3, 5, 20, 0))
    assert len(partitions) == 20
    for a_index, b_index in partitions:
        assert len(a_index) == 3
        assert len(b_index) == 5
        assert_array_equal(np.sort(np.concatenate((a_index, b_index))), np.arange(8))
    # check we have some variability
    assert len({tuple(np.sort(a_index)) for a_index, _ in partitions}) > 1
    # make sure sequence is stable
    a_0 = [tuple(a) for a, _ in permute_partition(3, 5, 4, 0)]
    a_1 = [tuple(a) for a, _ in permute_partition(3, 5, 4, np.random.RandomState(0))]
    assert a_0 == a_1


def test_random_state():
    "Test random state arguments"
    rng = np.random.RandomState(3)
    assert as_random_state(rng) is rng
    assert isinstance(as_random_state(None), np.random.RandomState)
    with pytest.raises(TypeError):
        as_random_state('seed')
    seeds = random_seeds(5, 0)
    assert seeds.dtype == np.uint32
    assert_array_equal(seeds, random_seeds(5, 0))


def test_within_subject_permutation():
    "Test within_subject_permutation()"
    a, b = datasets.simulate_trials(1, (12, 7), seed=1)
    a, b = a[0], b[0]
    a_dist, b_dist = within_subject_permutation(a, b, 50, rng=0)
    assert a_dist.shape == b_dist.shape == (50, a.shape[1])
    # row 0 is the data as labeled
    assert_allclose(a_dist[0], gfp(a).mean(1))
    assert_allclose(b_dist[0], gfp(b).mean(1))
    # every row partitions the same trials: weighted means add up
    n_a = a.shape[2]
    n_b = b.shape[2]
    total = gfp(np.concatenate((a, b), 2)).sum(1)
    assert_allclose(a_dist * n_a + b_dist * n_b, np.tile(total, (50, 1)))
    # relabeled rows differ from the original
    assert not np.allclose(a_dist[1], a_dist[0])
    # reproducible with seed
    a_dist_2, b_dist_2 = within_subject_permutation(a, b, 50, rng=0)
    assert_array_equal(a_dist_2, a_dist)
    assert_array_equal(b_dist_2, b_dist)
    # input is not modified
    a_copy = a.copy()
    within_subject_permutation(a, b, 5)
    assert_array_equal(a, a_copy)


def test_within_subject_permutation_row_0():
    "Test that row 0 does not depend on the number of permutations"
    a, b = datasets.simulate_trials(1, (5, 9), seed=2)
    for n_perm in (1, 2, 10):
        a_dist, b_dist = within_subject_permutation(a[0], b[0], n_perm)
        assert len(a_dist) == n_perm
        assert_allclose(a_dist[0], gfp(a[0]).mean(1))
        assert_allclose(b_dist[0], gfp(b[0]).mean(1))


def test_within_subject_permutation_shrinkage():
    "Test that relabeling moves condition means toward the pooled mean"
    a, b = datasets.constant_trials([10, 0], [6, 4])
    a_dist, b_dist = within_subject_permutation(a, b, 100, rng=0)
    assert_allclose(a_dist[0], 10)
    assert_allclose(b_dist[0], 0)
    diff = a_dist - b_dist
    assert np.abs(diff[1:]).max() <= 10 + 1e-9
    assert np.abs(diff[1:]).mean() < 5


def test_within_subject_permutation_errors():
    "Test input validation"
    a = np.zeros((4, 10, 3))
    with pytest.raises(DimensionMismatchError):
        within_subject_permutation(a, np.zeros((5, 10, 3)), 10)
    with pytest.raises(DimensionMismatchError):
        within_subject_permutation(a, np.zeros((4, 11, 3)), 10)
    with pytest.raises(ValueError):
        within_subject_permutation(np.zeros(10), a, 10)
    with pytest.raises(ValueError):
        within_subject_permutation(a, a, 0)
    # single trial as 2d array
    a_dist, b_dist = within_subject_permutation(a, np.ones((4, 10)), 5)
    assert a_dist.shape == (5, 10)
