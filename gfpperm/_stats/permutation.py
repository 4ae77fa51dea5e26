"""Random relabeling of trials"""
import numpy as np

from .._exceptions import DimensionMismatchError
from .stats import FLOAT64, gfp as gfp_func


def as_random_state(rng=None):
    """Random number generator from an argument

    Parameters
    ----------
    rng : None | int | numpy.random.RandomState
        ``None`` to use numpy's global random state, an int to seed a new
        random state.
    """
    if rng is None:
        return np.random.mtrand._rand
    elif isinstance(rng, np.random.RandomState):
        return rng
    elif isinstance(rng, (int, np.integer)):
        return np.random.RandomState(rng)
    else:
        raise TypeError(f"rng={rng!r}: needs to be None, int or numpy.random.RandomState")


def random_seeds(samples, rng=None):
    """Sequence of seeds for independent random states

    Parameters
    ----------
    samples : int
        Number of seeds.
    rng : None | int | numpy.random.RandomState
        Random state from which to draw the seeds.

    Returns
    -------
    seeds : array of uint32  (samples,)
        One seed for each random state.
    """
    rng = as_random_state(rng)
    return rng.randint(2**32, size=samples, dtype=np.uint32)


def permute_partition(n_a, n_b, samples, rng=None):
    """Generator for random partitions of pooled trials

    Parameters
    ----------
    n_a, n_b : int
        Number of trials in condition A and B. Trials are pooled with A
        trials first.
    samples : int
        Number of partitions to yield.
    rng : None | int | numpy.random.RandomState
        Random number generator.

    Yields
    ------
    a_index : array of int  (n_a,)
        Pooled trials assigned to A.
    b_index : array of int  (n_b,)
        Pooled trials assigned to B.
    """
    rng = as_random_state(rng)
    n = n_a + n_b
    for _ in range(int(samples)):
        index = rng.permutation(n)
        yield index[:n_a], index[n_a:]


def as_trial_set(x, name='data'):
    "Make sure trial data is (n_channels, n_samples, n_trials)"
    x = np.asarray(x)
    if x.ndim == 2:
        return x[:, :, None]
    elif x.ndim == 3:
        return x
    raise ValueError(f"{name} with shape {x.shape}: needs to be (n_channels, n_samples, n_trials)")


def within_subject_permutation(a, b, n_perm, rng=None, gfp=gfp_func):
    """Permutation distribution of the mean GFP for one subject

    Parameters
    ----------
    a, b : array  (n_channels, n_samples, n_trials)
        Trials for condition A and B. The number of trials can differ.
    n_perm : int
        Number of rows in the distribution, including the original labeling.
    rng : None | int | numpy.random.RandomState
        Random number generator (default: numpy's global random state).
    gfp : callable
        Function mapping ``(n_channels, n_samples, n_trials)`` data to a
        ``(n_samples, n_trials)`` GFP array.

    Returns
    -------
    a_dist, b_dist : array  (n_perm, n_samples)
        Mean GFP for trials labeled A and B. Row 0 is the data as labeled,
        row ``i`` of ``a_dist`` and ``b_dist`` come from the same relabeling.
    """
    a = as_trial_set(a, 'a')
    b = as_trial_set(b, 'b')
    if a.shape[:2] != b.shape[:2]:
        raise DimensionMismatchError.from_shapes("Conditions have different numbers of channels or samples:", (a.shape, b.shape))
    n_perm = int(n_perm)
    if n_perm < 1:
        raise ValueError(f"{n_perm=}: need at least 1 row")
    n_a = a.shape[2]
    n_b = b.shape[2]
    n_samples = a.shape[1]

    # relabeling does not change single trial GFP
    trials = np.concatenate((gfp(a), gfp(b)), 1).T.astype(FLOAT64)  # (n_trials, n_samples)
    a_dist = np.empty((n_perm, n_samples))
    b_dist = np.empty((n_perm, n_samples))
    trials[:n_a].mean(0, out=a_dist[0])
    trials[n_a:].mean(0, out=b_dist[0])
    for i, (a_index, b_index) in enumerate(permute_partition(n_a, n_b, n_perm - 1, rng), 1):
        trials[a_index].mean(0, out=a_dist[i])
        trials[b_index].mean(0, out=b_dist[i])
    return a_dist, b_dist
