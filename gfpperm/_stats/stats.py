"""Statistics functions that work on numpy arrays."""
from warnings import warn

import numpy as np

from .._exceptions import BadProbe, SizeMismatch, SmallDistribution


FLOAT64 = np.dtype('float64')
MIN_RECOMMENDED_SAMPLES = 100


def gfp(x):
    """Global field power

    Parameters
    ----------
    x : array  (n_channels, n_samples[, n_trials])
        Average referenced data.

    Returns
    -------
    gfp : array  (n_samples[, n_trials])
        Standard deviation across channels.
    """
    return np.std(x, 0)


def _as_probe(probe):
    probe = np.asarray(probe, FLOAT64)
    if probe.size != 1 and sum(n != 1 for n in probe.shape) != 1:
        raise BadProbe(f"probe with shape {probe.shape}: probe must have exactly 1 non-singleton dimension (unless it is a scalar)")
    return probe.ravel()


def _as_distribution(distribution, n):
    distribution = np.asarray(distribution, FLOAT64)
    if distribution.ndim == 1:
        distribution = distribution[:, None]
    elif distribution.ndim != 2:
        raise SizeMismatch(f"distribution with shape {distribution.shape}: needs to be (n_perm, n)")
    n_perm, n_dist = distribution.shape
    if n_perm < MIN_RECOMMENDED_SAMPLES:
        warn(f"The reference distribution is small ({n_perm} entries). This is fine for debugging, but you should probably use a larger reference distribution for hypothesis testing.", SmallDistribution, stacklevel=3)
    if n_dist != n:
        raise SizeMismatch(f"The reference distribution and probe have incompatible sizes ({n_dist} vs {n}, respectively).")
    return distribution


def empirical_p(distribution, probe):
    """Two-tailed p-values for null distributions that are not symmetric about zero

    Parameters
    ----------
    distribution : array  (n_perm, n)
        Reference distribution, one column per test.
    probe : array  (n,)
        Value for each test.

    Returns
    -------
    p : array  (n,)
        Two times the proportion of entries in the distribution that are as
        extreme as or more extreme than the probe, in the smaller tail.

    Notes
    -----
    Entries equal to the probe count toward both tails, so the smallest
    p-value is ``2 / n_perm`` when the probe is itself part of the
    distribution. Values can exceed 1 when many entries are tied with the
    probe.
    """
    probe = _as_probe(probe)
    distribution = _as_distribution(distribution, len(probe))
    # number of entries greater than or equal to the probe
    ngt = np.greater_equal(distribution, probe[None, :]).sum(0)
    # number of entries less than or equal to the probe
    nlt = np.less_equal(distribution, probe[None, :]).sum(0)
    nme = 2 * np.minimum(ngt, nlt)
    return nme / distribution.shape[0]


class SortedDistribution:
    """Reference distribution for probing with many values

    Sorts each column once; :meth:`p` then gives the same result as
    :func:`empirical_p` for the original distribution.

    Parameters
    ----------
    distribution : array  (n_perm, n)
        Reference distribution, one column per test.
    """
    def __init__(self, distribution):
        distribution = np.asarray(distribution, FLOAT64)
        if distribution.ndim == 1:
            distribution = distribution[:, None]
        elif distribution.ndim != 2:
            raise SizeMismatch(f"distribution with shape {distribution.shape}: needs to be (n_perm, n)")
        self.n_perm, self.n = distribution.shape
        self._keys = self._column_keys(np.sort(distribution, 0).T).ravel()

    @staticmethod
    def _column_keys(values):
        "Complex keys that sort by column (real part), then by value (imaginary part)"
        keys = np.empty(values.shape, complex)
        keys.real[...] = np.arange(len(values)).reshape((-1,) + (1,) * (values.ndim - 1))
        keys.imag[...] = values
        return keys

    def __repr__(self):
        return f"<SortedDistribution: {self.n_perm} x {self.n}>"

    def p(self, probe):
        probe = _as_probe(probe)
        if len(probe) != self.n:
            raise SizeMismatch(f"The reference distribution and probe have incompatible sizes ({self.n} vs {len(probe)}, respectively).")
        keys = self._column_keys(probe)
        offset = np.arange(self.n) * self.n_perm
        ngt = self.n_perm - (np.searchsorted(self._keys, keys, 'left') - offset)
        nlt = np.searchsorted(self._keys, keys, 'right') - offset
        return 2 * np.minimum(ngt, nlt) / self.n_perm
