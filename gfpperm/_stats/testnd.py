"""Unbalanced permutation test for differences in group mean GFP"""
from functools import partial
import logging
from time import time as current_time
from typing import List, Sequence, Tuple
from warnings import warn

import numpy as np

from .. import _text
from .._exceptions import DimensionMismatchError, LowPermutations, SubjectCountMismatch
from .._io.loaders import TrialSetLoader, check_files_exist, is_path
from .clusters import Cluster, _difference, cluster_correction, row0_clusters
from .parallel import get_parallel_map
from .permutation import random_seeds, within_subject_permutation
from .stats import MIN_RECOMMENDED_SAMPLES, empirical_p, gfp as gfp_func


def _subject_worker(args, n_perm, loader, gfp, verbose):
    "Permutation distribution for one subject"
    i, a, b, seed = args
    logger = logging.getLogger(__name__)
    logger.log(logging.INFO if verbose else logging.DEBUG, "Working on subject %i", i + 1)
    if loader is not None:
        if is_path(a):
            a = loader.load(a)
        if is_path(b):
            b = loader.load(b)
    return within_subject_permutation(a, b, n_perm, np.random.RandomState(seed), gfp)


def unbalanced_permutation_gfp(
        a: Sequence,
        b: Sequence,
        n_perm: int = 2000,
        loader: TrialSetLoader = None,
        rng=None,
        parallel=None,
        verbose: bool = False,
        gfp=gfp_func,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, List[Tuple[np.ndarray, np.ndarray]]]:
    """Unbalanced permutation test for group mean GFP differences

    Parameters
    ----------
    a, b
        One entry per subject (same subject order in ``a`` and ``b``). Each
        entry is an array ``(n_channels, n_samples, n_trials)`` with the
        trials of that subject for condition A or B. Data should be average
        referenced. With ``loader``, entries can also be paths to data files.
    n_perm
        Number of rows in the permutation distribution (the data as labeled
        is always the first row). The minimum p-value is ``2 / n_perm``.
    loader
        Loader for entries in ``a`` and ``b`` that are file paths. All files
        are checked with :meth:`TrialSetLoader.check` before the computation
        starts.
    rng : None | int | numpy.random.RandomState
        Random number generator (default: numpy's global random state).
    parallel : None | bool | int | str | ParallelMap
        How to distribute subjects over workers (default: see
        :func:`gfpperm.configure`). Results do not depend on this setting.
    verbose
        Log progress for each subject at the INFO level.
    gfp : callable
        Function mapping ``(n_channels, n_samples, n_trials)`` data to a
        ``(n_samples, n_trials)`` GFP array.

    Returns
    -------
    p : array  (n_samples,)
        Two-tailed p-value for obtaining a group mean GFP difference as
        extreme as or more extreme than the observed one, under the null
        hypothesis that the labels A and B are arbitrary.
    a_dist, b_dist : array  (n_perm, n_samples)
        Group mean GFP for condition A and B in each row of the permutation
        distribution.
    subject_dists : list of (array, array)
        ``(a_dist, b_dist)`` permutation distribution for each subject.
    """
    if len(a) != len(b):
        raise SubjectCountMismatch(f"Inputs a and b must have the same number of elements ({len(a)} vs {len(b)})")
    elif len(a) == 0:
        raise ValueError("Need data for at least one subject")
    n_perm = int(n_perm)
    if n_perm < MIN_RECOMMENDED_SAMPLES:
        warn(f"You have requested a relatively small number of permutations ({n_perm}). This is fine for debugging, but for hypothesis testing you should use more.", LowPermutations, stacklevel=2)
    logger = logging.getLogger(__name__)
    level = logging.INFO if verbose else logging.DEBUG

    # check input files before starting
    paths = [item for item in (*a, *b) if is_path(item)]
    if paths:
        if loader is None:
            raise TypeError("Data specified as file paths requires the loader parameter")
        logger.log(level, "Using low-memory loading for %s", _text.n_of(len(paths), 'file'))
        check_files_exist(paths)
        for path in paths:
            loader.check(path)
    shapes = [np.shape(item) for item in (*a, *b) if not is_path(item)]
    if len({shape[1:2] for shape in shapes}) > 1:
        raise DimensionMismatchError.from_shapes("Trial sets have different numbers of samples:", shapes)

    n_subjects = len(a)
    seeds = random_seeds(n_subjects, rng)
    func = partial(_subject_worker, n_perm=n_perm, loader=loader, gfp=gfp, verbose=verbose)
    pmap = get_parallel_map(parallel)
    logger.log(level, "Permuting %s with %r", _text.n_of(n_subjects, 'subject'), pmap)
    subject_dists = pmap.map(func, zip(range(n_subjects), a, b, seeds), "Subjects", ' subjects')
    logger.log(level, "All workers done.")
    shapes = [dist[0].shape for dist in subject_dists]
    if len(set(shapes)) > 1:
        raise DimensionMismatchError.from_shapes("Subjects have different numbers of samples (shape of the permutation distribution for each subject):", shapes)

    a_dist = np.mean([dist[0] for dist in subject_dists], 0)
    b_dist = np.mean([dist[1] for dist in subject_dists], 0)
    diff = a_dist - b_dist
    p = empirical_p(diff, diff[0])
    return p, a_dist, b_dist, subject_dists


def dmax_correction(a_dist, b_dist):
    """Correct for multiple comparisons using a max/min reference distribution

    Parameters
    ----------
    a_dist, b_dist : array  (n_perm, n_samples)
        Group mean GFP distributions for condition A and B, as returned by
        :func:`unbalanced_permutation_gfp`.

    Returns
    -------
    p : array  (n_samples,)
        Corrected p-values. Values larger than 1 are possible and can safely
        be treated as 1.

    Notes
    -----
    Builds a reference distribution of the maximal and the minimal group mean
    GFP difference over the whole time course (rather than one reference
    distribution per sample). For each sample, the proportion of the max
    distribution that is larger than or equal to the actual value and the
    proportion of the min distribution that is smaller than or equal to the
    actual value are computed; the p-value is two times the smaller one.

    Blair, R. C., & Karniski, W. (1993). An alternative method for
    significance testing of waveform difference potentials.
    Psychophysiology, 30(5), 518-524.
    """
    diff = _difference(a_dist, b_dist)
    real = diff[0]
    dmax_dist = diff.max(1)
    dmin_dist = diff.min(1)
    ndmax = np.greater_equal(dmax_dist[None, :], real[:, None]).sum(1)
    ndmin = np.less_equal(dmin_dist[None, :], real[:, None]).sum(1)
    return 2 * np.minimum(ndmax, ndmin) / len(diff)


class UnbalancedPermutation:
    """Unbalanced permutation test for group mean GFP differences

    Parameters
    ----------
    a, b
        One entry per subject (same subject order in ``a`` and ``b``). Each
        entry is an array ``(n_channels, n_samples, n_trials)`` with the
        trials of that subject for condition A or B. With ``loader``, entries
        can also be paths to data files.
    n_perm
        Number of rows in the permutation distribution (the data as labeled
        is always the first row).
    loader
        Loader for entries in ``a`` and ``b`` that are file paths.
    rng : None | int | numpy.random.RandomState
        Random number generator (default: numpy's global random state).
    parallel : None | bool | int | str | ParallelMap
        How to distribute work over workers (default: see
        :func:`gfpperm.configure`).
    verbose
        Log progress at the INFO level.
    times : array  (n_samples,)
        Time points for the samples (only used for reporting clusters).
    gfp : callable
        Function mapping ``(n_channels, n_samples, n_trials)`` data to a
        ``(n_samples, n_trials)`` GFP array (default: standard deviation
        across channels).

    Attributes
    ----------
    p : array  (n_samples,)
        Uncorrected two-tailed p-values (clamped to 1).
    difference : array  (n_samples,)
        Observed group mean GFP difference, A - B.
    a_dist, b_dist : array  (n_perm, n_samples)
        Group mean GFP permutation distributions.
    subject_dists : list of (array, array)
        Permutation distributions for each subject.

    Examples
    --------
    >>> res = UnbalancedPermutation(a_list, b_list, 2000)
    >>> res.cluster_p(0.05)
    >>> res.dmax_p()
    """
    def __init__(
            self,
            a: Sequence,
            b: Sequence,
            n_perm: int = 2000,
            loader: TrialSetLoader = None,
            rng=None,
            parallel=None,
            verbose: bool = False,
            times: Sequence[float] = None,
            gfp=gfp_func,
    ):
        t0 = current_time()
        p, a_dist, b_dist, subject_dists = unbalanced_permutation_gfp(a, b, n_perm, loader, rng, parallel, verbose, gfp)
        self.dt_perm = current_time() - t0
        if times is not None:
            times = np.asarray(times)
            if times.shape != p.shape:
                raise ValueError(f"times with shape {times.shape} for data with {len(p)} samples")
        self.n_perm = int(n_perm)
        self.n_subjects = len(subject_dists)
        self.times = times
        self.p_uncorrected = p
        self.p = np.minimum(p, 1)
        self.a_dist = a_dist
        self.b_dist = b_dist
        self.subject_dists = subject_dists
        self._parallel = parallel

    def __repr__(self):
        n_samples = self.a_dist.shape[1]
        n_sig = np.sum(self.p < 0.05)
        return f"<UnbalancedPermutation: {_text.n_of(self.n_subjects, 'subject')}, {n_samples} samples, n_perm={self.n_perm}, {n_sig} samples p < .05 (uncorrected)>"

    @property
    def difference(self):
        return self.a_dist[0] - self.b_dist[0]

    def cluster_p(self, alpha=0.05):
        "Cluster-size corrected p-values (see :func:`cluster_correction`)"
        return cluster_correction(self.a_dist, self.b_dist, alpha, self._parallel)

    def clusters(self, alpha=0.05) -> List[Cluster]:
        """Clusters of samples with uncorrected p < ``alpha``

        Returns
        -------
        clusters : list of Cluster
            Clusters with their corrected p-values.
        """
        return row0_clusters(self.a_dist, self.b_dist, alpha, self._parallel)

    def dmax_p(self):
        "Max-statistic corrected p-values, clamped to 1 (see :func:`dmax_correction`)"
        return np.minimum(dmax_correction(self.a_dist, self.b_dist), 1)

    def null_interval(self, alpha=0.05):
        """Middle ``1 - alpha`` of the permutation distribution of the difference

        Returns
        -------
        lower, upper : array  (n_samples,)
            Bounds of the interval for each sample: the
            ``floor(alpha / 2 * n_perm)``-th and the
            ``ceil((1 - alpha / 2) * n_perm)``-th smallest difference (order
            statistics, no interpolation).
        """
        if not 0 < alpha < 1:
            raise ValueError(f"{alpha=}: needs to be between 0 and 1")
        diff = np.sort(self.a_dist - self.b_dist, 0)
        n = len(diff)
        i_lower = max(int(np.floor(alpha / 2 * n)) - 1, 0)
        i_upper = min(int(np.ceil((1 - alpha / 2) * n)) - 1, n - 1)
        return diff[i_lower], diff[i_upper]

    def cluster_times(self, alpha=0.05):
        """Time windows of the clusters

        Returns
        -------
        windows : list of (tstart, tstop, p)
            Time of the first and the last sample of each cluster, and the
            cluster's corrected p-value.
        """
        if self.times is None:
            raise RuntimeError("Test was computed without times")
        return [(self.times[c.start], self.times[c.stop - 1], c.p) for c in self.clusters(alpha)]
