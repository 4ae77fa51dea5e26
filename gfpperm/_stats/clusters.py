"""Cluster size correction for multiple comparisons

Reference: Bullmore, E. T., Suckling, J., Overmeyer, S., Rabe-Hesketh, S.,
Taylor, E., & Brammer, M. J. (1999). Global, voxel, and cluster tests, by
theory and permutation, for a difference between two groups of structural MR
images of the brain. IEEE Trans Med Imaging, 18(1), 32-42.
"""
from dataclasses import dataclass
from functools import partial
import logging
from typing import List

import numpy as np
from scipy import ndimage

from .._exceptions import SizeMismatch
from .parallel import get_parallel_map
from .stats import FLOAT64, SortedDistribution, empirical_p


@dataclass
class Cluster:
    "Contiguous run of samples with p < alpha in the data as labeled"
    start: int
    stop: int  # exclusive
    p: float = 1.

    @property
    def size(self) -> int:
        return self.stop - self.start


def find_runs(bin_map):
    """Find runs of consecutive ``True`` values

    Parameters
    ----------
    bin_map : array of bool  (n,)
        Binary map.

    Returns
    -------
    starts : array of int
        Index of the first sample in each run.
    stops : array of int
        Index after the last sample in each run.
    """
    bin_map = np.asarray(bin_map, bool)
    cmap, n = ndimage.label(bin_map)
    if n == 0:
        empty = np.array((), int)
        return empty, empty
    slices = ndimage.find_objects(cmap)
    starts = np.array([s.start for s, in slices])
    stops = np.array([s.stop for s, in slices])
    return starts, stops


def max_run_length(bin_map):
    "Length of the longest run of ``True`` values (0 if there is none)"
    cmap, n = ndimage.label(bin_map)
    if n == 0:
        return 0
    return int(np.bincount(cmap.ravel())[1:].max())


def _difference(a_dist, b_dist):
    a_dist = np.asarray(a_dist, FLOAT64)
    b_dist = np.asarray(b_dist, FLOAT64)
    if a_dist.shape != b_dist.shape:
        raise SizeMismatch(f"Distributions for A {a_dist.shape} and B {b_dist.shape} have different shapes")
    elif a_dist.ndim != 2:
        raise SizeMismatch(f"Distributions with shape {a_dist.shape}: need to be (n_perm, n_samples)")
    return a_dist - b_dist


def _row_max_cluster_size(i, sorted_dist, diff, alpha):
    p = sorted_dist.p(diff[i])
    return max_run_length(p < alpha)


def row0_clusters(a_dist, b_dist, alpha=0.05, parallel=None) -> List[Cluster]:
    """Clusters in the data as labeled, with corrected p-values

    Parameters
    ----------
    a_dist, b_dist : array  (n_perm, n_samples)
        Group mean GFP distributions for condition A and B (row 0 is the data
        as labeled).
    alpha : scalar
        Uncorrected p-value for including a sample in a cluster.
    parallel : None | bool | int | str | ParallelMap
        How to compute the cluster size distribution (see
        :func:`get_parallel_map`).

    Returns
    -------
    clusters : list of Cluster
        Clusters in the order in which they occur.
    """
    logger = logging.getLogger(__name__)
    diff = _difference(a_dist, b_dist)
    # clusters in the actual data
    p = empirical_p(diff, diff[0])
    starts, stops = find_runs(p < alpha)
    if len(starts) == 0:
        logger.debug("No samples with p < %s, skipping cluster size distribution", alpha)
        return []
    logger.debug("Found %i clusters, computing cluster size distribution", len(starts))

    # null distribution of maximum cluster size, including row 0
    sorted_dist = SortedDistribution(diff)
    func = partial(_row_max_cluster_size, sorted_dist=sorted_dist, diff=diff, alpha=alpha)
    n_perm = len(diff)
    pmap = get_parallel_map(parallel)
    max_sizes = np.array(pmap.map(func, range(n_perm), "Cluster sizes", ' permutations', chunksize=max(1, n_perm // 100)))
    clusters = []
    for start, stop in zip(starts, stops):
        cluster_p = np.mean(max_sizes >= stop - start)
        clusters.append(Cluster(int(start), int(stop), float(cluster_p)))
    return clusters


def cluster_correction(a_dist, b_dist, alpha=0.05, parallel=None):
    """Correct for multiple comparisons using the cluster size correction

    Parameters
    ----------
    a_dist, b_dist : array  (n_perm, n_samples)
        Group mean GFP distributions for condition A and B, as returned by
        :func:`unbalanced_permutation_gfp`.
    alpha : scalar
        Uncorrected p-value for including a sample in a cluster.
    parallel : None | bool | int | str | ParallelMap
        How to compute the cluster size distribution (see
        :func:`get_parallel_map`).

    Returns
    -------
    p : array  (n_samples,)
        Corrected p-value for each sample. All samples in a cluster share the
        cluster's p-value, samples outside of clusters have p = 1.

    Notes
    -----
    For every row of the distribution, uncorrected p-values are computed
    against the whole distribution, and the size of the largest run of
    p < ``alpha`` is recorded. A cluster in row 0 receives the proportion of
    rows (including row 0) whose largest cluster is at least as large.
    """
    diff = _difference(a_dist, b_dist)
    out = np.ones(diff.shape[1])
    for cluster in row0_clusters(a_dist, b_dist, alpha, parallel):
        out[cluster.start:cluster.stop] = cluster.p
    return out
