"""Permutation tests and corrections for multiple comparisons on GFP time courses"""
__test__ = False
from ._stats.testnd import UnbalancedPermutation, unbalanced_permutation_gfp, dmax_correction
from ._stats.clusters import cluster_correction
from ._stats.permutation import within_subject_permutation
from ._stats.stats import empirical_p
