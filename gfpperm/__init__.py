"""Unbalanced permutation tests for differences in EEG global field power.

The test compares the group mean GFP between two conditions in which subjects
contribute different numbers of trials, building the null distribution by
relabeling trials within each subject. Uncorrected p-values can be corrected
for multiple comparisons with :func:`cluster_correction` and
:func:`dmax_correction`.
"""
from ._config import configure
from ._stats.clusters import Cluster, cluster_correction
from ._stats.parallel import ParallelMap, ProcessMap, SequentialMap, ThreadMap
from ._stats.permutation import within_subject_permutation
from ._stats.stats import empirical_p, gfp
from ._stats.testnd import UnbalancedPermutation, dmax_correction, unbalanced_permutation_gfp
from ._utils import set_log_level

from . import datasets
from . import load
from . import testnd


__version__ = '0.1.0'
