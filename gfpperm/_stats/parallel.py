"""Order-preserving maps over independent tasks"""
import logging
from multiprocessing.pool import ThreadPool
import os

from .._config import CONFIG, PARALLEL_BACKENDS, mpc
from .._utils import restore_main_spec, tqdm


class ParallelMap:
    """Apply a function to each item, returning results in input order

    Parameters
    ----------
    n_workers : int
        Number of workers.
    """
    kind = None

    def __init__(self, n_workers=1):
        self.n_workers = int(n_workers)

    def __repr__(self):
        return f"<{self.__class__.__name__}: {self.n_workers} workers>"

    def _imap(self, func, items, chunksize):
        raise NotImplementedError

    def map(self, func, items, desc=None, unit=None, chunksize=1):
        """Apply ``func`` to each item

        Parameters
        ----------
        func : callable
            Function with one argument.
        items : sequence
            Items to process.
        desc : str
            Description for the progress bar.
        unit : str
            Unit for the progress bar.
        chunksize : int
            Number of items sent to a worker at once.

        Returns
        -------
        results : list
            ``func(item)`` for each item, in the order of ``items``.
        """
        items = list(items)
        logger = logging.getLogger(__name__)
        logger.debug("%r: %i tasks", self, len(items))
        iterator = self._imap(func, items, chunksize)
        return list(tqdm(iterator, desc, len(items), unit=unit, disable=CONFIG['tqdm'] or desc is None))


class SequentialMap(ParallelMap):
    "Process all items in the calling thread"
    kind = 'sequential'

    def __init__(self):
        ParallelMap.__init__(self, 1)

    def _imap(self, func, items, chunksize):
        return map(func, items)


class ThreadMap(ParallelMap):
    "Process items in a pool of threads"
    kind = 'thread'

    def _imap(self, func, items, chunksize):
        with ThreadPool(self.n_workers) as pool:
            yield from pool.imap(func, items, chunksize)


def _init_process():
    if CONFIG['nice']:
        os.nice(CONFIG['nice'])


class ProcessMap(ParallelMap):
    "Process items in a pool of worker processes (``func`` and items need to be pickleable)"
    kind = 'process'

    def _imap(self, func, items, chunksize):
        restore_main_spec()
        with mpc.Pool(self.n_workers, _init_process) as pool:
            yield from pool.imap(func, items, chunksize)


def get_parallel_map(parallel=None):
    """Find the map to use for a computation

    Parameters
    ----------
    parallel : None | bool | int | str | ParallelMap
        ``None`` to use the session configuration (see
        :func:`gfpperm.configure`); ``False`` to compute sequentially; an int
        to use that many workers of the configured kind; ``'thread'`` or
        ``'process'`` to use the configured number of workers of that kind.
    """
    if isinstance(parallel, ParallelMap):
        return parallel
    elif parallel is None or parallel is True:
        n_workers = CONFIG['n_workers']
        kind = CONFIG['parallel']
    elif parallel is False:
        n_workers = 0
        kind = None
    elif isinstance(parallel, int):
        n_workers = parallel
        kind = CONFIG['parallel']
    elif parallel in PARALLEL_BACKENDS:
        n_workers = CONFIG['n_workers'] or 1
        kind = parallel
    else:
        raise ValueError(f"{parallel=}")

    if n_workers < 1:
        return SequentialMap()
    elif kind == 'process':
        return ProcessMap(n_workers)
    else:
        return ThreadMap(n_workers)
