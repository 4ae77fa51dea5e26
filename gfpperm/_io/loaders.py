"""Load trial sets from files

Loaders allow running a test on more data than fits into memory: files are
loaded one subject at a time, right before the permutations for that subject
are computed.
"""
from dataclasses import dataclass
import logging
from os import PathLike
from pathlib import Path
from typing import Any, Iterable, Sequence, Tuple, Union

import mne
import numpy as np
from pymatreader import read_mat

from .._exceptions import DataFileNotFound, FieldNotFound
from .._utils import as_sequence


PathArg = Union[str, PathLike]


def is_path(item: Any) -> bool:
    return isinstance(item, (str, PathLike))


def check_files_exist(paths: Iterable[PathArg]):
    "Raise DataFileNotFound for the first path that does not point to a file"
    for path in paths:
        if not Path(path).expanduser().is_file():
            raise DataFileNotFound(f"File {path} could not be found.")


class TrialSetLoader:
    "Base class for loading a trial set ``(n_channels, n_samples, n_trials)`` from a file"

    @staticmethod
    def _path(path: PathArg) -> Path:
        path = Path(path).expanduser()
        if not path.is_file():
            raise DataFileNotFound(f"File {path} could not be found.")
        return path

    def check(self, path: PathArg):
        """Raise an error if ``path`` can not be loaded

        Called for every file before any computation starts. The base class
        only checks that the file exists.
        """
        path = self._path(path)
        self._check(path)

    def _check(self, path: Path):
        pass

    def load(self, path: PathArg) -> np.ndarray:
        path = self._path(path)
        logger = logging.getLogger(__name__)
        logger.debug("Loading %s", path)
        return self._load(path)

    def _load(self, path: Path) -> np.ndarray:
        raise NotImplementedError


@dataclass(frozen=True)
class MatLoader(TrialSetLoader):
    """Load trials from a MATLAB file (``*.mat`` or EEGLAB ``*.set``)

    Parameters
    ----------
    fields
        Path to the data inside the file, e.g. ``'data'`` for a variable
        called ``data``, or ``('EEG', 'data')`` for the data field of an
        EEGLAB ``EEG`` structure.

    Examples
    --------
    >>> loader = MatLoader(('EEG', 'data'))
    >>> x = loader.load('S01_target.set')
    """
    fields: Tuple[str, ...]

    def __init__(self, fields: Union[str, Sequence[str]]):
        fields = as_sequence(fields)
        if not fields:
            raise ValueError(f"{fields=}: need at least one field")
        object.__setattr__(self, 'fields', fields)

    def _check(self, path: Path):
        self._resolve(read_mat(str(path)), path)

    def _load(self, path: Path) -> np.ndarray:
        return np.asarray(self._resolve(read_mat(str(path)), path))

    def _resolve(self, data: dict, path: Path):
        for key in self.fields:
            if not isinstance(data, dict):
                raise FieldNotFound(key, path, ())
            elif key not in data:
                available = [k for k in data if not k.startswith('__')]
                raise FieldNotFound(key, path, available)
            data = data[key]
        return data


@dataclass(frozen=True)
class EpochsLoader(TrialSetLoader):
    """Load trials from an MNE-Python epochs file (``*-epo.fif``)

    Parameters
    ----------
    picks
        Channels to load (see :meth:`mne.Epochs.get_data`; default all EEG
        channels).
    """
    picks: Any = 'eeg'

    def _check(self, path: Path):
        mne.read_epochs(path, preload=False, verbose=False)

    def _load(self, path: Path) -> np.ndarray:
        epochs = mne.read_epochs(path, preload=True, verbose=False)
        x = epochs.get_data(picks=self.picks)  # (n_trials, n_channels, n_samples)
        return np.transpose(x, (1, 2, 0))
