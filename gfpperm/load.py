"""Loaders for reading trial sets from files one subject at a time

:class:`MatLoader`:
    MATLAB ``*.mat`` files and EEGLAB ``*.set`` files (using pymatreader).

:class:`EpochsLoader`:
    MNE-Python ``*-epo.fif`` files.

"""
from ._io.loaders import TrialSetLoader, MatLoader, EpochsLoader
