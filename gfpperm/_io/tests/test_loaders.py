import pickle

import mne
import numpy as np
from numpy.testing import assert_allclose
import pytest
from scipy.io import savemat

from gfpperm import load
from gfpperm._exceptions import DataFileNotFound, FieldNotFound
from gfpperm._io.loaders import check_files_exist, is_path


def test_mat_loader(tmp_path):
    "Test load.MatLoader"
    rng = np.random.RandomState(0)
    x = rng.normal(0, 1, (4, 15, 6))
    path = tmp_path / 'data.mat'
    savemat(str(path), {'EEG': {'data': x, 'srate': 100.}, 'd': x})

    loader = load.MatLoader(('EEG', 'data'))
    assert loader.fields == ('EEG', 'data')
    assert_allclose(loader.load(path), x)
    assert_allclose(load.MatLoader('d').load(str(path)), x)
    assert load.MatLoader('d').fields == ('d',)
    assert load.MatLoader(['d']) == load.MatLoader('d')
    # pickleable for worker processes
    assert pickle.loads(pickle.dumps(loader)) == loader

    # field path does not resolve
    with pytest.raises(FieldNotFound) as exc_info:
        load.MatLoader(('EEG', 'signal')).load(path)
    assert "'signal'" in str(exc_info.value)
    assert "'data'" in str(exc_info.value)
    with pytest.raises(FieldNotFound):
        load.MatLoader(('d', 'data')).load(path)
    with pytest.raises(ValueError):
        load.MatLoader(())

    # check without loading
    loader.check(path)
    load.MatLoader('d').check(str(path))
    with pytest.raises(FieldNotFound):
        load.MatLoader(('EEG', 'signal')).check(path)

    # missing file
    with pytest.raises(DataFileNotFound):
        loader.load(tmp_path / 'missing.mat')
    with pytest.raises(DataFileNotFound):
        loader.check(tmp_path / 'missing.mat')


def test_epochs_loader(tmp_path):
    "Test load.EpochsLoader"
    rng = np.random.RandomState(1)
    x = rng.normal(0, 1e-6, (5, 3, 20))  # (n_trials, n_channels, n_samples)
    info = mne.create_info(['Fz', 'Cz', 'Pz'], 100., 'eeg')
    epochs = mne.EpochsArray(x, info, verbose=False)
    path = tmp_path / 'test-epo.fif'
    epochs.save(path, verbose=False)

    data = load.EpochsLoader().load(path)
    assert data.shape == (3, 20, 5)
    assert_allclose(data[:, :, 2], x[2], rtol=1e-6)
    data = load.EpochsLoader(['Cz']).load(path)
    assert data.shape == (1, 20, 5)
    load.EpochsLoader().check(path)
    with pytest.raises(DataFileNotFound):
        load.EpochsLoader().check(tmp_path / 'missing-epo.fif')


def test_check_files_exist(tmp_path):
    "Test check_files_exist()"
    path = tmp_path / 'exists.mat'
    path.write_bytes(b'')
    check_files_exist([path, str(path)])
    with pytest.raises(DataFileNotFound):
        check_files_exist([path, tmp_path / 'missing.mat'])
    # directory is not a data file
    with pytest.raises(DataFileNotFound):
        check_files_exist([tmp_path])
    assert is_path(path)
    assert is_path('file.mat')
    assert not is_path(np.zeros(3))
