import logging
import multiprocessing

import pytest

from gfpperm import configure, set_log_level
from gfpperm._config import CONFIG
from gfpperm._utils import ScreenHandler, log_level


def test_configure():
    "Test configure()"
    old = dict(CONFIG)
    try:
        configure(n_workers=False)
        assert CONFIG['n_workers'] == 0
        configure(n_workers=True)
        assert CONFIG['n_workers'] == multiprocessing.cpu_count()
        configure(n_workers=1)
        assert CONFIG['n_workers'] == 1
        with pytest.raises(ValueError):
            configure(n_workers=-multiprocessing.cpu_count())
        with pytest.raises(TypeError):
            configure(n_workers='all')
        configure(parallel='process')
        assert CONFIG['parallel'] == 'process'
        with pytest.raises(ValueError):
            configure(parallel='cluster')
        # values are not changed when an argument is invalid
        with pytest.raises(ValueError):
            configure(n_workers=False, parallel='cluster')
        assert CONFIG['n_workers'] == 1
        with pytest.raises(ValueError):
            configure(nice=20)
        configure(tqdm=False)
        assert CONFIG['tqdm'] is True
        configure(tqdm=True)
        assert CONFIG['tqdm'] is False
    finally:
        configure(n_workers=old['n_workers'], parallel=old['parallel'], tqdm=not old['tqdm'])


def test_logging():
    "Test logging configuration"
    logger = logging.getLogger('gfpperm')
    configure(log=True)
    try:
        handler = CONFIG['log']
        assert isinstance(handler, ScreenHandler)
        assert handler in logger.handlers
        assert logger.level == logging.DEBUG
    finally:
        configure(log=False)
    assert handler not in logger.handlers
    assert CONFIG['log'] is False

    set_log_level('warning')
    assert logger.level == logging.WARNING
    set_log_level(logging.NOTSET)
    assert log_level('info') == logging.INFO
    with pytest.raises(ValueError):
        log_level('loud')
    with pytest.raises(TypeError):
        log_level(1.5)
