"A few basic operations needed throughout gfpperm"
import logging

from tqdm import tqdm


LOG_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}


def as_sequence(items, item_type=str):
    if isinstance(items, item_type):
        return items,
    return tuple(items)


def log_level(arg):
    """Convert string to logging module constant"""
    if isinstance(arg, int):
        return arg
    elif isinstance(arg, str):
        try:
            return LOG_LEVELS[arg.upper()]
        except KeyError:
            raise ValueError(f"Invalid log level: {arg}. Must be one of {', '.join(LOG_LEVELS)}")
    else:
        raise TypeError(f"Invalid log level: {arg!r}. Need int or str.")


def set_log_level(level, logger_name='gfpperm'):
    """Set the minimum level of messages to be logged

    Parameters
    ----------
    level : str | int
        Level as string (debug, info, warning, error, critical) or
        corresponding constant from the logging module.
    logger_name : str
        Name of the logger for which to set the logging level. The default is
        the gfpperm logger.
    """
    logging.getLogger(logger_name).setLevel(log_level(level))


class ScreenHandler(logging.StreamHandler):
    "Log handler compatible with TQDM"

    def __init__(self, formatter=None):
        logging.StreamHandler.__init__(self)
        if formatter is None:
            formatter = logging.Formatter("%(levelname)-8s:  %(message)s")
        self.setFormatter(formatter)

    def emit(self, record):
        tqdm.write(self.format(record))
