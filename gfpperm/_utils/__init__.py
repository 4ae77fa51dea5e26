from .basic import (
    tqdm,
    as_sequence, log_level, set_log_level, ScreenHandler,
)
from .system import IS_OSX, IS_WINDOWS, restore_main_spec
