# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

from .config import CFG


def get_logger(name: str, show_time: bool = False) -> logging.Logger:
    """
    Return a logger with unified seqrun formatting.

    Messages are rendered by rich's RichHandler on stderr. Debug mode
    (enabled by the `SEQRUN_DEBUG` environment variable) lowers the level
    to DEBUG and always shows timestamps.

    Args:
        name (str): Name of the logger, typically `__name__`.
        show_time (bool): Show timestamps even outside of debug mode.

    Returns:
        logging.Logger: The configured logger.
    """
    logger = logging.getLogger(name)

    debug_mode = os.environ.get(CFG.env_vars.debug_mode) is not None
    level = logging.DEBUG if debug_mode else logging.INFO
    logger.setLevel(level)

    # the same module may ask for its logger repeatedly
    for handler in logger.handlers:
        if isinstance(handler, RichHandler):
            handler.setLevel(level)
            return logger

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        show_level=True,
        show_time=show_time or debug_mode,
        log_time_format=CFG.date_formats.standard,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False

    return logger
