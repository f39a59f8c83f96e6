"""Structured (JSON) logging for the user service."""

from typing import Optional, Union
import logging

from pythonjsonlogger.json import JsonFormatter

FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'


def setup_logger(level: Union[int, str] = logging.INFO,
                 logfile: Optional[str] = None,
                 json: bool = True) -> None:
    """
    Configure the root logger.

    Parameters
    ----------
    level : int or str
        Log level, e.g. ``20`` or ``'INFO'``.
    logfile : str or None
        If provided, log to this file instead of stderr.
    json : bool
        Emit one JSON object per record rather than plain text.

    """
    if logfile:
        handler: logging.Handler = logging.FileHandler(logfile)
    else:
        handler = logging.StreamHandler()
    if json:
        formatter: logging.Formatter = JsonFormatter(
            FORMAT,
            rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
        )
    else:
        formatter = logging.Formatter(FORMAT)
    handler.setFormatter(formatter)

    logger = logging.getLogger()
    logger.addHandler(handler)
    logger.setLevel(int(level) if str(level).isdigit() else level)
