"""
Logging setup for the Library API.

Application modules log through ``library_api.*`` loggers and uvicorn
through ``uvicorn``, ``uvicorn.error`` and ``uvicorn.access``.
``setup_logging`` sends all of them to the same root handlers with one
format, so access lines and loan events read alike in the console and
in the optional log file.  ``run.py`` starts uvicorn with
``log_config=None`` so uvicorn keeps this setup instead of installing
its own.
"""

import logging
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER_NAME = "library_api.console"
FILE_HANDLER_NAME = "library_api.file"

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the ``library_api`` and uvicorn loggers.

    Safe to call more than once: the console and file handlers are
    named and added only if the root logger does not carry them yet,
    while the levels are reapplied on every call.

    Parameters
    ----------
    level : str
        Level name (``"DEBUG"``, ``"INFO"`` ...) for ``library_api``
        and uvicorn loggers.  Unknown names fall back to INFO.
    logfile : Optional[str]
        Also write to this file when given.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger()
    installed = {handler.get_name() for handler in root.handlers}
    if CONSOLE_HANDLER_NAME not in installed:
        console_handler = logging.StreamHandler()
        console_handler.set_name(CONSOLE_HANDLER_NAME)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
    if logfile and FILE_HANDLER_NAME not in installed:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.set_name(FILE_HANDLER_NAME)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    root.setLevel(numeric_level)

    logging.getLogger("library_api").setLevel(numeric_level)

    # uvicorn loggers keep no handlers of their own and hand every
    # record to the root handlers above.
    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
        uvicorn_logger.setLevel(numeric_level)
