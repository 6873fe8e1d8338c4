"""
Synacor VM - Logging Setup

One place to configure the ``synacor_vm`` logger tree for the CLI:

  console  rich.logging.RichHandler on stderr, level picked from -v count
  file     optional, ``<log_dir>/<name>_YYYYMMDD_HHMMSS.log``, DEBUG+

Verbosity (the `run` subcommand's -v flag):

  (none)   WARNING   faults, exhausted step budgets
  -v       INFO      program loaded, halts, replay saves
  -vv      DEBUG     one record per executed instruction

The logger level is the lowest level any handler keeps, so the machine's
per-instruction DEBUG records are never formatted for nobody.

Library modules never call this; they only do
``log = logging.getLogger(__name__)`` and stay silent until an
application configures handlers.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

LOG_NAME = "synacor_vm"

FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
PLAIN_FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"


def verbosity_level(verbose: int) -> int:
    """Console level for a -v count."""
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


def reset_logging(name: str = LOG_NAME):
    """Detach and close every handler setup_logging installed on ``name``."""
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def setup_logging(
    name: str = LOG_NAME,
    verbose: int = 0,
    log_dir: Optional[Union[str, Path]] = None,
    rich_console: bool = True,
) -> logging.Logger:
    """
    Configure and return a logger.

    A second call replaces the handlers of the first, so the latest
    verbosity and log directory always win.

    Log files: ``<log_dir>/<name>_YYYYMMDD_HHMMSS.log``
    """
    reset_logging(name)
    logger = logging.getLogger(name)
    console_level = verbosity_level(verbose)
    logger.setLevel(logging.DEBUG if log_dir is not None else console_level)

    # ── File handler: captures everything (DEBUG+) ──
    log_file = None
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"{name}_{ts}.log"
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(fh)

    # ── Console handler ──
    if rich_console:
        ch = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
        )
    else:
        ch = logging.StreamHandler(sys.stderr)
        ch.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%H:%M:%S"))
    ch.setLevel(console_level)
    logger.addHandler(ch)

    logger.info("Logger initialized: %s (console %s)", name,
                logging.getLevelName(console_level))
    if log_file is not None:
        logger.info("Log file: %s", log_file)

    return logger
