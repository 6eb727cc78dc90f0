"""Logging setup for the snaprestore CLI."""

from __future__ import annotations

import logging

PACKAGE_LOGGER = "snaprestore"

# Library loggers that flood the output at DEBUG; held at WARNING unless verbose.
NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")

_TERSE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_VERBOSE_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(funcName)s] %(message)s"


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Initialise the root logger for a restore or export run.

    ``verbose`` turns on per-record DEBUG lines from snaprestore and adds the
    emitting function to each line. Third-party loggers stay at WARNING either
    way so SQL echo never mixes into the report. Pass ``force=True`` to
    reconfigure during tests.
    """

    logging.basicConfig(
        level=logging.INFO,
        format=_VERBOSE_FORMAT if verbose else _TERSE_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.INFO)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
