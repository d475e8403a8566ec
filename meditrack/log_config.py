"""Operational logging setup."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once per process.

    Parameters
    ----------
    level : str, default="INFO"
        Root log level name.

    Returns
    -------
    None
        Installs a stream handler when none is configured.
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("meditrack").setLevel(level.upper())
