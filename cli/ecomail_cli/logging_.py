from __future__ import annotations

import logging

_FORMAT = "%(levelname)s %(name)s: %(message)s"


def levels_for(verbosity: int) -> dict[str, int]:
    """Logger levels for a ``-v`` count.

    ``-v`` shows one httpx line per request plus the CLI's own debug output;
    ``-vv`` adds httpcore connection traces.
    """
    return {
        "": logging.WARNING,
        "ecomail_cli": logging.DEBUG if verbosity >= 1 else logging.WARNING,
        "httpx": logging.INFO if verbosity >= 1 else logging.WARNING,
        "httpcore": logging.DEBUG if verbosity >= 2 else logging.WARNING,
    }


def setup_logging(verbosity: int) -> None:
    logging.basicConfig(level=logging.WARNING, format=_FORMAT)
    for name, level in levels_for(verbosity).items():
        logging.getLogger(name).setLevel(level)
