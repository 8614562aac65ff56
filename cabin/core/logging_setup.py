from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"
_HANDLER_NAME = "cabin-console"


def setup_logging(level_name: str = "INFO") -> None:
    """Attach a single stdout handler to the root logger.

    Safe to call more than once (app factory runs per test): the handler is
    only added the first time, later calls just adjust the level.
    """
    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            return

    ch = logging.StreamHandler(sys.stdout)
    ch.set_name(_HANDLER_NAME)
    ch.setFormatter(logging.Formatter(_FORMAT, _DATEFMT))
    ch.setLevel(level)
    root.addHandler(ch)

    logging.getLogger(__name__).info("Logging initialized at %s", logging.getLevelName(level))
