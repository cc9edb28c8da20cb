# nextpint_backend/app/utils/logs.py
from __future__ import annotations

import logging

from nextpint_backend.app.config.manifest import LOG_LEVEL


def get_logger(name: str) -> logging.Logger:
    """
    Named logger under the "nextpint." namespace.
    Attaches a stream handler once so CLI/test runs print without extra setup.
    """
    log = logging.getLogger(f"nextpint.{name}")
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        log.addHandler(handler)
        log.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    return log
