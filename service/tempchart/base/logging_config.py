"""Logging setup shared by the HTTP service and the data updater.

Entry points import this module once, before anything logs:

from service.tempchart.base import logging_config as _  # configure logging

TEMPCHART_LOG_LEVEL takes any standard level name (DEBUG, INFO, WARNING, ...).
"""

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def level_from_env(default: int = logging.INFO) -> int:
    name = os.environ.get("TEMPCHART_LOG_LEVEL", "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    # Unknown names come back as the string "Level <name>".
    return level if isinstance(level, int) else default


logging.basicConfig(level=level_from_env(), format=LOG_FORMAT)
# Connection pool messages of every data source request are noise at INFO.
logging.getLogger("urllib3").setLevel(logging.WARNING)
