# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Centralised logging configuration.

Levels, handlers, rotation and format live in etc/logging.conf.  The file
carries a ``%(log_file)s`` placeholder which is resolved here before the
text is handed to the standard-library fileConfig loader.

The log directory defaults to <project>/log and can be moved with the
ZAMANIX_LOG_DIR environment variable (containers mount a volume there).

Usage:
    from core.logger import logger               # "zamanix"
    from core.logger import get_logger
    log = get_logger("auth")                     # "zamanix.auth"
"""

import configparser
import logging
import logging.config
import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_LOGGING_CONF = _PROJECT_ROOT / "etc" / "logging.conf"
_ROOT_NAME = "zamanix"


def _log_file() -> Path:
    log_dir = Path(os.environ.get("ZAMANIX_LOG_DIR", _PROJECT_ROOT / "log"))
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "app.log"


def _configure() -> None:
    if not _LOGGING_CONF.is_file():
        # Bare checkout without etc/: stay usable, log to stderr only
        logging.basicConfig(level=logging.INFO)
        return

    raw = _LOGGING_CONF.read_text(encoding="utf-8")
    raw = raw.replace("%(log_file)s", str(_log_file()))

    # RawConfigParser: the format strings hold %(asctime)s etc. which the
    # interpolating parser would choke on.
    parser = configparser.RawConfigParser()
    parser.read_string(raw)
    logging.config.fileConfig(parser, disable_existing_loggers=False)


_configure()

logger = logging.getLogger(_ROOT_NAME)


def get_logger(name: str) -> logging.Logger:
    return logger.getChild(name)
