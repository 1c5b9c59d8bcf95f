import logging
import sys

from gradepoint.config.settings import settings

PACKAGE_LOGGER = "gradepoint"
LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
HANDLER_NAME = "gradepoint-stdout"


def _configure(root: logging.Logger) -> None:
    if any(h.get_name() == HANDLER_NAME for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(handler)
    level = logging.getLevelName(settings.log_level)
    root.setLevel(level if isinstance(level, int) else logging.INFO)


def get_logger(module: str = "") -> logging.Logger:
    """Child of the package logger, e.g. ``get_logger("gpa")`` -> ``gradepoint.gpa``."""
    root = logging.getLogger(PACKAGE_LOGGER)
    _configure(root)
    return root.getChild(module) if module else root
