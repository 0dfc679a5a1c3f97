"""Logging for preflow.

All package loggers hang below one ``preflow`` logger that owns the only
handler. Two levels of detail matter in practice:

- ``preflow.algorithms.*`` logs residual-graph construction, engine
  initialization, every push, relabel and augmenting path, and engine
  completion, all at DEBUG. Per-step messages are formatted only when DEBUG is
  enabled for the engine module.
- ``preflow.algorithms.max_flow`` logs one DEBUG line per ``calc_max_flow``
  call with the algorithm used and the flow value.

``enable_debug_logging`` turns on DEBUG for the whole package.
``enable_solver_trace`` turns it on for the ``preflow.algorithms`` subtree
only, so step traces can be watched while the rest of the package stays at
its configured level.
"""

import logging
import sys
from typing import Optional

_ROOT_LOGGER_NAME = "preflow"
_SOLVER_LOGGER_NAME = "preflow.algorithms"
_DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_root_configured = False


def setup_root_logger(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Install the single ``preflow`` handler.

    Only the first call after import or ``reset_logging()`` has an effect.

    Args:
        level: Level of the ``preflow`` logger.
        format_string: Record format; defaults to time, logger, level, message.
        handler: Destination; defaults to a stdout ``StreamHandler``.
    """
    global _root_configured
    if _root_configured:
        return

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.handlers.clear()

    handler = handler or logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or _DEFAULT_FORMAT))
    root.addHandler(handler)
    # pytest's caplog listens on the interpreter root logger
    root.propagate = True

    _root_configured = True


def get_logger(name: str) -> logging.Logger:
    """Return the module logger ``name``, inheriting level and handler from ``preflow``."""
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the ``preflow`` logger and of its handlers."""
    setup_root_logger()
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)


def enable_debug_logging() -> None:
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    set_global_log_level(logging.INFO)


def enable_solver_trace() -> None:
    """Log residual builds, pushes, relabels and augmentations at DEBUG.

    Only the ``preflow.algorithms`` subtree is lowered to DEBUG. Handlers on
    the ``preflow`` logger are opened to DEBUG so the records get through;
    other package loggers still filter on their own level.
    """
    setup_root_logger()
    logging.getLogger(_SOLVER_LOGGER_NAME).setLevel(logging.DEBUG)
    for handler in logging.getLogger(_ROOT_LOGGER_NAME).handlers:
        if handler.level > logging.DEBUG:
            handler.setLevel(logging.DEBUG)


def disable_solver_trace() -> None:
    """Let the engines inherit the package level again."""
    logging.getLogger(_SOLVER_LOGGER_NAME).setLevel(logging.NOTSET)


def reset_logging() -> None:
    """Drop the handler and all level overrides so setup runs again."""
    global _root_configured
    _root_configured = False

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    logging.getLogger(_SOLVER_LOGGER_NAME).setLevel(logging.NOTSET)


setup_root_logger()
