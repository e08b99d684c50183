"""Centralized logging configuration"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
HANDLER_NAME = "image_toolkit_console"


def setup_logger(level: str | None = None) -> logging.Logger:
    """Attach a console handler to the root logger once.

    The level comes from ``level`` or ``IMAGE_TOOLKIT_LOG_LEVEL`` (default INFO).
    """
    root = logging.getLogger()
    level_name = (level or os.environ.get("IMAGE_TOOLKIT_LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    # Avoid adding handlers multiple times
    if not any(h.get_name() == HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler.set_name(HANDLER_NAME)
        root.addHandler(handler)

    return root
