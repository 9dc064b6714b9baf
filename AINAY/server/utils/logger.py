from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from AINAY.server.utils.constants import LOGS_PATH

LOGGER_NAME = "AINAY"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILENAME = "ainay_interactions.log"


# -----------------------------------------------------------------------------
def build_logger(name: str = LOGGER_NAME) -> logging.Logger:
    instance = logging.getLogger(name)
    if instance.handlers:
        return instance
    instance.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(formatter)
    instance.addHandler(console)

    try:
        os.makedirs(LOGS_PATH, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(LOGS_PATH, LOG_FILENAME),
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
    except OSError:
        # read-only installs log to the console only
        return instance
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    instance.addHandler(file_handler)
    return instance


logger = build_logger()
