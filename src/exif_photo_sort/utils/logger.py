"""Logging helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def get_logger(name: str, log_file: Optional[Path] = None) -> logging.Logger:
    logger = logging.getLogger(f"exif_photo_sort.{name}")
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)

    log_path = log_file or (Path.cwd() / "exif-photo-sort-error.log")
    formatter = logging.Formatter(LOG_FORMAT)

    # delay: the file only appears once something worth keeping is logged
    file_handler = logging.FileHandler(log_path, encoding="utf-8", delay=True)
    file_handler.setLevel(logging.WARNING)
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.INFO)
    stream_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(stream_handler)
    logger.propagate = False

    return logger
