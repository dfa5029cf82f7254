# config/logging_config.py

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Root logger'ı bir kez ayarlar. Modüller logging.getLogger(__name__) kullanır.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    # mysql-connector DEBUG'da çok gürültülü
    logging.getLogger("mysql.connector").setLevel(max(numeric_level, logging.WARNING))
