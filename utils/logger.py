"""
ADSTUDIO logging helper.

모든 모듈은 `adstudio.<name>` 네임스페이스 로거를 사용합니다.
"""
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Return the `adstudio.<name>` logger, attaching a stdout handler once.

    Level comes from `level`, then the LOG_LEVEL env var, then DEBUG.
    """
    logger = logging.getLogger(f"adstudio.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        logger.addHandler(handler)
        level_name = (level or os.getenv("LOG_LEVEL", "DEBUG")).upper()
        logger.setLevel(getattr(logging, level_name, logging.DEBUG))
    return logger
