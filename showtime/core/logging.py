# showtime/core/logging.py

import logging
import sys

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """showtime 로거 초기화"""
    logger = logging.getLogger("showtime")
    logger.setLevel(level.upper())

    if not logger.handlers:  # 핸들러 중복 등록 방지
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(handler)

    logger.propagate = False
    return logger
