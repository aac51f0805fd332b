"""로거 설정"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(name)-24s | %(levelname)-8s | %(message)s"


def get_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """fum_ai.<name> 로거 (stdout 핸들러 1개)"""
    logger = logging.getLogger(f"fum_ai.{name}")

    if level is not None:
        logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def set_level(level: int | str) -> None:
    """fum_ai 전체 로그 레벨 설정 (FUM_LOG_LEVEL)"""
    logging.getLogger("fum_ai").setLevel(level)
