"""
로깅 설정
"""
import logging
import sys

from picassofier.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(threadName)s): %(message)s"


def setup_logger(name: str = settings.APP_NAME, level: str = settings.LOG_LEVEL) -> logging.Logger:
    """애플리케이션 로거 생성 (핸들러 중복 등록 방지)"""
    _logger = logging.getLogger(name)
    if not _logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        _logger.addHandler(handler)
    _logger.setLevel(level.upper())
    return _logger


logger = setup_logger()
