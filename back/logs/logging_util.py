"""
로깅 유틸리티 - 싱글톤 로거 관리
"""
import logging
import os
import sys
from typing import Optional


def _resolve_level(level: Optional[int]) -> int:
    """명시적 레벨이 없으면 LOG_LEVEL 환경변수를 따른다 (기본값: INFO)"""
    if level is not None:
        return level
    value = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return value if isinstance(value, int) else logging.INFO


class LoggerSingleton:
    """
    싱글톤 패턴의 로거 팩토리
    """
    _loggers: dict[str, logging.Logger] = {}
    _formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    @classmethod
    def get_logger(cls, logger_name: str = "app", level: Optional[int] = None) -> logging.Logger:
        """
        지정된 이름의 로거를 반환합니다. 이미 생성된 경우 기존 로거를 반환합니다.

        Args:
            logger_name: 로거 이름 (booking, appointment, counselor 등 기능 단위)
            level: 로그 레벨 (None이면 LOG_LEVEL 환경변수)

        Returns:
            logging.Logger: 설정된 로거 인스턴스
        """
        if logger_name in cls._loggers:
            return cls._loggers[logger_name]

        resolved = _resolve_level(level)
        logger = logging.getLogger(logger_name)
        logger.setLevel(resolved)

        # 핸들러가 없는 경우에만 추가 (중복 방지)
        if not logger.handlers:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(resolved)
            console_handler.setFormatter(cls._formatter)
            logger.addHandler(console_handler)

        cls._loggers[logger_name] = logger
        return logger
