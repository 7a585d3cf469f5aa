"""
Logging setup.

모듈별 logger는 `logging.getLogger(__name__)`로 얻고,
핸들러/포맷은 진입점에서 여기 한 번만 설정한다.
"""

import logging
from typing import Any

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# 외부 라이브러리 중 요청마다 INFO 로그를 남기는 것들
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3")


def setup_logging(config: dict[str, Any] | None = None) -> None:
    """
    애플리케이션 로깅 초기화.

    Args:
        config: 전체 설정 (logging.level, logging.format 사용)
    """
    log_config = (config or {}).get("logging", {}) or {}
    level_name = str(log_config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format=log_config.get("format") or DEFAULT_LOG_FORMAT,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
