'''
weldbid.logging_config의 Docstring
구조화 로깅 유틸. job_id, bid_id 같은 컨텍스트를 key=value 형태로 붙여서 남깁니다.
'''

from __future__ import annotations

import logging
from typing import Any

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """
    메시지 앞에 컨텍스트를 붙여주는 logger adapter.

    Usage:
        logger = get_structured_logger(__name__, job_id="abc")
        logger.info("Awarding job")  # [job_id=abc] Awarding job
    """

    def __init__(self, logger: logging.Logger, **context: Any):
        super().__init__(logger, context)

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context_str = format_context(self.extra)
        if context_str:
            msg = f"[{context_str}] {msg}"
        return msg, kwargs

    def bind(self, **context: Any) -> StructuredLoggerAdapter:
        """컨텍스트를 더 붙인 새 adapter 반환."""
        merged = {**self.extra, **context}
        return StructuredLoggerAdapter(self.logger, **merged)


def format_context(context: dict[str, Any]) -> str:
    parts = [f"{key}={value}" for key, value in context.items() if value is not None]
    return " | ".join(parts)


def get_structured_logger(name: str, **context: Any) -> StructuredLoggerAdapter:
    return StructuredLoggerAdapter(logging.getLogger(name), **context)


def configure_logging(level: str = "INFO") -> None:
    # uvicorn이 먼저 핸들러를 달았으면 basicConfig는 아무것도 안 함
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("weldbid").setLevel(level)
