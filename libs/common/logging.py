from __future__ import annotations

import logging
import sys
from typing import TextIO, cast

import structlog
from structlog.typing import FilteringBoundLogger


def configure_logging(*, stream: TextIO | None = None, json_output: bool = True) -> None:
    """structlog을 한 번 설정해요.

    stdio 전송 모드에서는 stdout이 프로토콜 채널이므로 ``stream``에
    ``sys.stderr``를 넘겨야 해요.
    """
    target = stream if stream is not None else sys.stdout
    logging.basicConfig(format="%(message)s", stream=target, level=logging.INFO)
    renderer: structlog.typing.Processor = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.PrintLoggerFactory(file=target),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    return cast(FilteringBoundLogger, structlog.get_logger(name))
