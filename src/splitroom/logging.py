from __future__ import annotations

import logging

import structlog

QUIET_LOGGERS = ("httpx", "httpcore", "apscheduler")


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str = "INFO", json: bool = True) -> None:
    log_level = _resolve_level(level)
    logging.basicConfig(level=log_level, format="%(message)s")
    # httpx logs every request at INFO; http_logger already covers that
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )


def bind_room_context(room_id: str, viewer_id: str) -> None:
    structlog.contextvars.bind_contextvars(room_id=room_id, viewer_id=viewer_id)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


http_logger = get_logger("http")
