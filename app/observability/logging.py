from __future__ import annotations

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

import structlog


_CONFIGURED = False


def configure_logging(
    level: int = logging.INFO,
    log_dir: Path | None = None,
    backup_count: int = 24,
) -> None:
    """Configure structlog + stdlib logging for JSON output.

    With ``log_dir`` set, records also go to hourly-rotated ``application.log``
    and ``error.log`` (ERROR and above) files in that directory.

    Safe to call multiple times (no-op after first call).
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            # Let ProcessorFormatter render JSON for stdlib log records too.
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=pre_chain,
    )

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        application_file = TimedRotatingFileHandler(
            log_dir / "application.log",
            when="H",
            backupCount=backup_count,
            encoding="utf-8",
        )
        application_file.setFormatter(formatter)

        error_file = TimedRotatingFileHandler(
            log_dir / "error.log",
            when="H",
            backupCount=backup_count,
            encoding="utf-8",
        )
        error_file.setLevel(logging.ERROR)
        error_file.setFormatter(formatter)

        handlers.extend([application_file, error_file])

    root = logging.getLogger()
    root.handlers = list(handlers)
    root.setLevel(level)

    # Keep uvicorn's own loggers consistent with our handlers.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = list(handlers)
        logger.propagate = False
        logger.setLevel(level)

    _CONFIGURED = True
