from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import IO, Any

from scripthost.core.paths import APP_NAME, LOG_FILENAME

_OWNED = "_scripthost_owned"


def get_logger(name: str = APP_NAME) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(
    *,
    level: str = "info",
    format_name: str = "json",
    stream: IO[str] | None = None,
    log_dir: Path | None = None,
    filename: str = LOG_FILENAME,
) -> logging.Logger:
    """Attach a handler to the package logger.

    Hosted scripts share the process with the launcher, so only the
    ``scripthost`` logger is touched; the root logger is left to them.
    A handler installed by an earlier call is closed and replaced; handlers
    attached by anyone else are kept.
    """
    normalized = level.strip().upper()
    level_value = getattr(logging, normalized, logging.INFO)
    if format_name == "json":
        formatter = logging.Formatter("%(message)s")
    else:
        formatter = logging.Formatter("%(levelname)s %(name)s %(message)s")

    logger = get_logger()
    logger.setLevel(level_value)
    for previous in [h for h in logger.handlers if getattr(h, _OWNED, False)]:
        logger.removeHandler(previous)
        previous.close()

    if stream is None:
        if log_dir is None:
            _attach(logger, logging.NullHandler())
            return logger
        log_dir.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(
            log_dir / filename, mode="a", encoding="utf-8"
        )
    else:
        handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    _attach(logger, handler)
    return logger


def _attach(logger: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _OWNED, True)
    logger.addHandler(handler)


def log_event(
    logger: logging.Logger,
    event: str,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, sort_keys=True, default=str))
