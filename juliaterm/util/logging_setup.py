import logging
import logging.handlers
import queue
from typing import List, Optional

_LOGGER_NAME = "juliaterm"

def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)

def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s.%(msecs)03dZ %(processName)s %(levelname)s %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

def build_handlers(
    *,
    level: int = logging.INFO,
    console: bool = True,
    log_file: Optional[str] = "juliaterm.log",
    rotate_bytes: int = 5 * 1024 * 1024,
    rotate_count: int = 5,
) -> List[logging.Handler]:
    fmt = _build_formatter()
    handlers: List[logging.Handler] = []
    if console:
        ch = logging.StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(fmt)
        handlers.append(ch)
    if log_file:
        fh = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=rotate_bytes, backupCount=rotate_count, encoding="utf-8"
        )
        fh.setLevel(level)
        fh.setFormatter(fmt)
        handlers.append(fh)
    return handlers

def configure_logging(
    *,
    level: int = logging.INFO,
    console: bool = True,
    log_file: Optional[str] = "juliaterm.log",
) -> logging.handlers.QueueListener:
    """
    Route the package logger through a queue so file writes happen on the
    listener thread rather than inside the frame loop. The caller owns the
    returned listener and must ``stop()`` it to flush.
    """
    handlers = build_handlers(level=level, console=console, log_file=log_file)

    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False
    for h in list(logger.handlers):
        logger.removeHandler(h)

    q: "queue.Queue[logging.LogRecord]" = queue.Queue(-1)
    qh = logging.handlers.QueueHandler(q)
    qh.setLevel(level)
    logger.addHandler(qh)

    listener = logging.handlers.QueueListener(q, *handlers, respect_handler_level=True)
    listener.start()
    return listener
