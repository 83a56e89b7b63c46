import logging
import json
import sys
from pathlib import Path
from datetime import datetime

# Attributes every LogRecord carries; anything else came in via extra={}
_STANDARD_ATTRS = {
    'args', 'asctime', 'created', 'exc_info', 'exc_text', 'filename',
    'funcName', 'levelname', 'levelno', 'lineno', 'module',
    'msecs', 'message', 'msg', 'name', 'pathname', 'process',
    'processName', 'relativeCreated', 'stack_info', 'thread', 'threadName',
    'taskName',
}


class JsonLinesFormatter(logging.Formatter):
    """Formats log records as JSON objects, one per line."""
    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def setup_subject_logger(
    subject_id: str,
    log_path: Path,
    level: str = "INFO",
    verbose: bool = False
) -> logging.Logger:
    """
    Sets up an isolated logger for a single subject attempt.

    Outputs structured JSON Lines to the log_path and plain text to stdout if verbose.

    Args:
        subject_id: Identifier for the subject
        log_path: Full path to the log file to create
        level: Logging level (default: INFO)
        verbose: If True, also output to stdout

    Returns:
        A configured logging.Logger instance
    """
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(f"brainstats.batch.{subject_id}")
    logger.setLevel(level)

    # Keep subject records out of the batch-level log
    logger.propagate = False

    close_subject_logger(logger)

    file_handler = logging.FileHandler(log_path)
    file_handler.setFormatter(JsonLinesFormatter())
    logger.addHandler(file_handler)

    if verbose:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(f"[%(levelname)s] {subject_id}: %(message)s"))
        logger.addHandler(console_handler)

    return logger


def close_subject_logger(logger: logging.Logger) -> None:
    """Detach and close all handlers of a subject logger."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
