#!/usr/bin/env python3
"""UTF-8-safe logging setup for the bucket validator."""

import logging
import sys
from pathlib import Path
from typing import Optional


class UTF8StreamHandler(logging.StreamHandler):
    """Stream handler that never crashes on characters the console can't encode."""

    def __init__(self, stream=None):
        super().__init__(stream if stream is not None else sys.stderr)

    def emit(self, record):
        try:
            msg = self.format(record)
            encoding = getattr(self.stream, "encoding", None) or "utf-8"
            msg = msg.encode(encoding, errors="replace").decode(encoding)
            self.stream.write(msg + self.terminator)
            self.flush()
        except Exception:
            self.handleError(record)


def setup_logger(name: str = "scoop_bucket",
                 log_level: str = "WARNING",
                 log_file: Optional[str] = None) -> logging.Logger:
    """Setup a UTF-8-safe logger with console and optional file output.

    Console output goes to stderr so it never interleaves with the
    validation report printed on stdout.
    """

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    # Console handler
    console_handler = UTF8StreamHandler()
    console_format = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler (optional)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8', errors='replace')
        file_format = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


# Global logger instance shared by the validation modules
logger = setup_logger()
