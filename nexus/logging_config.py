# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Logging setup for Nexus connect-policy processes.

Records are written to stdout, either as one JSON object per line
(``NEXUS_LOG_FORMAT=json``, the default) or as plain text for
interactive use.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from nexus.config import LOG_FORMAT, LOG_LEVEL

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter.

    Produces one JSON object per log line with fields:

    * ``timestamp``: ISO 8601 local timestamp.
    * ``level``: Log level name (INFO, WARNING, ERROR, etc.).
    * ``logger``: Logger name.
    * ``message``: The formatted log message.
    * ``module``: Source module name.
    * ``funcName``: Source function name.

    If the log record carries an exception, it is serialized as an
    ``exception`` field containing the formatted traceback string.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "funcName": record.funcName,
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def configure_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure the root logger with a single stream handler.

    Existing handlers are removed first to prevent duplicate output when
    a host framework has already installed its own.

    Args:
        level: Log level name; defaults to ``NEXUS_LOG_LEVEL``.
        fmt: ``"json"`` or ``"text"``; defaults to ``NEXUS_LOG_FORMAT``.
        stream: Output stream; defaults to stdout.
    """
    level = level or LOG_LEVEL
    fmt = fmt or LOG_FORMAT

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Suppress noisy third-party loggers.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
