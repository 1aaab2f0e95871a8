from __future__ import annotations

import logging
import logging.handlers
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_HANDLER_NAME = "spotbnb-file"

# Requests are logged once by the app's middleware; SQL echo belongs to the engine.
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine")


def configure_logging(*, log_dir: str, level: str = "INFO", filename: str = "spotbnb.log") -> logging.Handler:
    """Attach the rotating file log to the root logger, once per process.

    A console handler is added only when nothing else (uvicorn, pytest) has
    configured the root logger already. Returns the file handler.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root.handlers:
        if handler.get_name() == FILE_HANDLER_NAME:
            return handler

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    if not root.handlers:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root.addHandler(console)

    os.makedirs(log_dir, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, filename),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.set_name(FILE_HANDLER_NAME)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return file_handler
