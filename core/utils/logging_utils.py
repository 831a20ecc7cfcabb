"""
Loggers for CodeVault: one stream handler plus a rotating file per
component (auth, snippets, members), overridable through env vars.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 5

# component -> (default file name, env var overriding the full path)
COMPONENT_LOGS = {
    "auth": ("auth.log", "CODEVAULT_AUTH_LOG_FILE"),
    "snippets": ("snippets.log", "CODEVAULT_SNIPPETS_LOG_FILE"),
    "members": ("members.log", "CODEVAULT_MEMBERS_LOG_FILE"),
}


def _log_path(component: Optional[str] = None) -> Path:
    log_dir = Path(os.getenv("CODEVAULT_LOG_DIR", "logs"))

    if component in COMPONENT_LOGS:
        file_name, env_key = COMPONENT_LOGS[component]
        return Path(os.getenv(env_key) or log_dir / file_name)

    return Path(os.getenv("CODEVAULT_LOG_FILE") or log_dir / "codevault.log")


def get_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if getattr(logger, "_codevault_configured", False):
        return logger

    logger.propagate = False
    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    log_path = Path(log_file) if log_file else _log_path()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError:
        logger.exception("Failed to initialize file logging at %s", log_path)

    logger._codevault_configured = True
    return logger


def get_component_logger(
    name: str,
    component: Optional[str] = None,
    level: int = logging.INFO
) -> logging.Logger:
    return get_logger(name, level=level, log_file=str(_log_path(component)))
