import logging
import sys
from pathlib import Path

from .config import LogConfig

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(threadName)s - %(message)s"

# paramiko logs every packet of the SSH handshake at DEBUG/INFO
PARAMIKO_LOGGER = "paramiko"


def _add_handler(root: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def setup_logging(config: LogConfig) -> None:
    """
    Point the root logger at the log file and/or stderr.

    Handlers installed earlier are dropped. Unless the level is DEBUG,
    paramiko's own logger is held at WARNING.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(level)

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _add_handler(root, logging.FileHandler(log_path, encoding="utf-8"), level)

    if config.console:
        _add_handler(root, logging.StreamHandler(sys.stderr), level)

    paramiko_level = logging.NOTSET if level <= logging.DEBUG else logging.WARNING
    logging.getLogger(PARAMIKO_LOGGER).setLevel(paramiko_level)
