import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from gymtrack.core.config import settings

# Log directory: use GYMTRACK_LOG_DIR from env, else ./logs
_log_dir_env = os.environ.get("GYMTRACK_LOG_DIR")
if _log_dir_env:
    LOG_DIR = Path(_log_dir_env)
else:
    LOG_DIR = Path("logs")

logger = logging.getLogger("gymtrack")
logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
logger.handlers.clear()

_formatter = logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

# Console
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
console_handler.setFormatter(_formatter)
logger.addHandler(console_handler)

# File
try:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        LOG_DIR / "backend.log",
        maxBytes=2 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    file_handler.setFormatter(_formatter)
    logger.addHandler(file_handler)
except OSError:
    logger.warning(f"File logging disabled, cannot write to {LOG_DIR}")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"gymtrack.{name}")
