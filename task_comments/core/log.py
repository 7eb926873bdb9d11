import logging
from pythonjsonlogger import jsonlogger

from task_comments.core.config import settings


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the task_comments namespace that emits JSON lines."""
    logger = logging.getLogger(f"task_comments.{name}")
    if not logger.handlers:
        log_handler = logging.StreamHandler()
        formatter = jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%SZ"
        )
        log_handler.setFormatter(formatter)
        logger.addHandler(log_handler)
    logger.setLevel(settings.LOG_LEVEL.upper())
    return logger
