from slowapi import Limiter
from slowapi.util import get_remote_address

from task_comments.core.config import settings

limiter = Limiter(key_func=get_remote_address)


def comment_rate_limit() -> str:
    # Evaluated on every request
    return settings.COMMENT_RATE_LIMIT
