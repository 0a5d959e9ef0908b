from app.configs.settings import (
    DEFAULT_AUTHOR,
    POST_REMOVED_MESSAGE,
    LimiterConfig,
    file_logger,
    pool_kwargs,
    settings,
)

__all__ = [
    "DEFAULT_AUTHOR",
    "POST_REMOVED_MESSAGE",
    "LimiterConfig",
    "file_logger",
    "pool_kwargs",
    "settings",
]
