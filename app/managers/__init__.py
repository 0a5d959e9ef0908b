from app.managers.metrics import RequestTimer, get_system_metrics, metrics_manager
from app.managers.rate_limiter import close_limiter, limiter, rate_limit_exceeded_handler

__all__ = [
    "RequestTimer",
    "close_limiter",
    "get_system_metrics",
    "limiter",
    "metrics_manager",
    "rate_limit_exceeded_handler",
]
