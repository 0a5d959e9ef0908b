"""
In-process metrics for the post API.

Each timed route gets an `EndpointStats` record holding its request and error
counts and a bounded window of recent latencies. `/metrics` reports these next
to a psutil snapshot of the host.
"""

from asyncio import to_thread
from collections import deque
from dataclasses import dataclass, field
from logging import getLogger
from threading import Lock
from time import perf_counter
from types import TracebackType
from typing import Any, Self

from psutil import cpu_percent as get_cpu_percent
from psutil import disk_usage, virtual_memory

from app.configs import file_logger

logger = file_logger(getLogger(__name__))

_BYTES_PER_MB: int = 1024 * 1024
_MAX_RESPONSE_TIMES: int = 1000
_CPU_SAMPLE_INTERVAL: float = 0.1


@dataclass(slots=True)
class ResponseTimeStats:
    """Sliding window of latencies with a running sum."""

    times: deque[float] = field(default_factory=lambda: deque(maxlen=_MAX_RESPONSE_TIMES))
    _sum: float = field(default=0.0, repr=False)

    def add(self, duration: float) -> None:
        if len(self.times) == self.times.maxlen:
            # oldest value is about to be evicted
            self._sum -= self.times[0]
        self.times.append(duration)
        self._sum += duration

    @property
    def average(self) -> float:
        return self._sum / len(self.times) if self.times else 0.0

    @property
    def count(self) -> int:
        return len(self.times)


@dataclass(slots=True)
class EndpointStats:
    """Counters for one timed route."""

    requests: int = 0
    errors: int = 0
    latency: ResponseTimeStats = field(default_factory=ResponseTimeStats)

    @property
    def error_rate(self) -> float:
        return self.errors / self.requests if self.requests else 0.0

    def summary(self) -> dict[str, float | int]:
        return {
            "requests": self.requests,
            "errors": self.errors,
            "error_rate": round(self.error_rate, 4),
            "avg_response_time": self.latency.average,
        }


class MetricsManager:
    """
    Thread-safe registry of per-endpoint stats.

    Endpoints are keyed by the name given to `@timed` (e.g. ``/post/search``).
    Rate-limit rejections are counted globally because slowapi rejects the
    request before the route's timer starts.
    """

    __slots__ = ("_endpoints", "_lock", "_rate_limit_hits")

    def __init__(self) -> None:
        self._lock = Lock()
        self._endpoints: dict[str, EndpointStats] = {}
        self._rate_limit_hits: int = 0

    def _stats(self, endpoint: str) -> EndpointStats:
        # caller holds the lock
        return self._endpoints.setdefault(endpoint, EndpointStats())

    def record_request(self, endpoint: str) -> None:
        with self._lock:
            self._stats(endpoint).requests += 1

    def record_error(self, endpoint: str) -> None:
        with self._lock:
            self._stats(endpoint).errors += 1

    def record_response_time(self, endpoint: str, duration: float) -> None:
        with self._lock:
            self._stats(endpoint).latency.add(duration)

    def record_rate_limit_hit(self) -> None:
        with self._lock:
            self._rate_limit_hits += 1

    def get_metrics(self) -> dict[str, Any]:
        """
        Snapshot the current counters.

        Returns:
            ``{"endpoints": {name: summary}, "rate_limit_hits": int}``
        """
        with self._lock:
            return {
                "endpoints": {
                    name: stats.summary() for name, stats in sorted(self._endpoints.items())
                },
                "rate_limit_hits": self._rate_limit_hits,
            }

    def reset_metrics(self) -> None:
        with self._lock:
            self._endpoints.clear()
            self._rate_limit_hits = 0
        logger.info("Metrics reset")


metrics_manager = MetricsManager()


class RequestTimer:
    """
    Async context manager that records one request against an endpoint.

    Any exception leaving the block counts as an error, including domain
    errors that the exception handlers later render as 4xx responses.
    """

    __slots__ = ("_endpoint", "_metrics", "_start_time")

    def __init__(self, endpoint: str, metrics: MetricsManager | None = None) -> None:
        self._endpoint = endpoint
        self._start_time: float = 0.0
        self._metrics = metrics or metrics_manager

    async def __aenter__(self) -> Self:
        self._start_time = perf_counter()
        self._metrics.record_request(self._endpoint)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        self._metrics.record_response_time(self._endpoint, perf_counter() - self._start_time)
        if exc_type is not None:
            self._metrics.record_error(self._endpoint)


@dataclass(slots=True, frozen=True)
class SystemMetrics:
    cpu_percent: float
    memory_percent: float
    memory_used_mb: float
    memory_total_mb: float
    disk_percent: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "cpu_percent": self.cpu_percent,
            "memory": {
                "percent": self.memory_percent,
                "used_mb": self.memory_used_mb,
                "total_mb": self.memory_total_mb,
            },
            "disk_percent": self.disk_percent,
        }


def _collect_system_metrics() -> SystemMetrics:
    memory = virtual_memory()
    disk = disk_usage("/")
    return SystemMetrics(
        cpu_percent=get_cpu_percent(interval=_CPU_SAMPLE_INTERVAL),
        memory_percent=memory.percent,
        memory_used_mb=round(memory.used / _BYTES_PER_MB, 2),
        memory_total_mb=round(memory.total / _BYTES_PER_MB, 2),
        disk_percent=disk.percent,
    )


async def get_system_metrics() -> dict[str, Any]:
    """
    Sample host CPU, memory and disk usage.

    psutil blocks for the CPU sample interval, so the collection runs in a
    worker thread. An OS error is logged and reported in the payload instead
    of failing the `/metrics` request.
    """
    try:
        return (await to_thread(_collect_system_metrics)).to_dict()
    except OSError as e:
        logger.exception("Failed to collect system metrics")
        return {"error": f"Failed to collect system metrics: {e}"}
