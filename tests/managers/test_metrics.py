# tests/managers/test_metrics.py
"""Tests for app/managers/metrics.py and the timed decorator."""

from threading import Thread

import pytest

from app.decorators import timed
from app.managers.metrics import (
    _MAX_RESPONSE_TIMES,
    EndpointStats,
    MetricsManager,
    RequestTimer,
    ResponseTimeStats,
    get_system_metrics,
)


class TestResponseTimeStats:
    """Tests for ResponseTimeStats dataclass."""

    def test_average(self) -> None:
        stats = ResponseTimeStats()
        for value in (1.0, 2.0, 3.0):
            stats.add(value)
        assert stats.count == 3
        assert stats.average == 2.0

    def test_average_empty(self) -> None:
        assert ResponseTimeStats().average == 0.0

    def test_circular_buffer_eviction(self) -> None:
        """Test the running sum tracks evicted values."""
        stats = ResponseTimeStats()
        for _ in range(_MAX_RESPONSE_TIMES):
            stats.add(1.0)
        stats.add(1001.0)

        assert stats.count == _MAX_RESPONSE_TIMES
        assert stats.average == pytest.approx((999 + 1001) / _MAX_RESPONSE_TIMES)


class TestMetricsManager:
    """Tests for MetricsManager class."""

    def test_records_requests_errors_and_times(self) -> None:
        manager = MetricsManager()
        manager.record_request("/post/posts")
        manager.record_request("/post/posts")
        manager.record_error("/post/posts")
        manager.record_response_time("/post/posts", 0.5)
        manager.record_rate_limit_hit()

        metrics = manager.get_metrics()

        assert metrics["endpoints"] == {
            "/post/posts": {
                "requests": 2,
                "errors": 1,
                "error_rate": 0.5,
                "avg_response_time": 0.5,
            },
        }
        assert metrics["rate_limit_hits"] == 1

    def test_reset_metrics(self) -> None:
        manager = MetricsManager()
        manager.record_request("/post/search")
        manager.record_rate_limit_hit()

        manager.reset_metrics()

        assert manager.get_metrics() == {"endpoints": {}, "rate_limit_hits": 0}

    def test_thread_safety(self) -> None:
        """Test concurrent increments are not lost."""
        manager = MetricsManager()

        def worker() -> None:
            for _ in range(1000):
                manager.record_request("/post/create")

        threads = [Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert manager.get_metrics()["endpoints"]["/post/create"]["requests"] == 8000


class TestEndpointStats:
    def test_error_rate_without_requests(self) -> None:
        assert EndpointStats().error_rate == 0.0


class TestRequestTimer:
    @pytest.mark.asyncio
    async def test_async_context_manager_with_exception(self) -> None:
        manager = MetricsManager()

        with pytest.raises(ValueError, match="boom"):
            async with RequestTimer("/post/update", manager):
                raise ValueError("boom")

        stats = manager.get_metrics()["endpoints"]["/post/update"]
        assert stats["requests"] == 1
        assert stats["errors"] == 1


class TestTimedDecorator:
    @pytest.mark.asyncio
    async def test_records_metrics(self) -> None:
        manager = MetricsManager()

        @timed("/post/single", metrics=manager)
        async def handler() -> str:
            return "ok"

        assert await handler() == "ok"
        assert manager.get_metrics()["endpoints"]["/post/single"]["errors"] == 0

    @pytest.mark.asyncio
    async def test_uses_function_name_and_preserves_metadata(self) -> None:
        manager = MetricsManager()

        @timed(metrics=manager)
        async def list_posts() -> None:
            """List posts."""

        await list_posts()

        assert list_posts.__name__ == "list_posts"
        assert list_posts.__doc__ == "List posts."
        assert "list_posts" in manager.get_metrics()["endpoints"]


@pytest.mark.asyncio
async def test_get_system_metrics_shape() -> None:
    metrics = await get_system_metrics()

    assert "cpu_percent" in metrics
    assert set(metrics["memory"]) == {"percent", "used_mb", "total_mb"}
