"""Unit tests for core/reliability.py and core/metrics.py."""

import unittest

from core.metrics import (
    APIMetrics,
    PerformanceMonitor,
    format_metrics_report,
    get_api_metrics,
    get_performance_monitor,
)
from core.reliability import CircuitBreaker, CircuitState, get_circuit_breaker


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class CircuitBreakerTests(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.breaker = CircuitBreaker(
            name="pullpush", failure_threshold=3, timeout=60, clock=self.clock
        )

    def trip(self):
        for _ in range(3):
            self.breaker.record_failure()

    def test_opens_after_threshold(self):
        self.breaker.record_failure()
        self.breaker.record_failure()
        self.assertTrue(self.breaker.allow_request())

        self.breaker.record_failure()

        self.assertEqual(self.breaker.state, CircuitState.OPEN)
        self.assertFalse(self.breaker.allow_request())

    def test_success_resets_failure_count(self):
        self.breaker.record_failure()
        self.breaker.record_failure()
        self.breaker.record_success()
        self.breaker.record_failure()

        self.assertEqual(self.breaker.state, CircuitState.CLOSED)

    def test_half_open_after_cooldown_then_closes(self):
        self.trip()
        self.clock.now += 60

        self.assertTrue(self.breaker.allow_request())
        self.assertEqual(self.breaker.state, CircuitState.HALF_OPEN)

        self.breaker.record_success()
        self.assertEqual(self.breaker.state, CircuitState.CLOSED)

    def test_failure_while_half_open_reopens(self):
        self.trip()
        self.clock.now += 60
        self.breaker.allow_request()

        self.breaker.record_failure()

        self.assertEqual(self.breaker.state, CircuitState.OPEN)
        self.assertFalse(self.breaker.allow_request())

    def test_registry_returns_same_breaker(self):
        self.assertIs(get_circuit_breaker("reddit"), get_circuit_breaker("reddit"))
        self.assertIsNot(get_circuit_breaker("reddit"), get_circuit_breaker("pullpush"))


class MetricsTests(unittest.TestCase):
    def test_backend_rates(self):
        metrics = APIMetrics()
        metrics.record_success("pullpush", 100)
        metrics.record_success("pullpush", 300)
        metrics.record_failure("pullpush", "ConnectTimeout")
        metrics.record_failure("pullpush", "ConnectTimeout")

        stats = metrics.backend("pullpush")
        self.assertEqual(stats.success_rate, 50.0)
        self.assertEqual(stats.avg_latency_ms, 200.0)
        self.assertEqual(stats.last_error, "ConnectTimeout")

    def test_error_types_merge_across_backends(self):
        metrics = APIMetrics()
        metrics.record_failure("pullpush", "ConnectTimeout")
        metrics.record_failure("reddit", "ConnectTimeout")
        metrics.record_failure("reddit", "HTTPStatusError")
        metrics.record_skip("pullpush")

        self.assertEqual(metrics.error_types, {"ConnectTimeout": 2, "HTTPStatusError": 1})
        self.assertEqual(metrics.total_calls, 3)
        self.assertEqual(metrics.total_skips, 1)

    def test_cache_hit_rate(self):
        monitor = PerformanceMonitor()
        monitor.record_cache_hit()
        monitor.record_cache_hit()
        monitor.record_cache_hit()
        monitor.record_cache_miss()

        self.assertEqual(monitor.cache_hit_rate, 75.0)
        self.assertEqual(monitor.summary()["cache_hit_rate"], 75.0)

    def test_report_lists_errors(self):
        get_api_metrics().record_failure("reddit", "HTTPStatusError")
        get_performance_monitor().record_aggregation(0.2, 0)

        report = format_metrics_report()

        self.assertIn("# Performance Metrics", report)
        self.assertIn("- Aggregations: 1 (1 empty)", report)
        self.assertIn("- reddit: 1 calls, 0.0% ok", report)
        self.assertIn("- HTTPStatusError: 1", report)


if __name__ == "__main__":
    unittest.main()
