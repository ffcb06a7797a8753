"""
Performance monitoring and metrics.

Per-backend search health (calls, latency, failures, circuit skips) and
aggregation/cache counters for the thread finder. Everything is in-process
and resets on restart.
"""

import time
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "BackendStats",
    "APIMetrics",
    "PerformanceMonitor",
    "get_api_metrics",
    "get_performance_monitor",
    "format_metrics_report",
    "reset_metrics",
]

# ══════════════════════════════════════════════════════════════════════════════
# Search Backends
# ══════════════════════════════════════════════════════════════════════════════


@dataclass
class BackendStats:
    """Call statistics for one search backend."""

    name: str
    successes: int = 0
    failures: int = 0
    skips: int = 0
    total_latency_ms: float = 0.0
    last_error: str = ""
    error_types: dict[str, int] = field(default_factory=dict)

    @property
    def calls(self) -> int:
        return self.successes + self.failures

    @property
    def success_rate(self) -> float:
        if self.calls == 0:
            return 0.0
        return self.successes / self.calls * 100

    @property
    def avg_latency_ms(self) -> float:
        if self.successes == 0:
            return 0.0
        return self.total_latency_ms / self.successes


@dataclass
class APIMetrics:
    """Search backend health, keyed by backend name."""

    backends: dict[str, BackendStats] = field(default_factory=dict)

    def backend(self, name: str) -> BackendStats:
        if name not in self.backends:
            self.backends[name] = BackendStats(name=name)
        return self.backends[name]

    def record_success(self, backend: str, latency_ms: float):
        stats = self.backend(backend)
        stats.successes += 1
        stats.total_latency_ms += latency_ms

    def record_failure(self, backend: str, error_type: str):
        stats = self.backend(backend)
        stats.failures += 1
        stats.last_error = error_type
        stats.error_types[error_type] = stats.error_types.get(error_type, 0) + 1

    def record_skip(self, backend: str):
        self.backend(backend).skips += 1

    @property
    def total_calls(self) -> int:
        return sum(s.calls for s in self.backends.values())

    @property
    def total_skips(self) -> int:
        return sum(s.skips for s in self.backends.values())

    @property
    def error_types(self) -> dict[str, int]:
        merged: dict[str, int] = {}
        for stats in self.backends.values():
            for err, count in stats.error_types.items():
                merged[err] = merged.get(err, 0) + count
        return merged


# ══════════════════════════════════════════════════════════════════════════════
# Aggregations and Cache
# ══════════════════════════════════════════════════════════════════════════════


@dataclass
class PerformanceMonitor:
    """Track thread aggregations and cache behaviour."""

    start_time: float = field(default_factory=time.time)
    aggregation_times: list[float] = field(default_factory=list)
    total_threads: int = 0
    empty_aggregations: int = 0
    failed_forum_searches: int = 0
    cache_hits: int = 0
    cache_misses: int = 0

    def record_aggregation(
        self, duration_seconds: float, thread_count: int, failed_forums: int = 0
    ):
        self.aggregation_times.append(duration_seconds)
        self.total_threads += thread_count
        self.failed_forum_searches += failed_forums
        if thread_count == 0:
            self.empty_aggregations += 1

    def record_cache_hit(self):
        self.cache_hits += 1

    def record_cache_miss(self):
        self.cache_misses += 1

    @property
    def aggregations(self) -> int:
        return len(self.aggregation_times)

    @property
    def avg_aggregation_ms(self) -> float:
        if not self.aggregation_times:
            return 0.0
        return sum(self.aggregation_times) / len(self.aggregation_times) * 1000

    @property
    def cache_hit_rate(self) -> float:
        total = self.cache_hits + self.cache_misses
        if total == 0:
            return 0.0
        return self.cache_hits / total * 100

    @property
    def uptime_seconds(self) -> float:
        return time.time() - self.start_time

    def summary(self) -> dict[str, Any]:
        return {
            "uptime_seconds": round(self.uptime_seconds, 1),
            "aggregations": self.aggregations,
            "empty_aggregations": self.empty_aggregations,
            "avg_aggregation_ms": round(self.avg_aggregation_ms, 0),
            "total_threads": self.total_threads,
            "cache_hit_rate": round(self.cache_hit_rate, 1),
        }


# ══════════════════════════════════════════════════════════════════════════════
# Global Instances
# ══════════════════════════════════════════════════════════════════════════════

_api_metrics = APIMetrics()
_perf_monitor = PerformanceMonitor()


def get_api_metrics() -> APIMetrics:
    return _api_metrics


def get_performance_monitor() -> PerformanceMonitor:
    return _perf_monitor


def reset_metrics() -> None:
    global _api_metrics, _perf_monitor
    _api_metrics = APIMetrics()
    _perf_monitor = PerformanceMonitor()


def format_metrics_report() -> str:
    """Render aggregation, cache and backend health as Markdown."""
    perf = _perf_monitor
    api = _api_metrics

    lines = [
        "# Performance Metrics",
        "",
        "## Thread Finder",
        f"- Uptime: {perf.uptime_seconds:.0f}s",
        f"- Aggregations: {perf.aggregations} ({perf.empty_aggregations} empty)",
        f"- Avg Aggregation Time: {perf.avg_aggregation_ms:.0f}ms",
        f"- Threads Found: {perf.total_threads}",
        f"- Failed Forum Searches: {perf.failed_forum_searches}",
        f"- Cache Hit Rate: {perf.cache_hit_rate:.1f}% "
        f"({perf.cache_hits} hits, {perf.cache_misses} misses)",
        "",
        "## Search Backends",
    ]

    if not api.backends:
        lines.append("- No backend calls yet")
    for stats in api.backends.values():
        line = (
            f"- {stats.name}: {stats.calls} calls, {stats.success_rate:.1f}% ok, "
            f"{stats.avg_latency_ms:.0f}ms avg, {stats.skips} skipped"
        )
        if stats.last_error:
            line += f", last error {stats.last_error}"
        lines.append(line)

    errors = api.error_types
    if errors:
        lines.append("")
        lines.append("## Errors")
        for err, count in sorted(errors.items(), key=lambda x: -x[1]):
            lines.append(f"- {err}: {count}")

    return "\n".join(lines)
