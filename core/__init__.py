"""
Core game-thread engine for Pressbox.

    Classification     Is a post a game thread; is it a repost
    Matching           Is a game thread about this particular game
    Aggregation        Fan-out search, filter, rank and dedupe per game
    Circuit Breaker    Skip search backends that keep failing
    Metrics            Search latency, backend health, cache efficiency
"""

from core.classifier import (
    GAME_THREAD_MARKERS,
    is_game_thread_post,
    is_similar_title,
    normalize_title,
    thread_type,
)
from core.matcher import (
    matches_game,
    team_terms,
)
from core.metrics import (
    APIMetrics,
    BackendStats,
    PerformanceMonitor,
    format_metrics_report,
    get_api_metrics,
    get_performance_monitor,
)
from core.pipeline import (
    ThreadAggregator,
    dedupe_threads,
    rank_threads,
)
from core.reliability import (
    CircuitBreaker,
    CircuitState,
    get_circuit_breaker,
)

__all__ = [
    # Classification
    "GAME_THREAD_MARKERS",
    "is_game_thread_post",
    "is_similar_title",
    "normalize_title",
    "thread_type",
    # Matching
    "matches_game",
    "team_terms",
    # Aggregation
    "ThreadAggregator",
    "rank_threads",
    "dedupe_threads",
    # Reliability
    "CircuitBreaker",
    "CircuitState",
    "get_circuit_breaker",
    # Metrics
    "APIMetrics",
    "BackendStats",
    "PerformanceMonitor",
    "get_api_metrics",
    "get_performance_monitor",
    "format_metrics_report",
]
