"""
Reliability utilities: per-backend circuit breaker.

Search backends are rate limited and go down for minutes at a time. When a
backend keeps failing, its circuit opens and searches skip it for a cooldown
period instead of paying a timeout on every forum. There is no retry here:
a fresh aggregation call is the retry.
"""

import logging
import time
from enum import Enum
from typing import Callable, Dict

__all__ = [
    "CircuitState",
    "CircuitBreaker",
    "get_circuit_breaker",
    "reset_circuit_breakers",
]

logger = logging.getLogger(__name__)

# ══════════════════════════════════════════════════════════════════════════════
# Circuit Breaker
# ══════════════════════════════════════════════════════════════════════════════


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Failing, reject requests
    HALF_OPEN = "half_open"  # Testing recovery


class CircuitBreaker:
    """
    Stops sending requests to a backend that keeps failing.

    After `failure_threshold` consecutive failures the circuit opens for
    `timeout` seconds. The first request after the cooldown is let through
    (half-open); `success_threshold` successes close the circuit again,
    any failure reopens it.
    """

    def __init__(
        self,
        name: str = "",
        failure_threshold: int = 5,
        success_threshold: int = 1,
        timeout: float = 120.0,
        clock: Callable[[], float] = time.time,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.success_threshold = success_threshold
        self.timeout = timeout
        self._clock = clock

        self.failure_count = 0
        self.success_count = 0
        self.state = CircuitState.CLOSED
        self.opened_at: float | None = None

    def allow_request(self) -> bool:
        """Whether a request may be sent now."""
        if self.state == CircuitState.OPEN:
            if self._clock() - (self.opened_at or 0) >= self.timeout:
                self.state = CircuitState.HALF_OPEN
                self.success_count = 0
                logger.info(f"Circuit {self.name} half-open, probing backend")
            else:
                return False
        return True

    def record_success(self):
        self.failure_count = 0
        if self.state == CircuitState.HALF_OPEN:
            self.success_count += 1
            if self.success_count >= self.success_threshold:
                self.state = CircuitState.CLOSED
                self.success_count = 0
                logger.info(f"Circuit {self.name} closed")

    def record_failure(self):
        if self.state == CircuitState.HALF_OPEN:
            self._open()
            return
        self.failure_count += 1
        if self.failure_count >= self.failure_threshold:
            self._open()

    def _open(self):
        self.state = CircuitState.OPEN
        self.opened_at = self._clock()
        self.failure_count = 0
        logger.warning(f"Circuit {self.name} opened for {self.timeout:.0f}s")


# Global circuit breakers per backend
_circuit_breakers: Dict[str, CircuitBreaker] = {}


def get_circuit_breaker(backend: str) -> CircuitBreaker:
    """Get or create circuit breaker for a backend."""
    if backend not in _circuit_breakers:
        _circuit_breakers[backend] = CircuitBreaker(name=backend)
    return _circuit_breakers[backend]


def reset_circuit_breakers() -> None:
    _circuit_breakers.clear()
