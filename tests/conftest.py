"""Pytest configuration, shared fixtures and lightweight asyncio support.

Coroutine test functions are executed on a fresh event loop by the
``pytest_pyfunc_call`` hook below, so the suite does not depend on
``pytest-asyncio``. When that plugin is installed it handles marked tests
itself and the hook steps aside.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from typing import Any, Callable

import pytest

from core.metrics import reset_metrics
from core.reliability import reset_circuit_breakers
from models import Game, RawPost, Sport, Team


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "asyncio: run coroutine test on an event loop")


def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute coroutine test functions on an event loop.

    When a collected test function is a coroutine, run it to completion on a
    dedicated event loop. Returning ``True`` tells pytest the call was handled,
    preventing the default (which would error on an un-awaited coroutine).
    """

    test_obj = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_obj):
        return None

    bound_args = {
        name: value
        for name, value in pyfuncitem.funcargs.items()
        if name in inspect.signature(test_obj).parameters
    }

    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(test_obj(**bound_args))
    finally:
        loop.close()
        asyncio.set_event_loop(None)

    return True


# ══════════════════════════════════════════════════════════════════════════════
# Shared Fixtures
# ══════════════════════════════════════════════════════════════════════════════


@pytest.fixture(autouse=True)
def fresh_global_state():
    """Metrics and circuit breakers are process-global; isolate each test."""
    reset_metrics()
    reset_circuit_breakers()
    yield
    reset_circuit_breakers()


@pytest.fixture
def make_post() -> Callable[..., RawPost]:
    counter = {"n": 0}

    def _make(title: str, **overrides: Any) -> RawPost:
        counter["n"] += 1
        data = {
            "id": f"p{counter['n']}",
            "title": title,
            "selftext": "",
            "author": "GameThreadBot",
            "subreddit": "nfl",
            "permalink": f"/r/nfl/comments/p{counter['n']}/",
            "created_utc": int(time.time()),
            "score": 10,
            "num_comments": 0,
        }
        data.update(overrides)
        return RawPost(**data)

    return _make


@pytest.fixture
def patriots_jets() -> Game:
    return Game(
        id="401671789",
        sport=Sport.AMERICAN_FOOTBALL,
        home_team=Team(id="17", name="New England Patriots", abbreviation="NE"),
        away_team=Team(id="20", name="New York Jets", abbreviation="NYJ"),
    )


@pytest.fixture
def lakers_celtics() -> Game:
    return Game(
        id="401585123",
        sport=Sport.BASKETBALL,
        home_team=Team(id="13", name="Los Angeles Lakers", abbreviation="LAL"),
        away_team=Team(id="2", name="Boston Celtics", abbreviation="BOS"),
    )
