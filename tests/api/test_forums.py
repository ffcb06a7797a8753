"""Unit tests for api/forums.py: backend fallback and partial failure."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from api.forums import search
from core.metrics import get_api_metrics
from core.reliability import CircuitState, get_circuit_breaker
from models import RawPost, Settings

SINCE = 1_700_000_000


def post(post_id):
    return RawPost(id=post_id, title="Game Thread: Patriots @ Jets", created_utc=SINCE)


def respond_with(mock_client, payload):
    mock_response = MagicMock()
    mock_response.json.return_value = payload
    mock_response.raise_for_status = MagicMock()
    mock_client.return_value.__aenter__.return_value.get = AsyncMock(
        return_value=mock_response
    )


class TestSearch:
    """Test suite for search async function."""

    @pytest.mark.asyncio
    async def test_first_backend_wins(self):
        pullpush = AsyncMock(return_value=[post("a")])
        reddit = AsyncMock(return_value=[post("b")])

        with patch("api.pullpush.fetch", pullpush), patch("api.reddit.fetch", reddit):
            posts = await search("nfl", "game thread", SINCE, settings=Settings())

        assert [p.id for p in posts] == ["a"]
        reddit.assert_not_called()
        assert pullpush.call_args[0] == ("nfl", "game thread", SINCE)

    @pytest.mark.asyncio
    async def test_empty_answer_does_not_fall_back(self):
        pullpush = AsyncMock(return_value=[])
        reddit = AsyncMock(return_value=[post("b")])

        with patch("api.pullpush.fetch", pullpush), patch("api.reddit.fetch", reddit):
            posts = await search("nfl", "game thread", SINCE, settings=Settings())

        assert posts == []
        reddit.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_back_on_failure(self, caplog):
        pullpush = AsyncMock(side_effect=httpx.ConnectTimeout("timed out"))
        reddit = AsyncMock(return_value=[post("b")])

        with patch("api.pullpush.fetch", pullpush), patch("api.reddit.fetch", reddit):
            with caplog.at_level(logging.WARNING):
                posts = await search("nfl", "game thread", SINCE, settings=Settings())

        assert [p.id for p in posts] == ["b"]
        assert "pullpush search failed for r/nfl" in caplog.text
        metrics = get_api_metrics()
        assert metrics.backend("reddit").successes == 1
        assert metrics.backend("pullpush").last_error == "ConnectTimeout"
        assert metrics.error_types == {"ConnectTimeout": 1}

    @pytest.mark.asyncio
    async def test_all_backends_failing_returns_empty(self, caplog):
        pullpush = AsyncMock(side_effect=httpx.ConnectError("refused"))
        reddit = AsyncMock(side_effect=ValueError("Unexpected listing"))

        with patch("api.pullpush.fetch", pullpush), patch("api.reddit.fetch", reddit):
            with caplog.at_level(logging.WARNING):
                posts = await search("Patriots", "game thread", SINCE, settings=Settings())

        assert posts == []
        assert "No search backend answered for r/Patriots" in caplog.text

    @pytest.mark.asyncio
    async def test_backend_order_override(self):
        pullpush = AsyncMock(return_value=[post("a")])
        reddit = AsyncMock(return_value=[post("b")])

        with patch("api.pullpush.fetch", pullpush), patch("api.reddit.fetch", reddit):
            posts = await search(
                "nfl", "game thread", SINCE, settings=Settings(), backends=["reddit"]
            )

        assert [p.id for p in posts] == ["b"]
        pullpush.assert_not_called()

    @pytest.mark.asyncio
    async def test_open_circuit_skips_backend(self):
        breaker = get_circuit_breaker("pullpush")
        for _ in range(breaker.failure_threshold):
            breaker.record_failure()
        assert breaker.state == CircuitState.OPEN

        pullpush = AsyncMock(return_value=[post("a")])
        reddit = AsyncMock(return_value=[post("b")])

        with patch("api.pullpush.fetch", pullpush), patch("api.reddit.fetch", reddit):
            posts = await search("nfl", "game thread", SINCE, settings=Settings())

        assert [p.id for p in posts] == ["b"]
        pullpush.assert_not_called()
        assert get_api_metrics().backend("pullpush").skips == 1

    @pytest.mark.asyncio
    async def test_listing_with_junk_children_is_an_answer(self):
        settings = Settings(backends=("reddit",))

        with patch("httpx.AsyncClient") as mock_client:
            respond_with(mock_client, {"data": {"children": ["junk", {"data": "junk"}]}})
            posts = await search("nfl", "game thread", 0, settings=settings)

        assert posts == []
        assert get_api_metrics().backend("reddit").successes == 1

    @pytest.mark.asyncio
    async def test_malformed_listing_counts_as_failure(self, caplog):
        settings = Settings(backends=("reddit",))

        with patch("httpx.AsyncClient") as mock_client:
            respond_with(mock_client, {"data": {"children": "junk"}})
            with caplog.at_level(logging.WARNING):
                posts = await search("nfl", "game thread", 0, settings=settings)

        assert posts == []
        assert get_api_metrics().backend("reddit").last_error == "ValueError"
        assert get_circuit_breaker("reddit").failure_count == 1
        assert "reddit search failed for r/nfl" in caplog.text

    @pytest.mark.asyncio
    async def test_invalid_url_falls_back(self):
        pullpush = AsyncMock(side_effect=httpx.InvalidURL("Invalid port: 'bad'"))
        reddit = AsyncMock(return_value=[post("b")])

        with patch("api.pullpush.fetch", pullpush), patch("api.reddit.fetch", reddit):
            posts = await search("nfl", "game thread", SINCE, settings=Settings())

        assert [p.id for p in posts] == ["b"]
        assert get_api_metrics().backend("pullpush").last_error == "InvalidURL"
