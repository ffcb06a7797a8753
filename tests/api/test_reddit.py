"""Unit tests for api/reddit.py."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from api.reddit import fetch, fetch_comments, parse_listing
from models import Settings

SINCE = 1_700_000_000


def listing(*posts):
    return {
        "kind": "Listing",
        "data": {"children": [{"kind": "t3", "data": p} for p in posts]},
    }


def submission(post_id, created_utc, title="Game Thread: Lakers vs Celtics"):
    return {
        "id": post_id,
        "title": title,
        "selftext": "",
        "author": "NBA_MOD",
        "subreddit": "nba",
        "permalink": f"/r/nba/comments/{post_id}/",
        "created_utc": created_utc,
        "score": 100,
        "num_comments": 3000,
        "link_flair_text": "Game Thread",
        "stickied": True,
    }


def mock_client_returning(mock_client, payload):
    mock_response = MagicMock()
    mock_response.json.return_value = payload
    mock_response.raise_for_status = MagicMock()
    mock_get = AsyncMock(return_value=mock_response)
    mock_client.return_value.__aenter__.return_value.get = mock_get
    return mock_get


class TestParseListing:
    """Test suite for parse_listing function."""

    def test_filters_by_since(self):
        data = listing(submission("a", SINCE + 1), submission("b", SINCE - 1))
        assert [p.id for p in parse_listing(data, SINCE)] == ["a"]

    def test_keeps_flair_and_sticky(self):
        post = parse_listing(listing(submission("a", SINCE)), SINCE)[0]
        assert post.link_flair_text == "Game Thread"
        assert post.stickied is True

    def test_skips_children_that_are_not_objects(self):
        data = listing(submission("a", SINCE))
        data["data"]["children"][:0] = ["junk", None, {"kind": "t3", "data": "junk"}]

        assert [p.id for p in parse_listing(data, SINCE)] == ["a"]

    @pytest.mark.parametrize("payload", [[], {"data": []}, {"kind": "Listing"}])
    def test_bad_listing_raises(self, payload):
        with pytest.raises(ValueError):
            parse_listing(payload)


class TestFetch:
    """Test suite for fetch async function."""

    @pytest.mark.asyncio
    async def test_search_with_query(self):
        with patch("httpx.AsyncClient") as mock_client:
            mock_get = mock_client_returning(mock_client, listing(submission("a", SINCE)))
            posts = await fetch("nba", "game thread", SINCE, settings=Settings())

        assert [p.id for p in posts] == ["a"]
        assert mock_get.call_args[0][0] == "https://old.reddit.com/r/nba/search.json"
        params = mock_get.call_args[1]["params"]
        assert params["q"] == "game thread"
        assert params["restrict_sr"] == "on"
        assert params["t"] == "day"

    @pytest.mark.asyncio
    async def test_newest_without_query(self):
        with patch("httpx.AsyncClient") as mock_client:
            mock_get = mock_client_returning(mock_client, listing())
            await fetch("lakers", None, SINCE, settings=Settings())

        assert mock_get.call_args[0][0] == "https://old.reddit.com/r/lakers/new.json"

    @pytest.mark.asyncio
    async def test_status_error_propagates(self):
        mock_response = MagicMock()
        mock_response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError(
                "429 Too Many Requests", request=MagicMock(), response=MagicMock()
            )
        )
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                return_value=mock_response
            )
            with pytest.raises(httpx.HTTPStatusError):
                await fetch("nba", "game thread", SINCE, settings=Settings())


class TestFetchComments:
    """Test suite for fetch_comments async function."""

    @pytest.mark.asyncio
    async def test_only_comments_with_body(self):
        payload = [
            listing(submission("a", SINCE)),
            {
                "kind": "Listing",
                "data": {
                    "children": [
                        {"kind": "t1", "data": {"id": "c1", "author": "fan", "body": "LETS GO", "score": 12}},
                        {"kind": "t1", "data": {"id": "c2", "author": "[deleted]", "body": ""}},
                        {"kind": "more", "data": {"id": "m1", "children": ["c9"]}},
                    ]
                },
            },
        ]
        with patch("httpx.AsyncClient") as mock_client:
            mock_get = mock_client_returning(mock_client, payload)
            comments = await fetch_comments("nba", "a", sort="top", limit=10, settings=Settings())

        assert [c.id for c in comments] == ["c1"]
        assert comments[0].body == "LETS GO"
        assert mock_get.call_args[0][0] == "https://old.reddit.com/r/nba/comments/a.json"
        assert mock_get.call_args[1]["params"] == {"sort": "top", "limit": 10}

    @pytest.mark.asyncio
    async def test_unexpected_payload_raises(self):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client_returning(mock_client, {"error": 404})
            with pytest.raises(ValueError):
                await fetch_comments("nba", "missing", settings=Settings())

    @pytest.mark.asyncio
    async def test_skips_malformed_children(self):
        payload = [
            listing(submission("a", SINCE)),
            {
                "kind": "Listing",
                "data": {
                    "children": [
                        "junk",
                        {"kind": "t1", "data": "junk"},
                        {"kind": "t1", "data": {"id": "c1", "author": "fan", "body": "DEFENSE"}},
                    ]
                },
            },
        ]
        with patch("httpx.AsyncClient") as mock_client:
            mock_client_returning(mock_client, payload)
            comments = await fetch_comments("nba", "a", settings=Settings())

        assert [c.id for c in comments] == ["c1"]
