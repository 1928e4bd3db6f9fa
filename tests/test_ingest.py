"""Tests for feed ingestion and result packaging."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest
import respx

from podfeed.core.config import Config, ParserConfig
from podfeed.core.errors import ConfigError
from podfeed.core.models import MAX_EPISODES, FeedResult
from podfeed.services.ingest import (
    parse_feed_text,
    process_podcast_feed,
    process_podcast_feeds,
)

FEED_URL = "https://example.com/feed.xml"


class TestProcessPodcastFeed:
    """Tests for process_podcast_feed."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_success_envelope(self, sample_rss_feed: str) -> None:
        """Test a fetched and parsed feed."""
        respx.get(FEED_URL).mock(return_value=httpx.Response(200, text=sample_rss_feed))

        result = await process_podcast_feed(FEED_URL)

        assert result.success is True
        assert result.error is None
        assert result.data is not None
        assert result.data.name == "Cosmic Weather"
        assert len(result.data.episodes) == 2

    @respx.mock
    @pytest.mark.asyncio
    async def test_zero_items_is_success(self, feed_builder: Callable[..., str]) -> None:
        """Test that an empty feed is not an error."""
        respx.get(FEED_URL).mock(return_value=httpx.Response(200, text=feed_builder(0)))

        result = await process_podcast_feed(FEED_URL)

        assert result.success is True
        assert result.data is not None
        assert result.data.episodes == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_not_found_envelope(self) -> None:
        """Test that HTTP 404 becomes a failure envelope, not an exception."""
        respx.get(FEED_URL).mock(return_value=httpx.Response(404))

        result = await process_podcast_feed(FEED_URL)

        assert result.success is False
        assert result.data is None
        assert "404" in result.error
        assert result.to_dict() == {"success": False, "error": result.error}

    @respx.mock
    @pytest.mark.asyncio
    async def test_transport_error_envelope(self) -> None:
        """Test that transport errors are reported verbatim."""
        respx.get(FEED_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        result = await process_podcast_feed(FEED_URL)

        assert result.success is False
        assert "connection refused" in result.error

    @pytest.mark.asyncio
    async def test_empty_url_envelope(self) -> None:
        """Test that an empty URL is reported in the envelope."""
        result = await process_podcast_feed("")

        assert result.success is False
        assert "empty" in result.error

    @respx.mock
    @pytest.mark.asyncio
    async def test_uses_configured_engine_and_limit(
        self, feed_builder: Callable[..., str]
    ) -> None:
        """Test that parser settings come from the config."""
        respx.get(FEED_URL).mock(return_value=httpx.Response(200, text=feed_builder(8)))
        config = Config(parser=ParserConfig(engine="feedparser", max_episodes=4))

        result = await process_podcast_feed(FEED_URL, config=config)

        assert result.data is not None
        assert [e.guid for e in result.data.episodes] == [f"guid-{i}" for i in range(1, 5)]

    @respx.mock
    @pytest.mark.asyncio
    async def test_user_agent_env_override(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that PODFEED_USER_AGENT is sent with the request."""
        monkeypatch.setenv("PODFEED_USER_AGENT", "env-agent/2.0")
        route = respx.get(FEED_URL).mock(return_value=httpx.Response(200, text="<rss/>"))

        await process_podcast_feed(FEED_URL)

        assert route.calls.last.request.headers["User-Agent"] == "env-agent/2.0"

    @pytest.mark.asyncio
    async def test_unknown_engine_raises(self) -> None:
        """Test that configuration errors are not hidden in the envelope."""
        config = Config(parser=ParserConfig(engine="nope"))

        with pytest.raises(ConfigError):
            await process_podcast_feed(FEED_URL, config=config)


class TestProcessPodcastFeeds:
    """Tests for concurrent ingestion of several feeds."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_mixed_results_in_input_order(
        self, feed_builder: Callable[..., str]
    ) -> None:
        """Test that each feed gets its own envelope."""
        respx.get("https://a.example/feed.xml").mock(
            return_value=httpx.Response(200, text=feed_builder(15, title="A"))
        )
        respx.get("https://b.example/feed.xml").mock(return_value=httpx.Response(500))
        respx.get("https://c.example/feed.xml").mock(
            return_value=httpx.Response(200, text=feed_builder(1, title="C"))
        )
        urls = [
            "https://c.example/feed.xml",
            "https://a.example/feed.xml",
            "https://b.example/feed.xml",
        ]

        results = await process_podcast_feeds(urls)

        assert list(results) == urls
        assert results["https://a.example/feed.xml"].data.name == "A"
        assert len(results["https://a.example/feed.xml"].data.episodes) == MAX_EPISODES
        assert results["https://b.example/feed.xml"].success is False
        assert results["https://c.example/feed.xml"].data.name == "C"

    @respx.mock
    @pytest.mark.asyncio
    async def test_duplicates_processed_once(self) -> None:
        """Test that repeated URLs are fetched once."""
        route = respx.get(FEED_URL).mock(return_value=httpx.Response(200, text="<rss/>"))

        results = await process_podcast_feeds([FEED_URL, FEED_URL])

        assert list(results) == [FEED_URL]
        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_no_urls(self) -> None:
        """Test an empty batch."""
        assert await process_podcast_feeds([]) == {}


class TestParseFeedText:
    """Tests for packaging documents the caller already has."""

    def test_success(self, sample_rss_feed: str) -> None:
        """Test that local documents are always successful."""
        result = parse_feed_text(sample_rss_feed)

        assert isinstance(result, FeedResult)
        assert result.success is True
        assert result.data.author == "Luna Star"

    def test_limit_from_config(self, feed_builder: Callable[..., str]) -> None:
        """Test the configured episode cap."""
        config = Config(parser=ParserConfig(max_episodes=2))

        result = parse_feed_text(feed_builder(5), config=config)

        assert len(result.data.episodes) == 2
