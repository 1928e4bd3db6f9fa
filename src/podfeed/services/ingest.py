"""Feed ingestion: fetch, parse and package results.

Every public entry point returns a FeedResult envelope. Fetch failures
become ``FeedResult.fail``; parsing has no failure mode of its own.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

import httpx

from podfeed.core.config import Config
from podfeed.core.errors import FetchError
from podfeed.core.models import FeedResult
from podfeed.services.fetcher import fetch_feed
from podfeed.services.parser import get_parser

logger = logging.getLogger(__name__)


def parse_feed_text(xml_text: str, *, config: Config | None = None) -> FeedResult:
    """Parse a feed document the caller already holds.

    Args:
        xml_text: Raw feed document.
        config: Settings for engine and episode cap; defaults if omitted.

    Returns:
        A successful FeedResult.
    """
    config = config or Config()
    parse = get_parser(config.parser.engine)
    summary = parse(xml_text, max_episodes=config.parser.max_episodes)
    logger.debug("Parsed feed '%s' with %d episodes", summary.name, len(summary.episodes))
    return FeedResult.ok(summary)


async def process_podcast_feed(
    feed_url: str,
    *,
    client: httpx.AsyncClient | None = None,
    config: Config | None = None,
) -> FeedResult:
    """
    Fetch a podcast feed and extract its podcast and episode records.

    Args:
        feed_url: URL of the podcast RSS feed
        client: Optional httpx client, e.g. a shared or mocked one
        config: Settings for fetching and parsing; defaults if omitted

    Returns:
        ``FeedResult.ok`` with the PodcastSummary, or ``FeedResult.fail``
        carrying the fetch error message

    Raises:
        ConfigError: If the configured parser engine is unknown
    """
    config = config or Config()
    parse = get_parser(config.parser.engine)

    try:
        xml_text = await fetch_feed(
            feed_url,
            client=client,
            timeout=config.fetch.timeout,
            user_agent=config.get_user_agent(),
        )
    except FetchError as e:
        logger.warning("Error processing podcast feed %s: %s", feed_url, e)
        return FeedResult.fail(str(e))

    summary = parse(xml_text, max_episodes=config.parser.max_episodes)
    logger.info("Extracted %d episodes from '%s'", len(summary.episodes), summary.name)
    return FeedResult.ok(summary)


async def process_podcast_feeds(
    feed_urls: Iterable[str],
    *,
    client: httpx.AsyncClient | None = None,
    config: Config | None = None,
) -> dict[str, FeedResult]:
    """
    Ingest several feeds concurrently.

    Args:
        feed_urls: Feed URLs; duplicates are processed once
        client: Optional httpx client shared by all requests
        config: Settings for fetching and parsing; defaults if omitted

    Returns:
        Mapping of feed URL to its FeedResult, in input order
    """
    urls = list(dict.fromkeys(feed_urls))
    results = await asyncio.gather(
        *(process_podcast_feed(url, client=client, config=config) for url in urls)
    )
    return dict(zip(urls, results, strict=True))
