"""HTTP retrieval of podcast feed documents."""

from __future__ import annotations

import logging

import httpx

from podfeed.core.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from podfeed.core.errors import FetchError

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 5

FEED_ACCEPT_HEADER = "application/rss+xml, application/xml, text/xml, */*"


def build_client(
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
) -> httpx.AsyncClient:
    """Create an AsyncClient configured for feed requests."""
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        max_redirects=MAX_REDIRECTS,
        headers={
            "User-Agent": user_agent,
            "Accept": FEED_ACCEPT_HEADER,
        },
    )


async def fetch_feed(
    feed_url: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
) -> str:
    """
    Download a feed document.

    Args:
        feed_url: URL of the podcast RSS feed
        client: Optional httpx client; it is left open for the caller
        timeout: Request timeout in seconds when no client is given
        user_agent: User-Agent header when no client is given

    Returns:
        The response body as text

    Raises:
        FetchError: If the URL is empty, the server answers with a non-2xx
            status, or the request fails at the transport level
    """
    if not feed_url or not feed_url.strip():
        raise FetchError("Feed URL cannot be empty")

    feed_url = feed_url.strip()

    should_close_client = client is None
    if client is None:
        client = build_client(timeout=timeout, user_agent=user_agent)

    logger.info("Fetching feed %s", feed_url)
    try:
        response = await client.get(feed_url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        raise FetchError(
            f"Failed to fetch RSS feed: {status} {e.response.reason_phrase}".rstrip(),
            status_code=status,
        ) from e
    except httpx.TimeoutException as e:
        if should_close_client:
            raise FetchError(f"RSS feed request timed out after {timeout} seconds") from e
        # An injected client carries its own timeout
        raise FetchError("RSS feed request timed out") from e
    except httpx.HTTPError as e:
        raise FetchError(f"Failed to connect to RSS feed: {e}") from e
    except httpx.InvalidURL as e:
        raise FetchError(f"Invalid feed URL {feed_url!r}: {e}") from e
    finally:
        if should_close_client:
            await client.aclose()

    logger.info("Fetched feed %s (%d characters)", feed_url, len(response.text))
    return response.text
