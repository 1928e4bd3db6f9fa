"""Podcast feed parsing.

Turns a raw RSS document into a PodcastSummary. Two engines are available:

* ``pattern`` (default): tag matching via ``podfeed.services.extract``.
  Tolerates markup no XML parser accepts, with the shallow-matching caveat
  documented there.
* ``feedparser``: structural parsing with feedparser. Fields are attributed
  to the right element, so output for malformed feeds can differ from the
  pattern engine.

Both engines are total: any input, including an empty string, produces a
summary, with missing fields replaced by their defaults.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any

import feedparser

from podfeed.core.errors import ConfigError
from podfeed.core.models import (
    DEFAULT_DURATION,
    DEFAULT_EPISODE_TITLE,
    DEFAULT_PODCAST_NAME,
    MAX_EPISODES,
    EpisodeSummary,
    PodcastSummary,
)
from podfeed.services.extract import (
    extract_enclosure_url,
    extract_image_url,
    extract_item_image_url,
    extract_tag,
    generate_episode_id,
    iter_item_blocks,
)

logger = logging.getLogger(__name__)

FeedParserFunc = Callable[..., PodcastSummary]


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _normalize_pub_date(date_str: str | None) -> str:
    """Convert a feed date to ISO-8601.

    RSS feeds typically use RFC 2822 dates; ISO-8601 is accepted as well.
    Dates without an offset are taken as UTC.

    Args:
        date_str: The pubDate text from the feed.

    Returns:
        ISO-8601 timestamp, or the current time if the date is missing or
        cannot be parsed.
    """
    if not date_str:
        return _now_iso()

    parsed: datetime | None
    try:
        parsed = parsedate_to_datetime(date_str)
    except (ValueError, TypeError, IndexError):
        # Try ISO format as fallback
        try:
            parsed = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
        except ValueError:
            parsed = None

    if parsed is None:
        logger.debug("Unparseable pubDate %r, using current time", date_str)
        return _now_iso()

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.isoformat()


def _clamp_limit(max_episodes: int) -> int:
    return max(1, min(max_episodes, MAX_EPISODES))


def _parse_item_block(block: str) -> EpisodeSummary | None:
    """Build an episode from one ``<item>`` block, or None without audio."""
    audio_url = extract_enclosure_url(block)
    if not audio_url:
        return None

    return EpisodeSummary(
        title=extract_tag(block, "title") or DEFAULT_EPISODE_TITLE,
        description=extract_tag(block, "description") or "",
        published_at=_normalize_pub_date(extract_tag(block, "pubDate")),
        duration=extract_tag(block, "itunes:duration") or DEFAULT_DURATION,
        guid=extract_tag(block, "guid") or generate_episode_id(),
        audio_url=audio_url,
        image_url=extract_item_image_url(block),
    )


def parse_feed(xml_text: str, *, max_episodes: int = MAX_EPISODES) -> PodcastSummary:
    """Parse a podcast RSS document with tag matching.

    Args:
        xml_text: Raw feed document.
        max_episodes: Episode cap, clamped to 1..MAX_EPISODES.

    Returns:
        PodcastSummary whose episodes are the first items carrying an
        enclosure, in document order.
    """
    limit = _clamp_limit(max_episodes)

    episodes: list[EpisodeSummary] = []
    for block in iter_item_blocks(xml_text):
        if len(episodes) >= limit:
            logger.debug("Episode limit of %d reached, ignoring remaining items", limit)
            break

        episode = _parse_item_block(block)
        if episode is None:
            logger.debug("Skipping item without enclosure URL")
            continue
        episodes.append(episode)

    return PodcastSummary(
        name=extract_tag(xml_text, "title") or DEFAULT_PODCAST_NAME,
        description=extract_tag(xml_text, "description") or "",
        author=extract_tag(xml_text, "itunes:author") or extract_tag(xml_text, "author") or "",
        image_url=extract_image_url(xml_text),
        episodes=episodes,
    )


def _text(value: Any) -> str:
    """Coerce a feedparser value to stripped text."""
    if value is None:
        return ""
    return str(value).strip()


def _structured_enclosure_url(entry: Any) -> str | None:
    for enclosure in entry.get("enclosures", []):
        href = _text(enclosure.get("href") or enclosure.get("url"))
        if href:
            return href
    return None


def _structured_image_url(node: Any) -> str | None:
    image = node.get("image")
    if isinstance(image, dict):
        href = _text(image.get("href") or image.get("url"))
        if href:
            return href
    return None


def _structured_entry(entry: Any, channel_image_url: str | None) -> EpisodeSummary | None:
    audio_url = _structured_enclosure_url(entry)
    if not audio_url:
        return None

    # Stable across calls: guid, then link, then the audio URL
    guid = _text(entry.get("id")) or _text(entry.get("link")) or audio_url

    return EpisodeSummary(
        title=_text(entry.get("title")) or DEFAULT_EPISODE_TITLE,
        description=_text(entry.get("description") or entry.get("summary")),
        published_at=_normalize_pub_date(_text(entry.get("published")) or None),
        duration=_text(entry.get("itunes_duration")) or DEFAULT_DURATION,
        guid=guid,
        audio_url=audio_url,
        image_url=_structured_image_url(entry) or channel_image_url,
    )


def parse_feed_structured(
    xml_text: str, *, max_episodes: int = MAX_EPISODES
) -> PodcastSummary:
    """Parse a podcast RSS document with feedparser.

    Same defaults, cap and enclosure rule as ``parse_feed``. Descriptions
    fall back to ``itunes:summary`` and the author falls back to the
    ``itunes:owner`` name. Episodes without artwork use the channel image, and
    episodes without a guid take their link or audio URL as guid.

    Args:
        xml_text: Raw feed document.
        max_episodes: Episode cap, clamped to 1..MAX_EPISODES.

    Returns:
        PodcastSummary built from the parsed tree.
    """
    limit = _clamp_limit(max_episodes)
    # Hand feedparser a stream so document text is never taken for a URL or path
    parsed = feedparser.parse(
        io.BytesIO(xml_text.encode("utf-8")),
        response_headers={"content-type": "application/xml; charset=utf-8"},
    )

    if parsed.bozo:
        # Malformed feeds are still used as far as feedparser got
        logger.debug("feedparser reported a malformed feed: %s", parsed.get("bozo_exception"))

    channel = parsed.feed
    channel_image_url = _structured_image_url(channel)
    episodes: list[EpisodeSummary] = []
    for entry in parsed.entries:
        if len(episodes) >= limit:
            logger.debug("Episode limit of %d reached, ignoring remaining items", limit)
            break

        episode = _structured_entry(entry, channel_image_url)
        if episode is None:
            logger.debug("Skipping entry without enclosure URL")
            continue
        episodes.append(episode)

    publisher = channel.get("publisher_detail") or {}
    author = (
        _text(channel.get("itunes_author"))
        or _text(channel.get("author"))
        or _text(publisher.get("name"))
    )

    return PodcastSummary(
        name=_text(channel.get("title")) or DEFAULT_PODCAST_NAME,
        description=_text(channel.get("description") or channel.get("summary")),
        author=author,
        image_url=channel_image_url,
        episodes=episodes,
    )


_ENGINES: dict[str, FeedParserFunc] = {
    "pattern": parse_feed,
    "feedparser": parse_feed_structured,
}


def get_parser(engine: str = "pattern") -> FeedParserFunc:
    """Resolve a parser engine by name.

    Raises:
        ConfigError: If the engine name is unknown.
    """
    try:
        return _ENGINES[engine]
    except KeyError:
        raise ConfigError(
            f"Unknown parser engine '{engine}'. Valid options: {', '.join(sorted(_ENGINES))}"
        ) from None
