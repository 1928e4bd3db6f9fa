"""Service modules for podfeed."""

from podfeed.services.extract import (
    extract_enclosure_url,
    extract_image_url,
    extract_tag,
    generate_episode_id,
    iter_item_blocks,
)
from podfeed.services.fetcher import (
    build_client,
    fetch_feed,
)
from podfeed.services.ingest import (
    parse_feed_text,
    process_podcast_feed,
    process_podcast_feeds,
)
from podfeed.services.parser import (
    get_parser,
    parse_feed,
    parse_feed_structured,
)

__all__ = [
    "build_client",
    "extract_enclosure_url",
    "extract_image_url",
    "extract_tag",
    "fetch_feed",
    "generate_episode_id",
    "get_parser",
    "iter_item_blocks",
    "parse_feed",
    "parse_feed_structured",
    "parse_feed_text",
    "process_podcast_feed",
    "process_podcast_feeds",
]
