"""Tag-level extraction primitives for podcast RSS documents.

These helpers match markup with regular expressions instead of building an
XML tree, so undeclared namespace prefixes or stray ampersands in a feed do
not stop extraction.

Matching is shallow: ``extract_tag`` returns the first ``<tag>...</tag>``
pair in the search window without tracking nesting depth. At channel level
this means a same-named tag inside a later element can be picked up, e.g. the
first item's ``<description>`` when the channel has none. Item fields are
searched inside their own ``<item>`` block, which bounds the leak to a single
episode.

Only attribute-free open tags match. ``<guid isPermaLink="false">abc</guid>``
is therefore treated as absent, and such items get a synthetic ``ep-`` id.
Attribute values are located after whitespace, so ``data-url`` is never
taken for ``url``.
"""

from __future__ import annotations

import random
import re
import string
from collections.abc import Iterator

EPISODE_ID_PREFIX = "ep-"
EPISODE_ID_LENGTH = 7

_BASE36_ALPHABET = string.digits + string.ascii_lowercase

_ITEM_PATTERN = re.compile(r"<item>(.*?)</item>", re.DOTALL | re.IGNORECASE)

# Attribute-style artwork, e.g. <itunes:image href="..."/>
_ITUNES_IMAGE_PATTERN = re.compile(
    r"<itunes:image\b[^>]*?\shref=([\"'])(.*?)\1", re.DOTALL
)

# Element-style artwork, e.g. <image><url>...</url></image>
_RSS_IMAGE_PATTERN = re.compile(r"<image>.*?<url>(.*?)</url>.*?</image>", re.DOTALL)

_ENCLOSURE_PATTERN = re.compile(r"<enclosure\b[^>]*?\surl=([\"'])(.*?)\1", re.DOTALL)


def extract_tag(text: str, tag_name: str) -> str | None:
    """Extract the text of the first ``<tag_name>`` element.

    Args:
        text: Markup to search.
        tag_name: Literal tag name, prefixes included (``itunes:author``).

    Returns:
        The trimmed inner text, ``""`` for an empty element, or None when
        the tag does not occur.
    """
    name = re.escape(tag_name)
    match = re.search(rf"<{name}>(.*?)</{name}>", text, re.DOTALL)
    return match.group(1).strip() if match else None


def extract_image_url(text: str) -> str | None:
    """Find artwork, preferring ``itunes:image`` over ``<image><url>``."""
    match = _ITUNES_IMAGE_PATTERN.search(text)
    if match and match.group(2).strip():
        return match.group(2).strip()

    match = _RSS_IMAGE_PATTERN.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()

    return None


def extract_item_image_url(text: str) -> str | None:
    """Artwork for a single item; only the attribute style is used per item."""
    match = _ITUNES_IMAGE_PATTERN.search(text)
    if match and match.group(2).strip():
        return match.group(2).strip()
    return None


def extract_enclosure_url(text: str) -> str | None:
    """Return the ``url`` attribute of the first enclosure, if non-empty."""
    match = _ENCLOSURE_PATTERN.search(text)
    if match and match.group(2).strip():
        return match.group(2).strip()
    return None


def iter_item_blocks(text: str) -> Iterator[str]:
    """Yield the inner markup of every ``<item>`` block in document order."""
    for match in _ITEM_PATTERN.finditer(text):
        yield match.group(1)


def generate_episode_id() -> str:
    """Build a short random identifier for items without a guid.

    The token is only meant to be distinct within one parse call. It is
    not stable across calls; use ``EpisodeSummary.dedup_key`` for that.
    """
    suffix = "".join(random.choices(_BASE36_ALPHABET, k=EPISODE_ID_LENGTH))
    return EPISODE_ID_PREFIX + suffix
