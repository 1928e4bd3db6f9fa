"""Data models for podfeed."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any

from podfeed.utils.text import generate_slug

# Upper bound on episodes kept from a single feed
MAX_EPISODES = 10

DEFAULT_PODCAST_NAME = "Unnamed Podcast"
DEFAULT_EPISODE_TITLE = "Unnamed Episode"
DEFAULT_DURATION = "0:00"


@dataclass
class EpisodeSummary:
    """Represents one episode extracted from a feed item.

    Attributes:
        title: Episode title.
        description: Episode description, empty if the item has none.
        published_at: ISO-8601 timestamp. When the item has no usable pubDate
            this is the parse time, a placeholder rather than the real date.
        duration: Free-form duration string as found in the feed.
        guid: Feed guid, or a synthetic ``ep-`` token that is only unique
            within a single parse call.
        audio_url: Enclosure URL; never empty.
        image_url: Episode artwork, if the item carries its own.
    """

    title: str
    description: str
    published_at: str
    duration: str
    guid: str
    audio_url: str
    image_url: str | None = None

    @property
    def dedup_key(self) -> str:
        """Stable identifier derived from the audio URL."""
        return hashlib.sha256(self.audio_url.encode("utf-8")).hexdigest()

    def to_dict(self) -> dict[str, Any]:
        """Render the episode with wire (camelCase) field names."""
        return {
            "title": self.title,
            "description": self.description,
            "publishedAt": self.published_at,
            "duration": self.duration,
            "guid": self.guid,
            "audioUrl": self.audio_url,
            "imageUrl": self.image_url,
        }


@dataclass
class PodcastSummary:
    """Normalized podcast record with its most recent episodes."""

    name: str = DEFAULT_PODCAST_NAME
    description: str = ""
    author: str = ""
    image_url: str | None = None
    episodes: list[EpisodeSummary] = field(default_factory=list)

    @property
    def slug(self) -> str:
        """URL-safe slug of the podcast name."""
        return generate_slug(self.name)

    def to_dict(self) -> dict[str, Any]:
        """Render the podcast with wire (camelCase) field names."""
        return {
            "name": self.name,
            "description": self.description,
            "author": self.author,
            "imageUrl": self.image_url,
            "episodes": [episode.to_dict() for episode in self.episodes],
        }


@dataclass
class FeedResult:
    """Success/failure envelope returned by feed ingestion."""

    success: bool
    data: PodcastSummary | None = None
    error: str | None = None

    @classmethod
    def ok(cls, summary: PodcastSummary) -> FeedResult:
        return cls(success=True, data=summary)

    @classmethod
    def fail(cls, message: str) -> FeedResult:
        return cls(success=False, error=message)

    def to_dict(self) -> dict[str, Any]:
        """Render the envelope as ``{success, data}`` or ``{success, error}``."""
        if self.success and self.data is not None:
            return {"success": True, "data": self.data.to_dict()}
        return {"success": False, "error": self.error or ""}
