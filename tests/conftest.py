"""Pytest fixtures for podfeed tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from podfeed.core.models import EpisodeSummary, PodcastSummary

RSS_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <title>{title}</title>
    <description>{description}</description>
    {items}
  </channel>
</rss>
"""

ITEM_TEMPLATE = """\
<item>
  <title>{title}</title>
  <guid>{guid}</guid>
  <pubDate>Mon, 15 Jan 2024 12:00:00 +0000</pubDate>
  <enclosure url="{media_url}" type="audio/mpeg" length="12345"/>
</item>
"""


def build_feed(
    item_count: int,
    title: str = "Test Podcast",
    description: str = "A test podcast",
) -> str:
    """Create an RSS document with numbered, fully populated items."""
    items = "\n".join(
        ITEM_TEMPLATE.format(
            title=f"Episode {i}",
            guid=f"guid-{i}",
            media_url=f"https://example.com/ep{i}.mp3",
        )
        for i in range(1, item_count + 1)
    )
    return RSS_TEMPLATE.format(title=title, description=description, items=items)


@pytest.fixture
def feed_builder() -> Callable[..., str]:
    """Expose build_feed to tests."""
    return build_feed


@pytest.fixture
def sample_rss_feed() -> str:
    """Create a sample podcast feed with iTunes tags."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <title>  Cosmic Weather  </title>
    <description>Weekly astrology forecasts</description>
    <itunes:author>Luna Star</itunes:author>
    <itunes:image href="https://example.com/cover.jpg"/>
    <item>
      <title>Mercury Retrograde Survival Guide</title>
      <description>How to get through it.</description>
      <pubDate>Mon, 15 Jan 2024 12:00:00 +0000</pubDate>
      <guid>cw-001</guid>
      <itunes:duration>42:10</itunes:duration>
      <itunes:image href="https://example.com/ep1.jpg"/>
      <enclosure url="https://example.com/ep1.mp3" type="audio/mpeg" length="1000000"/>
    </item>
    <item>
      <title>Full Moon in Cancer</title>
      <description>Emotions run high.</description>
      <pubDate>Mon, 08 Jan 2024 12:00:00 +0000</pubDate>
      <guid>cw-002</guid>
      <itunes:duration>38:00</itunes:duration>
      <enclosure url="https://example.com/ep2.mp3" type="audio/mpeg" length="1000000"/>
    </item>
  </channel>
</rss>"""


@pytest.fixture
def sample_episode() -> EpisodeSummary:
    """Create a sample episode for testing."""
    return EpisodeSummary(
        title="Test Episode",
        description="A test episode",
        published_at="2024-01-15T12:00:00+00:00",
        duration="30:00",
        guid="guid-1",
        audio_url="https://example.com/episode.mp3",
    )


@pytest.fixture
def sample_podcast(sample_episode: EpisodeSummary) -> PodcastSummary:
    """Create a sample podcast summary for testing."""
    return PodcastSummary(
        name="Test Podcast",
        description="A test podcast",
        author="Test Author",
        image_url="https://example.com/artwork.jpg",
        episodes=[sample_episode],
    )


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no local or global config files."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "podfeed.core.config.GLOBAL_CONFIG_PATH", tmp_path / "home" / ".podfeed" / "config"
    )
    monkeypatch.delenv("PODFEED_USER_AGENT", raising=False)
    return tmp_path
