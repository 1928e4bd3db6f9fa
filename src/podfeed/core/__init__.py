"""Core modules for podfeed."""

from podfeed.core.config import (
    Config,
    FetchConfig,
    ParserConfig,
    load_config,
)
from podfeed.core.errors import (
    ConfigError,
    FetchError,
    PodfeedError,
)
from podfeed.core.models import (
    MAX_EPISODES,
    EpisodeSummary,
    FeedResult,
    PodcastSummary,
)

__all__ = [
    "Config",
    "FetchConfig",
    "ParserConfig",
    "load_config",
    "ConfigError",
    "FetchError",
    "PodfeedError",
    "MAX_EPISODES",
    "EpisodeSummary",
    "FeedResult",
    "PodcastSummary",
]
