"""CLI output formatting utilities."""

import json

from rich.console import Console
from rich.table import Table

from podfeed.core.models import FeedResult, PodcastSummary
from podfeed.utils.text import collapse_whitespace, truncate_text

DESCRIPTION_PREVIEW_LENGTH = 120


def display_podcast(summary: PodcastSummary, console: Console) -> None:
    """Display podcast details followed by its episodes."""
    console.print(f"[bold]{summary.name}[/bold]")
    if summary.author:
        console.print(f"Author: {summary.author}")
    if summary.image_url:
        console.print(f"Artwork: [cyan]{summary.image_url}[/cyan]")
    if summary.description:
        preview = truncate_text(
            collapse_whitespace(summary.description), DESCRIPTION_PREVIEW_LENGTH
        )
        console.print(f"[dim]{preview}[/dim]")

    if not summary.episodes:
        console.print("[yellow]No episodes found.[/yellow]")
        return

    table = Table(title="Episodes")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Published", style="green")
    table.add_column("Duration", style="cyan")
    table.add_column("Audio URL", no_wrap=True, overflow="ellipsis")

    for i, episode in enumerate(summary.episodes, 1):
        table.add_row(
            str(i),
            episode.title,
            episode.published_at[:10],
            episode.duration,
            episode.audio_url,
        )

    console.print(table)


def display_result(feed_url: str, result: FeedResult, console: Console) -> None:
    """Display a single ingestion result."""
    if result.success and result.data is not None:
        display_podcast(result.data, console)
    else:
        console.print(f"[red]Error:[/red] {feed_url}: {result.error}")


def format_results_json(results: dict[str, FeedResult]) -> str:
    """Render envelopes as JSON; a single result is printed unwrapped."""
    if len(results) == 1:
        (result,) = results.values()
        payload = result.to_dict()
    else:
        payload = {url: result.to_dict() for url, result in results.items()}
    return json.dumps(payload, indent=2, ensure_ascii=False)
