"""Click CLI entry point for trendwise."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click
import httpx
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from trendwise.capabilities import Capabilities
from trendwise.config import Config, get_app_dir
from trendwise.exceptions import GenerationFailure
from trendwise.utils.logger import setup_logger_from_config
from trendwise.utils.slug import generate_slug

console = Console()


def _init(config_path: str | None = None) -> Config:
    """Load config and configure logging."""
    config = Config.load(config_path)
    setup_logger_from_config(config)
    return config


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.pass_context
def cli(ctx, config_path: str | None):
    """TrendWise: turn trending topics into media-rich articles."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# =============================================================================
# config
# =============================================================================

@cli.command("config")
@click.pass_context
def config_cmd(ctx):
    """Show configuration paths, provider and credential warnings."""
    config_path = ctx.obj.get("config_path")
    cwd_config = Path.cwd() / "config" / "config.yaml"
    app_config = get_app_dir() / "config.yaml"

    console.print(Panel("[bold]Configuration[/bold]", border_style="cyan"))
    console.print(f"  CWD config:      {'[green]exists' if cwd_config.exists() else '[dim]not found'}[/] {cwd_config}")
    console.print(f"  App dir config:  {'[green]exists' if app_config.exists() else '[dim]not found'}[/] {app_config}")
    if config_path:
        console.print(f"  [bold]Active config:[/bold] [green]{config_path}[/green] (--config flag)")

    config = _init(config_path)
    console.print(f"\n  [bold]Provider:[/bold] {config.llm_provider or '[red]unsupported[/red]'}")
    console.print(f"  [bold]Model:[/bold] {config.get('generation.model')}")

    console.print("\n  [bold]Channels:[/bold]")
    for cap in Capabilities.from_config(config).all():
        mark = "[green]✓[/green]" if cap.available else "[dim]-[/dim]"
        console.print(f"    {mark} {cap.name}: {cap.reason}")
    console.print()

    warnings = config.validate()
    for warning in warnings:
        console.print(f"  [yellow]![/yellow] {warning}")
    if not warnings:
        console.print("  [green]All credentials configured[/green]")


# =============================================================================
# trends
# =============================================================================

@cli.command("trends")
@click.option("--limit", default=10, show_default=True, help="Number of topics to show")
@click.pass_context
def trends_cmd(ctx, limit: int):
    """Fetch and merge trending topics from all sources."""
    from trendwise.trends.aggregator import fetch_all_trending_topics

    config = _init(ctx.obj.get("config_path"))
    topics = asyncio.run(fetch_all_trending_topics(config))

    table = Table(title=f"Trending topics ({len(topics)} total)")
    table.add_column("#", style="dim", width=3)
    table.add_column("Title", style="bold")
    table.add_column("Source", style="cyan")
    table.add_column("Volume")
    table.add_column("Related", style="dim")

    for i, topic in enumerate(topics[:limit], 1):
        table.add_row(
            str(i),
            topic.title,
            topic.source.value,
            topic.search_volume or "-",
            ", ".join(topic.related_queries[:3]),
        )
    console.print(table)


# =============================================================================
# enrich
# =============================================================================

@cli.command("enrich")
@click.argument("topic")
@click.pass_context
def enrich_cmd(ctx, topic: str):
    """Gather images, videos, posts and related articles for TOPIC."""
    from trendwise.media.enricher import enrich_topic_with_media
    from trendwise.trends.models import TrendingTopic

    config = _init(ctx.obj.get("config_path"))
    enriched = asyncio.run(enrich_topic_with_media(TrendingTopic(title=topic), config))

    media = enriched.media
    console.print(Panel(
        f"Images: {len(media.images)}\nVideos: {len(media.videos)}\n"
        f"Tweets: {len(media.tweets)}\nRelated articles: {len(enriched.related_articles)}",
        title=topic,
        border_style="cyan",
    ))
    for article in enriched.related_articles:
        console.print(f"  • {article.title} [dim]({article.source})[/dim]")


# =============================================================================
# generate
# =============================================================================

@cli.command("generate")
@click.option("--topic", default=None, help="Topic to write about (default: pick a trending topic)")
@click.option("--output", "output_path", type=click.Path(dir_okay=False), default=None,
              help="Write the article record as JSON to this file")
@click.pass_context
def generate_cmd(ctx, topic: str | None, output_path: str | None):
    """Generate an article from a topic or from current trends."""
    from trendwise.pipeline import TrendPipeline

    config = _init(ctx.obj.get("config_path"))

    async def _run():
        async with httpx.AsyncClient() as client:
            return await TrendPipeline(config, client).generate(topic)

    try:
        result = asyncio.run(_run())
    except GenerationFailure as e:
        console.print(f"[red]Failed to generate article: {e}[/red]")
        raise click.Abort()

    article = result.article
    console.print(Panel(
        f"{article.excerpt}\n\n[dim]slug:[/dim] {result.slug}\n"
        f"[dim]source:[/dim] {result.persisted_source}\n"
        f"[dim]media:[/dim] {len(article.media.images)} images, "
        f"{len(article.media.videos)} videos, {len(article.media.tweets)} tweets",
        title=article.title,
        border_style="green",
    ))

    if output_path:
        Path(output_path).write_text(json.dumps(result.to_record(), indent=2))
        console.print(f"[green]Wrote {output_path}[/green]")


# =============================================================================
# slug
# =============================================================================

@cli.command("slug")
@click.argument("title")
def slug_cmd(title: str):
    """Print the URL slug for TITLE."""
    click.echo(generate_slug(title))


# =============================================================================
# Entry point
# =============================================================================

if __name__ == "__main__":
    cli()
