import argparse
import json
import logging
import re
from datetime import datetime
from pathlib import Path

import openai
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

import config
import youtube_api
from ai_analyzer import analyze_videos
from config import InsightConfig
from dataset import compact_dataset
from errors import InsightError
from models import InsightResult

console = Console()


def _format_number(n: int | None) -> str:
    if n is None:
        return "N/A"
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)


def _sanitize_filename(s: str) -> str:
    return re.sub(r'[^\w\-]', '_', s)[:50]


def _load_source(source: str) -> tuple[list, dict]:
    """Resolve a dataset file, a channel ID, @handle or channel URL into (videos, meta)."""
    path = Path(source)
    if path.suffix == ".json" and path.is_file():
        data = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(data, dict):
            return data.get("videos") or [], data.get("channel") or {}
        return data, {}

    console.print(f"[dim]Fetching uploads for {source}...[/dim]")
    return youtube_api.fetch_channel(source)


def _print_result(result: InsightResult, videos: list):
    console.print(f"\n[bold]Summary[/bold]\n{result.summary or ''}")
    console.print(f"\n[bold]Engagement[/bold]\n{result.engagement_insights or ''}")

    views_by_title = {}
    for v in compact_dataset(videos):
        views_by_title.setdefault(v.title, v.views)

    top = Table(title="Top videos", show_lines=True)
    top.add_column("#", justify="right", style="dim")
    top.add_column("Title", style="cyan", max_width=60)
    top.add_column("Views", justify="right", style="yellow")
    for i, title in enumerate(result.top_videos or [], 1):
        top.add_row(str(i), title, _format_number(views_by_title.get(title)))
    console.print(top)

    recs = Table(title="Recommendations", show_lines=True)
    recs.add_column("#", justify="right", style="dim")
    recs.add_column("Recommendation", style="white", max_width=90)
    for i, rec in enumerate(result.recommendations or [], 1):
        recs.add_row(str(i), rec)
    console.print(recs)

    topics = Table(title="Suggested topics", show_lines=True)
    topics.add_column("Topic", style="magenta", max_width=30)
    topics.add_column("Description", style="white", max_width=70)
    for t in result.suggested_topics or []:
        topics.add_row(t.topic or "", t.description or "")
    console.print(topics)


def _save_json(result: InsightResult, source: str) -> str:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = f"insights_{_sanitize_filename(Path(source).stem or source)}_{timestamp}.json"
    with open(filename, "w", encoding="utf-8") as f:
        json.dump(result.model_dump(exclude_unset=True), f, ensure_ascii=False, indent=2)
    console.print(f"\n[green]Results saved to {filename}[/green]")
    return filename


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="YouTube Channel Insights")
    parser.add_argument("source", help="Dataset JSON file, channel ID (UC...), @handle or channel URL")
    parser.add_argument("--model", help=f"Override the model (default: {config.DEFAULT_MODEL})")
    parser.add_argument("--strict", action="store_true", help="Reject responses with the wrong array sizes")
    parser.add_argument("--json-only", action="store_true", help="Output JSON only, no tables")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    settings = InsightConfig.from_env(model=args.model, strict_schema=args.strict or None)

    videos, meta = _load_source(args.source)
    if not videos:
        console.print("[red]No videos found.[/red]")
        return 1

    console.print(f"[green]Loaded {len(videos)} videos[/green]")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"Analyzing {len(videos)} videos with {settings.model}...", total=None)
            result = analyze_videos(videos, meta, config=settings)
    except (InsightError, openai.APIError) as e:
        console.print(f"[red]{type(e).__name__}: {e}[/red]")
        return 1

    if not args.json_only:
        _print_result(result, videos)

    _save_json(result, args.source)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
