import math
from collections.abc import Iterable, Mapping
from itertools import islice

from models import ChannelMeta, ContentItem, DatasetStats

MAX_ITEMS = 12
TOP_K = 3


def _to_count(value) -> int | None:
    """Parse a view/subscriber count, or None if it is not a finite number >= 0."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None

    text = str(value).strip()
    try:
        # exact for integer strings above 2**53
        number = int(text)
        return number if number >= 0 else None
    except ValueError:
        pass
    try:
        number = float(text or "nan")
    except ValueError:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return int(number)


def _to_text(value) -> str:
    return "" if value is None else str(value)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def coerce_item(raw) -> ContentItem:
    if not isinstance(raw, Mapping):
        return ContentItem()

    stats = raw.get("stats")
    if not isinstance(stats, Mapping):
        stats = {}

    # Nested stats win over flat keys; viewCount wins over views.
    views = 0
    for candidate in (stats.get("viewCount"), stats.get("views"), raw.get("viewCount"), raw.get("views")):
        parsed = _to_count(candidate)
        if parsed is not None:
            views = parsed
            break

    return ContentItem(
        title=_to_text(raw.get("title")),
        video_id=_to_text(raw.get("videoId", raw.get("id"))),
        views=views,
    )


def coerce_meta(raw) -> ChannelMeta:
    if not isinstance(raw, Mapping):
        return ChannelMeta()
    return ChannelMeta(
        name=_to_text(raw.get("name")),
        handle=_to_text(raw.get("handle")),
        niche=_to_text(raw.get("niche")),
        description=_to_text(raw.get("description")),
        audience=_to_text(raw.get("audience")),
        subscribers=_to_count(raw.get("subscribers")) or 0,
    )


def compact_dataset(items) -> list[ContentItem]:
    """Keep the first MAX_ITEMS entries and coerce each into a ContentItem."""
    if not isinstance(items, Iterable) or isinstance(items, (str, bytes, Mapping)):
        return []
    return [coerce_item(raw) for raw in islice(items, MAX_ITEMS)]


def top_by_views(items: list[ContentItem], k: int = TOP_K) -> list[ContentItem]:
    # sorted() is stable with reverse=True, so ties keep input order
    return sorted(items, key=lambda v: v.views, reverse=True)[:k]


def compute_stats(items: list[ContentItem]) -> DatasetStats:
    views = [v.views for v in items]
    if not views:
        return DatasetStats()

    total = sum(views)
    ordered = sorted(views)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        median = ordered[mid]
    else:
        median = _round_half_up((ordered[mid - 1] + ordered[mid]) / 2)

    return DatasetStats(
        video_count=len(views),
        total_views=total,
        avg_views=_round_half_up(total / len(views)),
        median_views=median,
    )
