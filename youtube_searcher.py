import json
import logging
import subprocess

from dataset import MAX_ITEMS

log = logging.getLogger(__name__)


def _run_ytdlp(args: list[str], timeout: int = 120) -> str | None:
    try:
        result = subprocess.run(
            ["yt-dlp", *args],
            capture_output=True, text=True, timeout=timeout, encoding="utf-8"
        )
        return result.stdout if result.returncode == 0 else None
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        log.warning("yt-dlp failed: %s", e)
        return None


def _get_channel_videos(channel_url: str, max_videos: int) -> list[dict]:
    output = _run_ytdlp([
        f"{channel_url.rstrip('/')}/videos",
        "--dump-json",
        "--flat-playlist",
        "--playlist-items", f"1:{max_videos}",
        "--no-warnings",
        "--quiet",
    ])
    if not output:
        return []

    videos = []
    for line in output.strip().splitlines():
        try:
            videos.append(json.loads(line))
        except json.JSONDecodeError:
            continue
    return videos


def fetch_channel_dataset(channel_url: str, max_videos: int = MAX_ITEMS) -> tuple[list[dict], dict]:
    """Same output shape as youtube_api.fetch_channel_dataset, without an API key."""
    entries = _get_channel_videos(channel_url, max_videos)
    if not entries:
        return [], {}

    first = entries[0]
    meta = {
        "name": first.get("channel") or first.get("playlist_uploader") or first.get("uploader") or "",
        "handle": first.get("uploader_id") or first.get("playlist_uploader_id") or "",
        "subscribers": first.get("channel_follower_count") or 0,
    }

    videos = [
        {
            "videoId": e.get("id", ""),
            "title": e.get("title", ""),
            # flat-playlist entries may omit view_count
            "stats": {"views": e.get("view_count")},
        }
        for e in entries
    ]
    return videos, meta
