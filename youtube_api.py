import re

from googleapiclient.discovery import build

import config
import youtube_searcher
from config import YOUTUBE_API_KEY
from dataset import MAX_ITEMS

CHANNEL_ID = re.compile(r"^UC[\w-]{22}$")


def _build_client():
    return build("youtube", "v3", developerKey=YOUTUBE_API_KEY)


def fetch_channel_dataset(channel_id: str, max_videos: int = MAX_ITEMS, youtube=None) -> tuple[list[dict], dict]:
    """
    Pull recent uploads and channel meta from YouTube Data API v3.
    Returns raw video records ({videoId, title, stats: {viewCount}}) and a meta dict,
    both in the loose shape analyze_videos() accepts.
    """
    youtube = youtube or _build_client()

    ch_resp = youtube.channels().list(
        part="snippet,statistics,contentDetails",
        id=channel_id,
    ).execute()

    items = ch_resp.get("items", [])
    if not items:
        return [], {}

    channel = items[0]
    snippet = channel.get("snippet", {})
    stats = channel.get("statistics", {})
    meta = {
        "name": snippet.get("title", ""),
        "handle": snippet.get("customUrl", ""),
        "description": snippet.get("description", ""),
        "subscribers": int(stats.get("subscriberCount", 0)),
    }

    uploads_id = channel.get("contentDetails", {}).get("relatedPlaylists", {}).get("uploads")
    if not uploads_id:
        return [], meta

    pl_resp = youtube.playlistItems().list(
        part="contentDetails",
        playlistId=uploads_id,
        maxResults=min(max_videos, 50),
    ).execute()

    video_ids = [
        item["contentDetails"]["videoId"]
        for item in pl_resp.get("items", [])
    ]
    if not video_ids:
        return [], meta

    vid_resp = youtube.videos().list(
        part="snippet,statistics",
        id=",".join(video_ids),
    ).execute()

    # videos.list does not guarantee request order
    by_id = {item["id"]: item for item in vid_resp.get("items", [])}
    videos = []
    for vid in video_ids:
        item = by_id.get(vid)
        if not item:
            continue
        videos.append({
            "videoId": vid,
            "title": item.get("snippet", {}).get("title", ""),
            "stats": {"viewCount": item.get("statistics", {}).get("viewCount", 0)},
        })

    return videos, meta


def fetch_channel(source: str, max_videos: int = MAX_ITEMS) -> tuple[list[dict], dict]:
    """Channel ID, @handle or URL -> (videos, meta). Uses the Data API when a key is set, yt-dlp otherwise."""
    source = source.strip()
    if CHANNEL_ID.match(source) and config.has_youtube_api():
        return fetch_channel_dataset(source, max_videos)

    url = source
    if CHANNEL_ID.match(source):
        url = f"https://www.youtube.com/channel/{source}"
    elif source.startswith("@"):
        url = f"https://www.youtube.com/{source}"
    return youtube_searcher.fetch_channel_dataset(url, max_videos)
