from pydantic import BaseModel, ConfigDict, Field


class ContentItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    video_id: str = Field("", alias="videoId")
    views: int = 0


class ChannelMeta(BaseModel):
    name: str = ""
    handle: str = ""
    niche: str = ""
    description: str = ""
    audience: str = ""
    subscribers: int = 0


class DatasetStats(BaseModel):
    video_count: int = 0
    total_views: int = 0
    avg_views: int = 0
    median_views: int = 0


class SuggestedTopic(BaseModel):
    model_config = ConfigDict(extra="allow")

    topic: str | None = None
    description: str | None = None


class InsightResult(BaseModel):
    """Service reply as returned. Keys the service omitted stay unset,
    so dump with exclude_unset=True to pass the reply through unchanged."""

    model_config = ConfigDict(extra="allow")

    ok: bool = False
    summary: str | None = None
    engagement_insights: str | None = None
    recommendations: list[str] | None = None
    top_videos: list[str] | None = None
    suggested_topics: list[SuggestedTopic] | None = None
