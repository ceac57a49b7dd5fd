from types import SimpleNamespace


class FakeCompletions:
    def __init__(self, content="", error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeClient:
    def __init__(self, content="", error=None):
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)

    @property
    def calls(self):
        return self.completions.calls


def make_videos(views):
    return [
        {"videoId": f"vid{i}", "title": f"Video {i}", "stats": {"viewCount": str(v)}}
        for i, v in enumerate(views)
    ]


def make_response(**overrides) -> dict:
    body = {
        "ok": True,
        "summary": "A cooking channel for busy students focused on cheap fast meals.",
        "engagement_insights": "Short recipe titles with a price hook outperform long vlogs.",
        "recommendations": [f"Recommendation {i}" for i in range(1, 6)],
        "top_videos": ["Video 11", "Video 10", "Video 9"],
        "suggested_topics": [
            {"topic": f"Topic {i}", "description": f"Description {i}."} for i in range(1, 11)
        ],
    }
    body.update(overrides)
    return body
