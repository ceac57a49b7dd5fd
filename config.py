import os

from dotenv import load_dotenv
from pydantic import BaseModel

from errors import ConfigurationError

load_dotenv()

DEFAULT_MODEL = "llama-3.1-8b-instant"
DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"

YOUTUBE_API_KEY: str = os.getenv("YOUTUBE_API_KEY", "")


class InsightConfig(BaseModel):
    api_key: str = ""
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    temperature: float = 0.2
    max_tokens: int = 900
    top_p: float = 1.0
    strict_schema: bool = False

    @classmethod
    def from_env(cls, **overrides) -> "InsightConfig":
        values = {
            "api_key": os.getenv("GROQ_API_KEY", ""),
            "model": os.getenv("GROQ_MODEL") or DEFAULT_MODEL,
            "base_url": os.getenv("GROQ_BASE_URL") or DEFAULT_BASE_URL,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("Missing GROQ_API_KEY")
        return self.api_key


def has_youtube_api() -> bool:
    return bool(YOUTUBE_API_KEY)
