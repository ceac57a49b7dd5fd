import json
import logging
import re

from openai import OpenAI
from pydantic import ValidationError

from config import InsightConfig
from dataset import coerce_meta, compact_dataset, compute_stats, top_by_views
from errors import ResponseFormatError, ServiceLogicError
from models import ChannelMeta, ContentItem, DatasetStats, InsightResult

log = logging.getLogger(__name__)

EXPECTED_RECOMMENDATIONS = 5
EXPECTED_TOP_VIDEOS = 3
EXPECTED_TOPICS = 10

PROMPT_TEMPLATE = """
You are a YouTube strategist. Analyze INPUT_DATASET with special focus on TOP_BY_VIEWS and return STRICT JSON ONLY (no backticks, no commentary).

INPUT_DATASET:
{dataset}

TOP_BY_VIEWS (best performers by views, descending):
{top}

CHANNEL_META (use if helpful; otherwise infer from the data):
{meta}

DATA_STATS:
{stats}

RESPONSE_SCHEMA (return EXACT keys):
{{
  "ok": true,
  "summary": "3-5 sentences in ONE line (no line breaks). The summary MUST be about the CHANNEL overall (who it's for, niche/positioning, core value prop, and high-level performance patterns from TOP_BY_VIEWS and DATA_STATS).",
  "engagement_insights": "3-5 sentences in ONE line (no line breaks).",
  "recommendations": ["string","string","string","string","string"],
  "top_videos": ["string","string","string"],
  "suggested_topics": [
    {{ "topic": "string", "description": "2-3 sentences in ONE line (no line breaks)" }}
  ]
}}

RULES:
- "summary" MUST be channel-level, not a per-video recap. Use CHANNEL_META when available; otherwise infer from INPUT_DATASET + TOP_BY_VIEWS + DATA_STATS.
- Use TOP_BY_VIEWS as "top_videos" (return their TITLES ONLY in the same order), exactly {n_top} items.
- Base "recommendations" ONLY on analysis of TOP_BY_VIEWS. Output exactly {n_recs} crisp, actionable items:
  1-2) Improvement actions that extend what's working in the top videos (hook structure, title/thumbnail packaging, pacing and retention, CTA, chaptering). Reference at least one top video by title or a clear paraphrase.
  3-5) Concrete content types to create next, derived from patterns in TOP_BY_VIEWS. Each MUST specify a proposed title formula, a target format (Short ~60s or Long ~8-12min) and the hook angle it borrows from the top videos. Reference at least one top video.
- "suggested_topics" MUST be exactly {n_topics} items derived from recurring patterns in TOP_BY_VIEWS (themes, formats, angles). Avoid duplicates and vague topics.
- All strings MUST be single-line (no line breaks).
- No generic fluff; make every item specific and tied to observed patterns.
- No extra keys. Output ONLY the JSON object.
"""

_FENCE_OPEN = re.compile(r"^```.*?\n", re.DOTALL)
_FENCE_CLOSE = re.compile(r"```\s*$")


def _dump(value) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def build_prompt(
    items: list[ContentItem],
    top: list[ContentItem],
    meta: ChannelMeta,
    stats: DatasetStats,
) -> str:
    return PROMPT_TEMPLATE.format(
        dataset=_dump([v.model_dump(by_alias=True) for v in items]),
        top=_dump([v.model_dump(by_alias=True) for v in top]),
        meta=_dump(meta.model_dump()),
        stats=_dump(stats.model_dump()),
        n_top=EXPECTED_TOP_VIDEOS,
        n_recs=EXPECTED_RECOMMENDATIONS,
        n_topics=EXPECTED_TOPICS,
    )


def extract_json_text(raw: str) -> str:
    """Strip a markdown fence and cut the outermost {...} region out of raw model text."""
    text = (raw or "").strip()
    if text.startswith("```"):
        text = _FENCE_OPEN.sub("", text, count=1)
        text = _FENCE_CLOSE.sub("", text).strip()

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1:
        return text[start:end + 1]
    return text


def _check_shape(result: InsightResult, raw: str):
    problems = []
    for key, expected in (
        ("recommendations", EXPECTED_RECOMMENDATIONS),
        ("top_videos", EXPECTED_TOP_VIDEOS),
        ("suggested_topics", EXPECTED_TOPICS),
    ):
        got = len(getattr(result, key) or [])
        if got != expected:
            problems.append(f"expected {expected} {key}, got {got}")

    for key in ("summary", "engagement_insights"):
        value = getattr(result, key) or ""
        if not value.strip():
            problems.append(f"{key} is empty")
        elif "\n" in value:
            problems.append(f"{key} spans multiple lines")

    if problems:
        raise ResponseFormatError("AI response does not match the schema: " + "; ".join(problems), raw=raw)


def parse_insight_response(raw: str, strict: bool = False) -> InsightResult:
    json_text = extract_json_text(raw)

    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as e:
        log.debug("Unparseable model output: %r", raw)
        raise ResponseFormatError(f"Failed to parse AI response as JSON: {e}", raw=raw) from e

    if not isinstance(parsed, dict):
        log.debug("Model output is not a JSON object: %r", raw)
        raise ResponseFormatError(
            f"Failed to parse AI response as JSON: expected an object, got {type(parsed).__name__}",
            raw=raw,
        )

    if not parsed.get("ok"):
        upstream = parsed.get("error")
        raise ServiceLogicError(
            "AI response indicates failure: " + (str(upstream) if upstream else "Unknown error"),
            upstream_error=upstream,
        )

    try:
        result = InsightResult.model_validate(parsed)
    except ValidationError as e:
        raise ResponseFormatError(f"AI response has unexpected field types: {e}", raw=raw) from e

    if strict:
        _check_shape(result, raw)
    return result


def analyze_videos(
    items,
    meta=None,
    config: InsightConfig | None = None,
    client=None,
) -> InsightResult:
    """Send a compact video dataset to the LLM and return its channel audit.

    Only the first 12 items are considered. Exactly one completion request is
    made; transport errors from the client propagate unchanged.
    """
    config = config or InsightConfig.from_env()
    api_key = config.require_api_key()

    compact = compact_dataset(items)
    top = top_by_views(compact)
    stats = compute_stats(compact)
    channel = coerce_meta(meta)
    prompt = build_prompt(compact, top, channel, stats)

    if client is None:
        client = OpenAI(api_key=api_key, base_url=config.base_url)

    log.info("Requesting insights for %d videos from %s", len(compact), config.model)

    response = client.chat.completions.create(
        model=config.model,
        messages=[{"role": "user", "content": prompt}],
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        top_p=config.top_p,
    )

    choices = getattr(response, "choices", None) or []
    raw = (choices[0].message.content or "") if choices else ""
    return parse_insight_response(raw, strict=config.strict_schema)
