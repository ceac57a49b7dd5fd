import json

import main
import youtube_searcher
from errors import ServiceLogicError
from models import InsightResult
from tests.helpers import make_response, make_videos


def _write_dataset(tmp_path, data):
    path = tmp_path / "budget_bites.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_format_number():
    assert main._format_number(None) == "N/A"
    assert main._format_number(999) == "999"
    assert main._format_number(12_300) == "12.3K"
    assert main._format_number(4_500_000) == "4.5M"


def test_cli_analyzes_dataset_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GROQ_API_KEY", "test-key")
    path = _write_dataset(tmp_path, {"videos": make_videos([10, 20]), "channel": {"name": "Budget Bites"}})
    seen = {}

    def fake_analyze(videos, meta, config):
        seen.update(videos=videos, meta=meta, config=config)
        return InsightResult.model_validate(make_response())

    monkeypatch.setattr(main, "analyze_videos", fake_analyze)

    assert main.main([str(path), "--model", "llama-3.3-70b-versatile", "--strict"]) == 0

    assert seen["meta"] == {"name": "Budget Bites"}
    assert seen["config"].model == "llama-3.3-70b-versatile"
    assert seen["config"].strict_schema is True
    saved = list(tmp_path.glob("insights_budget_bites_*.json"))
    assert len(saved) == 1
    assert json.loads(saved[0].read_text(encoding="utf-8"))["top_videos"] == ["Video 11", "Video 10", "Video 9"]


def test_cli_accepts_bare_list(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = _write_dataset(tmp_path, make_videos([1]))
    monkeypatch.setattr(main, "analyze_videos", lambda v, m, config: InsightResult.model_validate(make_response()))
    assert main.main([str(path), "--json-only"]) == 0


def test_cli_reports_analysis_errors(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = _write_dataset(tmp_path, make_videos([1]))

    def fail(videos, meta, config):
        raise ServiceLogicError("AI response indicates failure: nope")

    monkeypatch.setattr(main, "analyze_videos", fail)
    assert main.main([str(path)]) == 1
    assert list(tmp_path.glob("insights_*.json")) == []


def test_cli_empty_dataset(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = _write_dataset(tmp_path, [])
    assert main.main([str(path)]) == 1


def test_cli_uses_ytdlp_for_handles(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    urls = []

    def fetch(url, max_videos):
        urls.append(url)
        return [], {}

    monkeypatch.setattr(youtube_searcher, "fetch_channel_dataset", fetch)
    assert main.main(["@budgetbites"]) == 1
    assert urls == ["https://www.youtube.com/@budgetbites"]


def test_cli_tolerates_malformed_stats(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    videos = [
        {"title": "Video 11", "stats": "n/a"},
        {"title": "Video 10", "viewCount": 2500},
        "not even a dict",
    ]
    path = _write_dataset(tmp_path, videos)
    monkeypatch.setattr(main, "analyze_videos", lambda v, m, config: InsightResult.model_validate(make_response()))

    assert main.main([str(path)]) == 0
    assert len(list(tmp_path.glob("insights_*.json"))) == 1


def test_cli_saves_only_returned_keys(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = _write_dataset(tmp_path, make_videos([1]))
    monkeypatch.setattr(
        main,
        "analyze_videos",
        lambda v, m, config: InsightResult.model_validate({"ok": True, "summary": "s"}),
    )

    assert main.main([str(path)]) == 0
    saved = list(tmp_path.glob("insights_*.json"))
    assert json.loads(saved[0].read_text(encoding="utf-8")) == {"ok": True, "summary": "s"}
