import logging

import openai
from flask import Flask, jsonify, request

from ai_analyzer import analyze_videos
from config import InsightConfig
from errors import ConfigurationError, ResponseFormatError, ServiceLogicError
from youtube_api import fetch_channel

log = logging.getLogger(__name__)


def create_app(settings: InsightConfig | None = None) -> Flask:
    app = Flask(__name__)
    app.config["INSIGHTS"] = settings or InsightConfig.from_env()

    @app.route("/")
    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/analyze", methods=["POST"])
    def api_analyze():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "JSON object body is required"}), 400

        videos = data.get("videos")
        channel = data.get("channel") or {}
        channel_url = data.get("channel_url") or ""

        if not isinstance(channel, dict) or not isinstance(channel_url, str):
            return jsonify({"error": "'channel' must be an object and 'channel_url' a string"}), 400
        channel_url = channel_url.strip()

        if videos is None and channel_url:
            videos, fetched_meta = fetch_channel(channel_url)
            channel = {**fetched_meta, **channel}

        if not isinstance(videos, list):
            return jsonify({"error": "Either 'videos' (a list) or 'channel_url' is required"}), 400

        try:
            result = analyze_videos(videos, channel, config=app.config["INSIGHTS"])
        except ConfigurationError as e:
            log.error("Configuration error: %s", e)
            return jsonify({"error": str(e)}), 500
        except (ResponseFormatError, ServiceLogicError) as e:
            log.warning("Bad AI response: %s", e)
            return jsonify({"error": str(e)}), 502
        except openai.APIError as e:
            log.warning("AI service call failed: %s", e)
            return jsonify({"error": f"AI service call failed: {e}"}), 502

        return jsonify(result.model_dump(exclude_unset=True))

    return app


if __name__ == "__main__":
    create_app().run(debug=True, port=5000)
