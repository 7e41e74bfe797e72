from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple

import requests
from flask import Flask, Response, jsonify, request

from .config import AppConfig
from .errors import AIReadinessError
from .generator import TextGeneratorFn
from .llm import build_text_generator
from .logger import get_logger
from .pipeline import generate_llms_txt
from .services import ReadinessClient, analyze_site

logger = get_logger(__name__)

SessionFactory = Callable[[], requests.Session]


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _error_response(error: AIReadinessError) -> Tuple[Response, int]:
    return jsonify(error.to_dict()), error.status_code


def create_app(
    config: Optional[AppConfig] = None,
    *,
    session_factory: Optional[SessionFactory] = None,
    text_generator: Optional[TextGeneratorFn] = None,
    use_llm: bool = True,
) -> Flask:
    """
    Build the HTTP application.

    Args:
        config: Application config (defaults when omitted)
        session_factory: Returns a fresh requests session for each request
        text_generator: Overrides the configured LLM client
        use_llm: When False and no ``text_generator`` is given, llms.txt is
                 always built from the local template
    """
    config = config or AppConfig()
    session_factory = session_factory or requests.Session

    if text_generator is None and use_llm:
        text_generator = build_text_generator(config.llm)

    app = Flask(__name__)
    app.json.sort_keys = False

    @app.post("/api/generate-llms-txt")
    def generate_llms_txt_view() -> Tuple[Response, int]:
        body = _json_body()
        session = None
        try:
            session = session_factory()
            result = generate_llms_txt(body.get("url"), session, config, text_generator)
        except AIReadinessError as e:
            logger.warning(f"[LLMS-TXT] {e.message}")
            return _error_response(e)
        except Exception as e:  # noqa: BLE001
            logger.exception(f"LLMs.txt generation error: {e}")
            return (
                jsonify({"error": "Failed to generate llms.txt", "details": str(e) or "Unknown error"}),
                500,
            )
        finally:
            if session is not None:
                session.close()
        return jsonify(result.to_dict()), 200

    @app.post("/api/analyze")
    def analyze_view() -> Tuple[Response, int]:
        body = _json_body()
        session = None
        try:
            session = session_factory()
            client = ReadinessClient(config.services, session)
            return jsonify(analyze_site(body.get("url"), client)), 200
        except AIReadinessError as e:
            return _error_response(e)
        except Exception as e:  # noqa: BLE001
            logger.exception(f"[ANALYZE] Combined analysis error: {e}")
            return (
                jsonify(
                    {
                        "error": "Failed to perform combined analysis",
                        "details": str(e) or "Unknown error",
                    }
                ),
                500,
            )
        finally:
            if session is not None:
                session.close()

    @app.get("/api/check-config")
    def check_config_view() -> Response:
        return jsonify({"hasOpenAIKey": bool(config.llm.resolved_api_key())})

    return app
