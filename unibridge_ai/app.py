"""Flask JSON API exposing the UniBridge AI capabilities."""

from __future__ import annotations

import json
import logging
import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Tuple

from flask import Flask, Response, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from . import catalog, config, metrics, models
from .matching import profile_to_text
from .safety import RateLimiter, sanitize_for_log
from .schema import Opportunity, StudentProfile
from .services import AIServices, build_services

logger = logging.getLogger(__name__)

MAX_MATCHES = 5

app = Flask(__name__)
app.config.setdefault(
    "RATE_LIMITER",
    RateLimiter(config.get_rate_limit(), config.get_rate_window_s()),
)

_ERROR_MESSAGES = {
    "summarize": "Unable to summarize content right now.",
    "translate": "Unable to translate text right now.",
    "moderate": "Unable to moderate text right now.",
    "match": "Unable to rank opportunities right now.",
    "checkin": "Unable to process check-in right now.",
}


class RequestError(Exception):
    """Raised for malformed or missing request fields."""


def _get_services() -> AIServices:
    services = app.config.get("AI_SERVICES")
    if isinstance(services, AIServices):
        return services
    return build_services()


def _get_rate_limiter() -> RateLimiter:
    limiter = app.config.get("RATE_LIMITER")
    if isinstance(limiter, RateLimiter):
        return limiter

    limiter = RateLimiter(config.get_rate_limit(), float(config.get_rate_window_s()))
    app.config["RATE_LIMITER"] = limiter
    return limiter


def _client_identity() -> str:
    forwarded_for = request.headers.get("X-Forwarded-For", "")
    if forwarded_for:
        first = forwarded_for.split(",", 1)[0].strip()
        if first:
            return first
    return request.remote_addr or "global"


def _json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise RequestError("Request body must be a JSON object.")
    return body


def _required_text(body: Mapping[str, Any], field: str, label: str) -> str:
    value = body.get(field)
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise RequestError(f"{label} is required.")
    max_chars = config.get_max_chars()
    if len(text) > max_chars:
        raise RequestError(f"Trim input to {max_chars:,} characters.")
    return text


def _language(body: Mapping[str, Any]) -> str:
    language = body.get("language") or models.SOURCE_LANGUAGE
    if language not in models.SUPPORTED_LANGUAGES:
        raise RequestError(f"Unsupported language '{sanitize_for_log(str(language), limit=16)}'.")
    return language


@app.before_request
def _count_and_limit() -> Tuple[Response, int] | None:
    metrics.inc("requests_total")
    if request.method != "POST":
        return None
    identity = _client_identity()
    if not _get_rate_limiter().allow(identity):
        metrics.inc("rate_limit_hits_total")
        logger.warning("Rate limit exceeded for %s", sanitize_for_log(identity))
        return jsonify(error="Too many requests. Try again later."), 429
    return None


@app.errorhandler(RequestError)
def _bad_request(exc: RequestError) -> Tuple[Response, int]:
    return jsonify(error=str(exc)), 400


@app.errorhandler(ValidationError)
def _invalid_payload(exc: ValidationError) -> Tuple[Response, int]:
    return jsonify(error=f"Invalid payload: {exc.error_count()} field error(s)."), 400


@app.errorhandler(Exception)
def _unexpected(exc: Exception) -> Response | Tuple[Response, int]:
    if isinstance(exc, HTTPException):
        return exc.get_response()
    logger.exception("Unhandled error in %s", request.endpoint)
    message = _ERROR_MESSAGES.get(request.endpoint or "", "Unexpected server error.")
    return jsonify(error=message), 500


@app.post("/api/ai/summarize")
async def summarize() -> Response:
    body = _json_body()
    text = _required_text(body, "text", "Text")
    language = _language(body)
    services = _get_services()

    start_time = time.perf_counter()
    summary = await services.summarize_text(text)
    if language == models.SOURCE_LANGUAGE:
        translated_text, translation_model, translation_fallback = summary.summary, "identity", False
    else:
        translated = await services.translate_text(summary.summary, language)
        translated_text = translated.translation
        translation_model = translated.model
        translation_fallback = translated.used_fallback

    used_fallback = summary.used_fallback or translation_fallback
    _log_event("summarize", summary.model, used_fallback, start_time, len(text))
    return jsonify(
        summary=translated_text,
        sourceSummary=summary.summary,
        language=language,
        metadata={
            "summarizationModel": summary.model,
            "translationModel": translation_model,
            "usedFallback": used_fallback,
        },
    )


@app.post("/api/ai/translate")
async def translate() -> Response:
    body = _json_body()
    text = _required_text(body, "text", "Text")
    language = _language(body)

    start_time = time.perf_counter()
    translated = await _get_services().translate_text(text, language)
    _log_event("translate", translated.model, translated.used_fallback, start_time, len(text))
    return jsonify(
        translation=translated.translation,
        language=language,
        metadata={"model": translated.model, "usedFallback": translated.used_fallback},
    )


@app.post("/api/ai/moderate")
async def moderate() -> Response:
    body = _json_body()
    text = _required_text(body, "text", "Text")

    start_time = time.perf_counter()
    result = await _get_services().moderate_text(text)
    _log_event("moderate", result.model, result.used_fallback, start_time, len(text))
    return jsonify(result.to_dict())


@app.post("/api/ai/match")
async def match() -> Response:
    body = _json_body()
    profile = StudentProfile.model_validate(body.get("profile") or {})
    raw_opportunities = body.get("opportunities") or []
    if not isinstance(raw_opportunities, list):
        raise RequestError("Opportunities must be a list.")
    opportunities = [Opportunity.model_validate(item) for item in raw_opportunities]
    if not opportunities:
        opportunities = catalog.default_opportunities()

    start_time = time.perf_counter()
    ranked, model, used_fallback = await _get_services().rank_with_provenance(
        profile, opportunities
    )
    _log_event("match", model, used_fallback, start_time, len(profile_to_text(profile)))
    return jsonify(
        profile=profile.to_dict(),
        total=len(ranked),
        matches=[item.to_dict() for item in ranked[:MAX_MATCHES]],
    )


@app.post("/api/ai/checkin")
async def checkin() -> Response:
    body = _json_body()
    message = _required_text(body, "message", "Message")
    mood = body.get("mood") or "neutral"
    if not isinstance(mood, str):
        raise RequestError("Mood must be a string.")

    start_time = time.perf_counter()
    result = await _get_services().generate_checkin_reply(message, mood)
    _log_event("checkin", result.model, result.used_fallback, start_time, len(message))
    return jsonify(result.to_dict())


@app.get("/api/ai/status")
def status() -> Response:
    return jsonify(
        configured=_get_services().has_hf_access(),
        modelSet=models.AI_MODELS,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@app.get("/metrics")
def metrics_endpoint() -> Response:
    response = Response(metrics.to_prometheus())
    response.content_type = "text/plain; charset=utf-8"
    return response


def _log_event(
    capability: str,
    model: str,
    used_fallback: bool,
    start_time: float,
    input_chars: int,
) -> None:
    payload = {
        "event": "ai_request",
        "capability": capability,
        "model": sanitize_for_log(model),
        "used_fallback": used_fallback,
        "duration_ms": round((time.perf_counter() - start_time) * 1000.0, 3),
        "input_chars": int(input_chars),
    }
    logging.info(json.dumps(payload))


if __name__ == "__main__":  # pragma: no cover
    logging.basicConfig(level=logging.INFO)
    if os.environ.get("UNIBRIDGE_SKIP_RUN"):
        logging.getLogger(__name__).info("UNIBRIDGE_SKIP_RUN set; skipping app.run().")
    else:
        app.run(debug=True)
