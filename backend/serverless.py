# serverless.py
# Function entry point (Netlify / AWS Lambda proxy event shape).
# The provider is built once per cold start and reused across invocations.
import base64
import json
import logging
from typing import Any, Dict, Optional

from .config import Settings
from .diagnostics import build_diagnostics
from .providers import build_provider
from .service import (
    INTERNAL_ERROR,
    INVALID_BODY_ERROR,
    METHOD_NOT_ALLOWED_ERROR,
    NOT_CONFIGURED_ERROR,
    ItineraryService,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}

_SERVICE: Optional[ItineraryService] = None


def _get_service() -> ItineraryService:
    global _SERVICE
    if _SERVICE is None:
        settings = Settings.from_env()
        _SERVICE = ItineraryService(
            provider=build_provider(settings),
            diagnostics=build_diagnostics(settings.response_log),
        )
    return _SERVICE


def _response(status: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "statusCode": status,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(payload, ensure_ascii=False),
    }


def _decode_body(event: Dict[str, Any]) -> Any:
    raw = event.get("body") or "{}"
    if event.get("isBase64Encoded"):
        raw = base64.b64decode(raw).decode("utf-8")
    return json.loads(raw)


def handler(event, context, service: Optional[ItineraryService] = None):
    method = (event.get("httpMethod") or "").upper()
    if method != "POST":
        return _response(405, {"error": METHOD_NOT_ALLOWED_ERROR})

    try:
        service = service or _get_service()
        if not service.configured:
            return _response(503, {"error": NOT_CONFIGURED_ERROR})

        try:
            body = _decode_body(event)
        except (ValueError, TypeError) as e:
            logger.warning("Rejecting request with unreadable body: %s", e)
            return _response(400, {"error": INVALID_BODY_ERROR})

        status, payload = service.generate(body)
        return _response(status, payload)
    except Exception:
        logger.exception("Function error")
        return _response(500, {"error": INTERNAL_ERROR})


# AWS Lambda looks for lambda_handler by convention.
lambda_handler = handler
