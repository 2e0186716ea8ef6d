# service.py
# Request handling shared by the Flask server and the serverless function.
import logging
from typing import Any, Dict, Optional, Tuple

from .diagnostics import NullDiagnostics
from .models import TravelQuery
from .prompts import build_itinerary_prompt
from .recovery import recover_itinerary

logger = logging.getLogger(__name__)

NOT_CONFIGURED_ERROR = "AI service not configured. Please set GEMINI_API_KEY or OPENAI_API_KEY on the server."
INVALID_BODY_ERROR = "Invalid request body. Expected a JSON object."
GENERATION_ERROR = "Failed to generate itinerary. Please try again."
METHOD_NOT_ALLOWED_ERROR = "Method not allowed"
INTERNAL_ERROR = "Internal server error"

Response = Tuple[int, Dict[str, Any]]


class ItineraryService:
    """
    One request in, one (status, body) pair out.

    `provider` is built once at start-up and may be None; in that case every
    request is answered with 503 and nothing else runs.
    """

    def __init__(self, provider=None, diagnostics=None):
        self.provider = provider
        self.diagnostics = diagnostics if diagnostics is not None else NullDiagnostics()

    @property
    def configured(self) -> bool:
        return self.provider is not None

    def generate(self, body: Optional[Any]) -> Response:
        if self.provider is None:
            return 503, {"error": NOT_CONFIGURED_ERROR}

        if not isinstance(body, dict):
            return 400, {"error": INVALID_BODY_ERROR}

        query = TravelQuery.from_json(body)
        prompt = build_itinerary_prompt(query)

        try:
            text = self.provider.generate(prompt)
        except Exception:
            logger.exception("Error generating itinerary for query=%s", query.to_json())
            return 500, {"error": GENERATION_ERROR}

        return 200, recover_itinerary(text, self.diagnostics)
