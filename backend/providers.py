# providers.py
# Text-completion providers. Each exposes generate(prompt) -> str.
import logging
from typing import Any, Optional

from google import genai
from google.genai import types
from openai import OpenAI

from .config import Settings

logger = logging.getLogger(__name__)


def _response_text(resp: Any) -> str:
    """Pull the text out of a Gemini response, whichever shape the SDK returns."""
    if not resp:
        return ""
    text = getattr(resp, "text", "") or ""
    if text:
        return text

    candidates = getattr(resp, "candidates", None) or []
    if candidates:
        content = getattr(candidates[0], "content", None)
        for part in getattr(content, "parts", None) or []:
            part_text = getattr(part, "text", None)
            if part_text:
                return part_text
    return ""


class GeminiProvider:
    name = "gemini"

    def __init__(self, api_key: str, model: str, temperature: float = 0.7, timeout_sec: float = 60.0):
        self.model = model
        self.temperature = temperature
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout_sec * 1000)),
        )

    def generate(self, prompt: str) -> str:
        resp = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(temperature=self.temperature),
        )
        return _response_text(resp)


class OpenAIProvider:
    name = "openai"

    def __init__(self, api_key: str, model: str, temperature: float = 0.7, timeout_sec: float = 60.0):
        self.model = model
        self.temperature = temperature
        self.client = OpenAI(api_key=api_key, timeout=timeout_sec)

    def generate(self, prompt: str) -> str:
        resp = self.client.chat.completions.create(
            model=self.model,
            temperature=self.temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""


def _pick_provider_name(settings: Settings) -> Optional[str]:
    if settings.ai_provider:
        return settings.ai_provider
    if settings.gemini_api_key:
        return "gemini"
    if settings.openai_api_key:
        return "openai"
    return None


def build_provider(settings: Settings):
    """
    Construct the configured provider once, at start-up.
    Returns None when no credential is set or the client cannot be created;
    the request handler turns that into "service unavailable".
    """
    name = _pick_provider_name(settings)
    if name is None:
        logger.warning("No AI credential set (GEMINI_API_KEY / OPENAI_API_KEY). "
                       "/generate will answer 503 until configured.")
        return None

    try:
        if name == "gemini":
            if not settings.gemini_api_key:
                logger.warning("AI_PROVIDER=gemini but GEMINI_API_KEY is not set.")
                return None
            provider = GeminiProvider(settings.gemini_api_key, settings.gemini_model,
                                      settings.temperature, settings.timeout_sec)
        elif name == "openai":
            if not settings.openai_api_key:
                logger.warning("AI_PROVIDER=openai but OPENAI_API_KEY is not set.")
                return None
            provider = OpenAIProvider(settings.openai_api_key, settings.openai_model,
                                      settings.temperature, settings.timeout_sec)
        else:
            logger.warning("Unknown AI_PROVIDER %r (expected 'gemini' or 'openai').", name)
            return None
    except Exception as e:
        logger.warning("Failed to initialize %s client: %s", name, e)
        return None

    logger.info("AI provider ready: %s (%s)", provider.name, provider.model)
    return provider
