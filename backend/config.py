# config.py
import os
from typing import Mapping, Optional

from dotenv import load_dotenv


# -----------------------------------------------------------------------------
# Paths
# -----------------------------------------------------------------------------
APP_DIR = os.path.abspath(os.path.dirname(__file__))
REPO_ROOT = os.path.dirname(APP_DIR)
FRONTEND_ROOT = os.path.join(REPO_ROOT, "Front_end")
STATIC_ROOT = os.path.join(REPO_ROOT, "static")

load_dotenv()

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_RESPONSE_LOG = os.path.join("logs", "ai_responses.log")


def _safe_float(val: Optional[str], default: float) -> float:
    try:
        return float(val)
    except (TypeError, ValueError):
        return default


def _safe_int(val: Optional[str], default: int) -> int:
    try:
        int_val = int(val)
        return int_val if int_val > 0 else default
    except (TypeError, ValueError):
        return default


def _clean(val: Optional[str]) -> str:
    return (val or "").strip()


class Settings:
    """
    Runtime configuration, read once at start-up.
    Credentials are kept as empty strings when unset so callers can test them
    for truthiness.
    """

    def __init__(self, ai_provider="", gemini_api_key="", gemini_model=DEFAULT_GEMINI_MODEL,
                 openai_api_key="", openai_model=DEFAULT_OPENAI_MODEL, temperature=0.7,
                 timeout_sec=60.0, response_log=DEFAULT_RESPONSE_LOG, log_level="INFO",
                 host="0.0.0.0", port=3000):
        self.ai_provider = ai_provider
        self.gemini_api_key = gemini_api_key
        self.gemini_model = gemini_model
        self.openai_api_key = openai_api_key
        self.openai_model = openai_model
        self.temperature = temperature
        self.timeout_sec = timeout_sec
        self.response_log = response_log
        self.log_level = log_level
        self.host = host
        self.port = port

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        response_log = env.get("AI_RESPONSE_LOG")
        return cls(
            ai_provider=_clean(env.get("AI_PROVIDER")).lower(),
            gemini_api_key=_clean(env.get("GEMINI_API_KEY")),
            gemini_model=_clean(env.get("GEMINI_MODEL")) or DEFAULT_GEMINI_MODEL,
            openai_api_key=_clean(env.get("OPENAI_API_KEY")),
            openai_model=_clean(env.get("OPENAI_MODEL")) or DEFAULT_OPENAI_MODEL,
            temperature=_safe_float(env.get("AI_TEMPERATURE"), 0.7),
            timeout_sec=_safe_float(env.get("AI_TIMEOUT_SEC"), 60.0),
            # Explicitly empty disables the file; unset uses the default path.
            response_log=DEFAULT_RESPONSE_LOG if response_log is None else response_log.strip(),
            log_level=_clean(env.get("LOG_LEVEL")).upper() or "INFO",
            host=_clean(env.get("HOST")) or "0.0.0.0",
            port=_safe_int(env.get("PORT"), 3000),
        )
