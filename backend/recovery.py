# recovery.py
"""
Turn a free-form completion into an {itinerary, places} object.

Models are asked for bare JSON but regularly wrap it in prose or code fences,
use curly quotes, leave comments or trailing commas. The strategies below are
tried in order and the first one that yields a JSON object wins; when none
does, the raw text becomes the itinerary and places is empty.
"""
import json
import logging
import re
from functools import cached_property
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple

from .models import ensure_result_shape, fallback_result

logger = logging.getLogger(__name__)

_FENCED_JSON_RE = re.compile(r"```json\s*(.*?)\s*```", re.IGNORECASE | re.DOTALL)
_FENCED_ANY_RE = re.compile(r"```\s*(.*?)\s*```", re.DOTALL)

_FENCE_LABEL_RE = re.compile(r"```\s*json", re.IGNORECASE)
_DOUBLE_SMART_QUOTES_RE = re.compile("[“”]")
_SINGLE_SMART_QUOTES_RE = re.compile("[‘’]")
_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
# "//" preceded by ":" is a URL scheme (https://...), not a comment.
_LINE_COMMENT_RE = re.compile(r"(^|[^:\\])//.*")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


# -----------------------------------------------------------------------------
# Extraction & sanitizing
# -----------------------------------------------------------------------------
def scan_balanced_object(text: str) -> Optional[str]:
    """
    Return the text from the first "{" up to the brace that closes it, or None
    when it is never closed. Braces inside double-quoted strings are ignored.
    Inside a string a backslash escapes exactly one character, so in `"a\\\\"`
    the final quote still closes the string.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1].strip()
    return None


def extract_json_candidate(text: str) -> Optional[str]:
    """
    Find the most likely JSON snippet in `text`:
      1) the body of a ```json fenced block
      2) the body of any fenced block
      3) the first balanced {...} object
    """
    if not text or not isinstance(text, str):
        return None

    for pattern in (_FENCED_JSON_RE, _FENCED_ANY_RE):
        m = pattern.search(text)
        if m and m.group(1):
            return m.group(1).strip()

    return scan_balanced_object(text)


def sanitize_json_text(text: str) -> str:
    """Repair the usual damage: fences, smart quotes, comments, trailing commas."""
    if not text or not isinstance(text, str):
        return text
    out = text.strip()

    out = _FENCE_LABEL_RE.sub("```", out, count=1)
    out = out.replace("```", "")

    out = _DOUBLE_SMART_QUOTES_RE.sub('"', out)
    out = _SINGLE_SMART_QUOTES_RE.sub("'", out)

    out = _BLOCK_COMMENT_RE.sub("", out)
    out = _LINE_COMMENT_RE.sub(r"\1", out)

    out = _TRAILING_COMMA_RE.sub(r"\1", out)
    return out.strip()


def outer_braces(text: Optional[str]) -> Optional[str]:
    """Slice from the first "{" to the last "}" inclusive."""
    if not text:
        return None
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last <= first:
        return None
    return text[first:last + 1]


# -----------------------------------------------------------------------------
# Parsing
# -----------------------------------------------------------------------------
class ParseOutcome(NamedTuple):
    value: Optional[Dict[str, Any]]
    error: Optional[str]


def parse_object(candidate: str) -> ParseOutcome:
    """json.loads that reports failure instead of raising. Only objects count."""
    try:
        value = json.loads(candidate)
    except (ValueError, RecursionError) as e:
        return ParseOutcome(None, str(e))
    if not isinstance(value, dict):
        return ParseOutcome(None, f"expected a JSON object, got {type(value).__name__}")
    return ParseOutcome(value, None)


# -----------------------------------------------------------------------------
# Strategies
# -----------------------------------------------------------------------------
class RecoveryInput:
    """The raw completion plus the derived snippets, computed on first use."""

    def __init__(self, raw: str):
        self.raw = raw

    @cached_property
    def extracted(self) -> Optional[str]:
        return extract_json_candidate(self.raw)

    @cached_property
    def sanitized(self) -> Optional[str]:
        if self.extracted is None:
            return None
        return sanitize_json_text(self.extracted)


def _direct(work: RecoveryInput) -> Optional[str]:
    return work.raw


def _sanitized(work: RecoveryInput) -> Optional[str]:
    return work.sanitized


def _outer_braces(work: RecoveryInput) -> Optional[str]:
    return outer_braces(work.sanitized)


STRATEGIES: Tuple[Tuple[str, Callable[[RecoveryInput], Optional[str]]], ...] = (
    ("direct", _direct),
    ("sanitized", _sanitized),
    ("outer_braces", _outer_braces),
)


def _as_text(raw: Any) -> str:
    if raw is None:
        return ""
    return raw if isinstance(raw, str) else str(raw)


def _record_failure(diagnostics, work: RecoveryInput, error: Optional[str]) -> None:
    if diagnostics is None:
        return
    try:
        diagnostics.record_parse_failure(work.raw, work.extracted, work.sanitized, error)
    except Exception as e:
        logger.warning("Diagnostics sink failed: %s", e)


def recover_itinerary(raw: Any, diagnostics=None) -> Dict[str, Any]:
    """
    Always returns a dict with "itinerary" and "places". Never raises.
    `diagnostics` is any object with record_parse_failure(); it is only
    called when every strategy failed.
    """
    work = RecoveryInput(_as_text(raw))
    last_error = None

    for name, strategy in STRATEGIES:
        candidate = strategy(work)
        if candidate is None:
            continue
        outcome = parse_object(candidate)
        if outcome.value is not None:
            if name != "direct":
                logger.info("Recovered AI JSON with the %s strategy", name)
            return ensure_result_shape(outcome.value, work.raw)
        last_error = outcome.error

    logger.warning("Could not parse AI response as JSON, returning raw text. Error: %s", last_error)
    _record_failure(diagnostics, work, last_error)
    return fallback_result(work.raw)
