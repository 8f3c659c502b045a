import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

FENCE_RE = re.compile(r"```(?:json|JSON)?[ \t]*")
CONTROL_CHARS_RE = re.compile(r"[\u0000-\u001F\u007F-\u009F]")


@dataclass(frozen=True)
class Parsed:
    """JSON object successfully recovered from model output."""
    value: Dict[str, Any]


@dataclass(frozen=True)
class Fallback:
    """Caller-supplied default used when no JSON object could be recovered."""
    default_value: Dict[str, Any]
    raw_text: str


RecoveryResult = Union[Parsed, Fallback]


def strip_fences(text: str) -> str:
    """Remove markdown code-fence markers, keeping the fenced content."""
    return FENCE_RE.sub("", text)


def extract_candidate(text: str) -> Optional[str]:
    """Return the span from the first '{' to the last '}' (inclusive), if any."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    return text[start:end + 1]


def remove_control_chars(text: str) -> str:
    return CONTROL_CHARS_RE.sub("", text)


def _loads_object(candidate: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(candidate)
    except (ValueError, RecursionError):
        return None
    return value if isinstance(value, dict) else None


def recover(raw_text: Optional[str], fallback_value: Dict[str, Any]) -> RecoveryResult:
    """
    Coerce free-text model output into a JSON object.

    The span between the first '{' and the last '}' is taken greedily, so a
    reply holding several JSON-like blocks (or braces in trailing prose) is
    captured as one candidate. A single cleanup pass strips control characters
    before the second and final parse attempt.

    Args:
        raw_text: The model's raw reply
        fallback_value: Object returned when recovery fails

    Returns:
        Parsed with the recovered object, or Fallback with the default and the
        original text. Never raises.
    """
    original = raw_text or ""

    text = strip_fences(original.strip())
    candidate = extract_candidate(text)
    if candidate is None:
        return Fallback(fallback_value, original)

    value = _loads_object(candidate)
    if value is None:
        value = _loads_object(remove_control_chars(candidate))
    if value is None:
        return Fallback(fallback_value, original)

    return Parsed(value)


def recovered_value(result: RecoveryResult) -> Dict[str, Any]:
    """Unwrap a RecoveryResult into the object callers should use."""
    if isinstance(result, Parsed):
        return result.value
    return result.default_value
