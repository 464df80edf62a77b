"""Helpers to pull usable content out of Gemini responses.

The SDK returns nested candidate/content/part objects; these helpers read them
with getattr so plain stand-in objects work the same way in tests.
"""
import re
import json
import base64
from typing import Any, Dict, List, Optional

from core.exceptions import MalformedResponse

SCORE_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*分")


def _first_candidate_parts(response: Any) -> List[Any]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return list(getattr(content, "parts", None) or []) if content else []


def extract_response_text(response: Any) -> str:
    """Return the text of the first part of the first candidate."""
    parts = _first_candidate_parts(response)
    text = getattr(parts[0], "text", None) if parts else None
    if not text:
        raise MalformedResponse("Gemini API返回格式异常")
    return text


def extract_inline_image(response: Any) -> Optional[str]:
    """Return the first inline image of the first candidate as a data URI, if any."""
    for part in _first_candidate_parts(response):
        inline = getattr(part, "inline_data", None)
        data = getattr(inline, "data", None) if inline else None
        if not data:
            continue
        if isinstance(data, (bytes, bytearray)):
            data = base64.b64encode(bytes(data)).decode("ascii")
        mime_type = getattr(inline, "mime_type", None) or "image/png"
        return f"data:{mime_type};base64,{data}"
    return None


def strip_code_fences(text: str) -> str:
    return text.replace("```json", "").replace("```", "").strip()


def parse_json_payload(text: str) -> Any:
    """Strict JSON parse after removing markdown fences. Raises ValueError on bad JSON."""
    return json.loads(strip_code_fences(text))


def scrape_scores(text: str) -> List[float]:
    """All numbers written as "N分" in order of appearance."""
    return [float(m) for m in SCORE_PATTERN.findall(text)]


def parse_text_analysis(text: str) -> Dict[str, Any]:
    """Fallback for prose replies: overall, nutrition, exercise, sleep scores by position."""
    scores = scrape_scores(text)

    def nth(i: int) -> float:
        return (scores[i] if i < len(scores) else 0) or 7

    return {
        "overallScore": nth(0),
        "nutrition": {"score": nth(1)},
        "exercise": {"score": nth(2)},
        "sleep": {"score": nth(3)},
        "rawAnalysis": text,
    }
