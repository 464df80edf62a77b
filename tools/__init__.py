"""NeuraLink Tools Module.

Deterministic helpers with no model calls.

Tools:
    extract_response_text: First text candidate of a Gemini response.
    extract_inline_image: First inline image of a Gemini response as a data URI.
    parse_json_payload: Strict JSON parse of a fenced model reply.
    parse_text_analysis: "N分" score scraping for prose replies.
    greet / say_goodbye: Greeting strings.
"""
from tools.response_parser import (
    extract_response_text,
    extract_inline_image,
    parse_json_payload,
    parse_text_analysis,
)
from tools.text_utils import greet, say_goodbye, calculate_sum, validate_email

__all__ = [
    "extract_response_text",
    "extract_inline_image",
    "parse_json_payload",
    "parse_text_analysis",
    "greet",
    "say_goodbye",
    "calculate_sum",
    "validate_email",
]
