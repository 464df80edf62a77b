"""LLM Configuration for the NeuraLink AI core.

This module handles Gemini model initialization with appropriate safety settings.
"""
import logging
from typing import Any, Dict, Optional
import google.generativeai as genai
from config import settings

logger = logging.getLogger(__name__)

# Standard safety settings for a children's product
SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


_configured_key: Optional[str] = None


def configure_gemini() -> bool:
    """
    Points the SDK at GEMINI_API_KEY once per process.

    genai.configure() rewrites global client state, so every model in the
    process shares this one key. Returns False when no key is set.
    """
    global _configured_key
    api_key = settings.GEMINI_API_KEY
    if not api_key:
        return False
    if _configured_key != api_key:
        genai.configure(api_key=api_key)
        _configured_key = api_key
    return True


def get_gemini_model(
    model_name: str = settings.HEALTH_MODEL_NAME,
    generation_config: Optional[Dict[str, Any]] = None,
):
    """
    Configures and returns a Gemini model instance.

    Args:
        model_name: Model to use (default: gemini-2.5-pro)
        generation_config: Sampling parameters sent with every request.

    Returns:
        GenerativeModel instance or None if no API key is available.
    """
    if not configure_gemini():
        logger.warning(f"GEMINI_API_KEY not set. {model_name} will run in fallback mode.")
        return None

    model = genai.GenerativeModel(
        model_name=model_name,
        safety_settings=SAFETY_SETTINGS,
        generation_config=generation_config,
    )
    return model
