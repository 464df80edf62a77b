"""NeuraLink Configuration Module.

This module handles LLM configuration and environment settings.

Functions:
    configure_gemini: Apply the process-wide Gemini API key.
    get_gemini_model: Initialize and return a configured Gemini model.
"""
from config.llm import configure_gemini, get_gemini_model

__all__ = ["configure_gemini", "get_gemini_model"]
