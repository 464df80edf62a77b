"""NeuraLink Service Module.

Services:
    GeminiHealthAnalyzer: Daily health analysis via Gemini 2.5 Pro.
    ImagenGenerator: Emotional illustrations via Imagen 3.0.
    GemmaLocalEngine: Rule-based on-device companion conversation.
"""
from services.health_analyzer import (
    GeminiHealthAnalyzer,
    HealthDataValidator,
    create_gemini_health_analyzer,
)
from services.image_generator import (
    ImagenGenerator,
    ImageStyleUtils,
    create_imagen_generator,
)
from services.local_engine import GemmaLocalEngine, create_gemma_local_engine

__all__ = [
    "GeminiHealthAnalyzer",
    "HealthDataValidator",
    "create_gemini_health_analyzer",
    "ImagenGenerator",
    "ImageStyleUtils",
    "create_imagen_generator",
    "GemmaLocalEngine",
    "create_gemma_local_engine",
]
