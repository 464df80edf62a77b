"""NeuraLink Data Models.

This module contains dataclasses for requests and results of each service.

Models:
    ChildHealthData: A day of meals, exercise and sleep for one child.
    HealthAnalysisResult: Scores and advice returned by the health analyzer.
    ImageGenerationConfig: Illustration request (target, message, style, tone).
    ImageGenerationResult: Generated (or fallback) image and its metadata.
    ConversationData: One turn sent to the local engine.
    LocalResponse: The local engine's reply.
    ValidationResult: Errors found in a raw request payload.
"""
from models.common import ValidationResult
from models.health import (
    MealEntry,
    Meals,
    ExerciseRecord,
    SleepRecord,
    ChildHealthData,
    NutritionAnalysis,
    ExerciseAnalysis,
    SleepAnalysis,
    HealthAnalysisResult,
)
from models.imaging import (
    ImageStyle,
    EmotionalTone,
    ImageGenerationConfig,
    ImageMetadata,
    ImageGenerationResult,
)
from models.conversation import (
    Emotion,
    EngineState,
    DeviceType,
    LocalEngineConfig,
    DEFAULT_LOCAL_CONFIG,
    ConversationData,
    EducationalContent,
    LocalResponse,
)

__all__ = [
    "ValidationResult",
    "MealEntry",
    "Meals",
    "ExerciseRecord",
    "SleepRecord",
    "ChildHealthData",
    "NutritionAnalysis",
    "ExerciseAnalysis",
    "SleepAnalysis",
    "HealthAnalysisResult",
    "ImageStyle",
    "EmotionalTone",
    "ImageGenerationConfig",
    "ImageMetadata",
    "ImageGenerationResult",
    "Emotion",
    "EngineState",
    "DeviceType",
    "LocalEngineConfig",
    "DEFAULT_LOCAL_CONFIG",
    "ConversationData",
    "EducationalContent",
    "LocalResponse",
]
