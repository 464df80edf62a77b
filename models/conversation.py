import time
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field, asdict
from enum import Enum

from config.settings import DEFAULT_STARTUP_DELAYS


def now_ms() -> int:
    return int(time.time() * 1000)


class Emotion(Enum):
    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    EXCITED = "excited"
    SCARED = "scared"
    CONFUSED = "confused"
    CALM = "calm"
    CARING = "caring"
    NEUTRAL = "neutral"


class EngineState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class DeviceType(Enum):
    CPU = "cpu"
    GPU = "gpu"
    K230 = "k230"


@dataclass
class LocalEngineConfig:
    """Settings for the on-device companion engine."""
    model_path: str = "./models/gemma-7b-it"
    device_type: DeviceType = DeviceType.CPU
    max_tokens: int = 512
    temperature: float = 0.7
    context_length: int = 2048
    startup_delays: Tuple[float, float, float] = DEFAULT_STARTUP_DELAYS


DEFAULT_LOCAL_CONFIG = LocalEngineConfig()


@dataclass
class ConversationData:
    """A single turn from the child."""
    user_id: str
    message: str
    emotion: Optional[Emotion] = None
    context: List[str] = field(default_factory=list)
    timestamp: int = field(default_factory=now_ms)


@dataclass
class EducationalContent:
    topic: str
    difficulty_level: int
    interactive_elements: List[str]


@dataclass
class LocalResponse:
    text: str
    confidence: float
    emotion: str
    educational_content: Optional[EducationalContent] = None
    timestamp: int = field(default_factory=now_ms)
    processing_time: int = 0  # ms

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
