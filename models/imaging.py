from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field, asdict
from enum import Enum


class ImageStyle(Enum):
    CARTOON = "cartoon"
    HANDDRAWN = "handdrawn"
    THREE_D = "3d"
    WATERCOLOR = "watercolor"
    PIXAR = "pixar"


class EmotionalTone(Enum):
    HAPPY = "happy"
    SAD = "sad"
    EXCITED = "excited"
    CALM = "calm"
    LOVING = "loving"


@dataclass
class ImageGenerationConfig:
    """What the child wants to say, to whom, and how it should look."""
    target: str                      # who the message is for, e.g. "妈妈"
    message: str
    style: ImageStyle = ImageStyle.CARTOON
    emotional_tone: EmotionalTone = EmotionalTone.HAPPY
    child_age: Optional[int] = None  # prompt assumes 8 when missing
    custom_elements: List[str] = field(default_factory=list)

    def __post_init__(self):
        # Accept raw strings ("cartoon", "loving") from callers
        self.style = ImageStyle(self.style)
        self.emotional_tone = EmotionalTone(self.emotional_tone)


@dataclass
class ImageMetadata:
    engine: str
    model: str
    timestamp: str


@dataclass
class ImageGenerationResult:
    image_url: str       # data URI or static fallback URL
    prompt: str
    style: str
    quality: str         # "high" or "medium"
    resolution: str
    generation_time: int  # ms
    metadata: ImageMetadata

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
