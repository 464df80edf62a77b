from typing import Any, Dict, List, Mapping, Optional
from dataclasses import dataclass, field, asdict
from datetime import datetime


@dataclass
class MealEntry:
    description: str = ""
    has_image: bool = False


@dataclass
class Meals:
    breakfast: MealEntry = field(default_factory=MealEntry)
    lunch: MealEntry = field(default_factory=MealEntry)
    dinner: MealEntry = field(default_factory=MealEntry)


@dataclass
class ExerciseRecord:
    type: str = ""
    duration: str = ""
    description: str = ""


@dataclass
class SleepRecord:
    start_time: str = ""
    end_time: str = ""
    total_hours: Optional[float] = None


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key, accepting snake_case or camelCase spellings."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass
class ChildHealthData:
    """One day of a child's meals, exercise and sleep."""
    meals: Meals = field(default_factory=Meals)
    exercise: ExerciseRecord = field(default_factory=ExerciseRecord)
    sleep: SleepRecord = field(default_factory=SleepRecord)
    child_age: Optional[int] = None         # prompt assumes 8 when missing
    child_weight: Optional[float] = None    # kg
    special_needs: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChildHealthData":
        meals_raw = data.get("meals") or {}
        meals = Meals(**{
            slot: MealEntry(
                description=_pick(meals_raw.get(slot) or {}, "description", default=""),
                has_image=bool(_pick(meals_raw.get(slot) or {}, "has_image", "hasImage", default=False)),
            )
            for slot in ("breakfast", "lunch", "dinner")
        })
        exercise_raw = data.get("exercise") or {}
        sleep_raw = data.get("sleep") or {}
        return cls(
            meals=meals,
            exercise=ExerciseRecord(
                type=_pick(exercise_raw, "type", default=""),
                duration=_pick(exercise_raw, "duration", default=""),
                description=_pick(exercise_raw, "description", default=""),
            ),
            sleep=SleepRecord(
                start_time=_pick(sleep_raw, "start_time", "startTime", default=""),
                end_time=_pick(sleep_raw, "end_time", "endTime", default=""),
                total_hours=_pick(sleep_raw, "total_hours", "totalHours"),
            ),
            child_age=_pick(data, "child_age", "childAge"),
            child_weight=_pick(data, "child_weight", "childWeight"),
            special_needs=list(_pick(data, "special_needs", "specialNeeds", default=[])),
        )


@dataclass
class NutritionAnalysis:
    score: float
    strengths: List[str]
    improvements: List[str]
    recommendations: List[str]


@dataclass
class ExerciseAnalysis:
    score: float
    adequacy: str
    suggestions: List[str]


@dataclass
class SleepAnalysis:
    score: float
    quality: str
    recommendations: List[str]


@dataclass
class HealthAnalysisResult:
    """Structured output of a Gemini health analysis. Every field is always set."""
    overall_score: float
    nutrition_analysis: NutritionAnalysis
    exercise_analysis: ExerciseAnalysis
    sleep_analysis: SleepAnalysis
    parent_guidance: List[str]
    next_step_actions: List[str]
    emergency_alerts: List[str] = field(default_factory=list)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
