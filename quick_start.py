"""NeuraLink Quick Start - Google AI Core Demo

Walks through the three services end to end:
1. Children's health analysis (Gemini 2.5 Pro)
2. Emotional illustration generation (Imagen 3.0)
3. Local companion conversation (Gemma engine)

Run with: python quick_start.py   (requires GEMINI_API_KEY in .env)
"""
import sys
import asyncio
import logging

from config.settings import GEMINI_API_KEY
from core.observability import get_metrics_summary
from models.health import ChildHealthData, Meals, MealEntry, ExerciseRecord, SleepRecord
from models.imaging import ImageGenerationConfig, ImageStyle, EmotionalTone
from models.conversation import ConversationData, Emotion, DEFAULT_LOCAL_CONFIG
from services.health_analyzer import GeminiHealthAnalyzer
from services.image_generator import ImagenGenerator
from services.local_engine import GemmaLocalEngine

logger = logging.getLogger(__name__)


def sample_health_data() -> ChildHealthData:
    """An eight-year-old's ordinary school day."""
    return ChildHealthData(
        meals=Meals(
            breakfast=MealEntry("牛奶一杯、全麦面包两片、煎蛋一个", has_image=True),
            lunch=MealEntry("米饭、青菜炒肉丝、紫菜蛋花汤"),
            dinner=MealEntry("小米粥、蒸蛋羹、凉拌黄瓜", has_image=True),
        ),
        exercise=ExerciseRecord(
            type="户外跑步",
            duration="30分钟",
            description="在公园和爸爸一起跑步，还玩了滑梯",
        ),
        sleep=SleepRecord(start_time="21:00", end_time="07:00", total_hours=10),
        child_age=8,
        child_weight=25,
    )


async def run_demo() -> None:
    # 1. Health analysis
    print("📊 [Demo 1] Gemini 2.5 Pro health analysis")
    print("-" * 42)
    analyzer = GeminiHealthAnalyzer()
    health_result = await analyzer.analyze_child_health(sample_health_data())
    print(analyzer.generate_health_summary(health_result))
    print()

    # 2. Illustration
    print("🎨 [Demo 2] Imagen 3.0 emotional illustration")
    print("-" * 42)
    generator = ImagenGenerator()
    image_result = await generator.generate_emotional_illustration(
        ImageGenerationConfig(
            target="妈妈",
            message=f"我今天健康评分是{health_result.overall_score}分！我很健康很开心！",
            style=ImageStyle.CARTOON,
            emotional_tone=EmotionalTone.HAPPY,
            child_age=8,
            custom_elements=["健康", "运动", "营养"],
        )
    )
    print(f"   📏 Resolution: {image_result.resolution}")
    print(f"   ⭐ Quality: {image_result.quality}")
    print(f"   ⏱️ Generation time: {image_result.generation_time}ms")
    print(f"   🤖 Engine: {image_result.metadata.engine}")
    print(f"   🔗 Image URL: {image_result.image_url[:50]}...")
    print()

    # 3. Local engine
    print("🏠 [Demo 3] Gemma local engine conversation")
    print("-" * 42)
    engine = GemmaLocalEngine(DEFAULT_LOCAL_CONFIG)
    await engine.initialize()

    conversations = [
        ConversationData(
            user_id="child_001",
            message="我今天学了一个新成语叫“拔苗助长”，你能给我讲讲这个故事吗？",
            emotion=Emotion.EXCITED,
        ),
        ConversationData(
            user_id="child_001",
            message="我有点难过，因为今天考试没考好",
            emotion=Emotion.SAD,
        ),
        ConversationData(user_id="child_001", message="我们晚上吃什么呀"),
    ]

    for i, turn in enumerate(conversations, 1):
        print(f"💬 Turn {i}: \"{turn.message}\"")
        if "成语" in turn.message:
            response = await engine.teach_idiom("拔苗助长", 8)
        elif turn.emotion is Emotion.SAD:
            response = await engine.provide_emotional_support("sad", "考试成绩")
        else:
            response = await engine.process_conversation(turn)
        print(f"   🤖 {response.text[:100]}...")
        print(f"   🎯 Confidence: {response.confidence}  ⏱️ {response.processing_time}ms")
        print()

    print("📈 Service metrics:", get_metrics_summary())


def main() -> int:
    print("🚀 NeuraLink - Google AI Core Demo")
    print("=" * 42)

    if not GEMINI_API_KEY:
        print("Error: GEMINI_API_KEY not found. Add it to your .env file.")
        return 1

    try:
        asyncio.run(run_demo())
    except Exception as e:
        logger.error(f"Demo failed: {e}", exc_info=True)
        print("🔧 Check GEMINI_API_KEY, your network connection and your API quota.")
        return 1

    print("🎉 Demo complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
