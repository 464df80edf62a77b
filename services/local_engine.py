"""GemmaLocalEngine - On-Device Companion Conversation

A rule-based stand-in for a locally hosted Gemma model, built for real-time
chat with a smart plush toy.

Design Decisions:
    1. No model is loaded: initialize() runs three simulated startup steps.
    2. Emotion recognition is a keyword scan; the first matching table wins.
    3. Replies come from canned templates chosen by emotion and keywords.
    4. Once READY, nothing is fatal: any error becomes a sleepy fallback reply.
"""
from typing import Dict, List, Optional
import re
import time
import asyncio
import logging

from config.settings import (
    MAX_HISTORY_ENTRIES,
    TRIMMED_HISTORY_ENTRIES,
    RECENT_CONTEXT_MESSAGES,
)
from core.exceptions import EngineNotInitialized, StartupFailed
from core.observability import elapsed_ms
from models.conversation import (
    Emotion,
    EngineState,
    LocalEngineConfig,
    DEFAULT_LOCAL_CONFIG,
    ConversationData,
    EducationalContent,
    LocalResponse,
)

logger = logging.getLogger(__name__)

# Scanned in order; the first table with a substring hit decides the emotion.
EMOTION_KEYWORDS: Dict[Emotion, List[str]] = {
    Emotion.HAPPY: ["开心", "高兴", "快乐", "喜欢", "棒", "好"],
    Emotion.SAD: ["难过", "伤心", "哭", "不开心", "失望"],
    Emotion.ANGRY: ["生气", "愤怒", "讨厌", "烦", "气"],
    Emotion.EXCITED: ["兴奋", "激动", "期待", "哇", "太好了"],
    Emotion.SCARED: ["害怕", "恐怖", "可怕", "担心", "紧张"],
    Emotion.CONFUSED: ["不懂", "为什么", "困惑", "奇怪", "?"],
}

EDUCATIONAL_KEYWORDS = ["学习", "为什么", "怎么", "成语", "故事", "数学", "科学"]
IDIOM_KEYWORDS = ["成语", "故事"]
LEARNING_KEYWORDS = ["学习", "为什么"]

EMOJI_PATTERN = re.compile(
    "[\U0001F600-\U0001F64F\U0001F300-\U0001F5FF\U0001F680-\U0001F6FF\U0001F1E0-\U0001F1FF]"
)

COMFORT_REPLY = "我感受到你的情绪了。没关系，我陪着你。要不要告诉我发生了什么？"
EXCITED_REPLY = "哇！我能感受到你的兴奋！快告诉我是什么让你这么开心！"
IDIOM_REPLY = "想听什么成语故事呢？我知道很多有趣的成语！"
LEARNING_REPLY = "这是个很好的问题！我们一起来探索答案吧！"
GENERAL_REPLY = "我听到了！这很有趣。你还想聊什么呢？"
ERROR_REPLY = "抱歉，我现在有点困了。要不要稍后再聊？"

IDIOM_STORIES = {
    "拔苗助长": "从前有个农夫，他种了一些禾苗。他每天都去看，觉得禾苗长得太慢了。有一天，他决定帮助禾苗长得快一点，就把每一棵禾苗都往上拔了一点点。农夫很高兴，以为禾苗会长得更快。可是第二天他去看的时候，发现所有的禾苗都枯死了！",
    "守株待兔": "古时候有个农夫在田里干活，突然看到一只兔子跑来，一头撞在树桩上死了。农夫很高兴，捡起兔子回家美美地吃了一顿。从那以后，他就每天坐在那个树桩旁边等兔子，再也不种田了。结果再也没有兔子撞死，他的田地也荒废了。",
    "亡羊补牢": "有个人养了一群羊，一天早上发现羊圈破了个洞，丢了一只羊。邻居劝他修补羊圈，他说已经丢了羊了，修还有什么用呢？第二天，他又丢了一只羊。这时他才意识到问题的严重性，赶紧修补了羊圈，从此再也没有丢过羊。",
}

IDIOM_EXPLANATIONS = {
    "拔苗助长": "这个成语告诉我们，做事情要按照自然规律，不能急于求成。就像学习一样，需要一步一步来，不能着急哦！",
    "守株待兔": "这个成语提醒我们，不能依靠运气和偶然，要通过自己的努力去获得成功。",
    "亡羊补牢": "这个成语说的是，犯了错误不要紧，重要的是要及时改正，这样还不算太晚。",
}

IDIOM_INTERACTIONS = [
    "🎭 你能表演一下这个故事吗？",
    "🤔 你觉得故事中的人做得对吗？为什么？",
    "📝 你能想到生活中类似的例子吗？",
    "🎨 要不要画一幅关于这个故事的画？",
]

STEAM_TOPICS = {
    "science": "科学探索",
    "technology": "技术发现",
    "engineering": "工程思维",
    "arts": "艺术创作",
    "mathematics": "数学思维",
}

STEAM_ACTIVITIES = [
    "🔍 观察身边的现象",
    "🤲 动手做实验",
    "📊 记录你的发现",
    "🎨 画出你看到的",
]

COMFORT_STRATEGIES = {
    "sad": "我理解你现在有点难过。每个人都会有这样的时候，这很正常。要不要跟我分享一下发生了什么？",
    "angry": "我感觉到你有点生气。生气的时候深呼吸是很有用的哦！我们一起来数到十好吗？",
    "scared": "别害怕，我陪着你呢！有时候感到害怕是很正常的。你想要抱抱吗？",
    "confused": "有不懂的问题很棒啊！这说明你在思考。我们可以一起想办法解决。",
    "excited": "哇！我能感受到你的兴奋！快告诉我发生了什么好事情？",
}

COPING_STRATEGIES = [
    "🫁 深呼吸，放松身体",
    "💭 想想开心的事情",
    "🗣️ 跟信任的人说话",
    "🎵 听喜欢的音乐",
]

BREATHING_EXERCISE = "慢慢吸气4秒，暂停4秒，再慢慢呼气4秒。我们一起做！"


def recognize_emotion(message: str) -> Emotion:
    for emotion, keywords in EMOTION_KEYWORDS.items():
        if any(keyword in message for keyword in keywords):
            return emotion
    return Emotion.NEUTRAL


def calculate_confidence(text: str) -> float:
    """Heuristic confidence: longer replies score higher, emoji add a small bonus."""
    confidence = min(0.7 + (len(text) / 200) * 0.2, 0.95)
    if EMOJI_PATTERN.search(text):
        confidence += 0.05
    return round(confidence, 2)


def calculate_difficulty_level(age: int) -> int:
    if age <= 5:
        return 1
    if age <= 8:
        return 2
    if age <= 12:
        return 3
    return 4


def extract_educational_content(message: str) -> Optional[EducationalContent]:
    if any(keyword in message for keyword in EDUCATIONAL_KEYWORDS):
        return EducationalContent(
            topic="知识探索",
            difficulty_level=2,
            interactive_elements=["问答互动", "故事讲解", "动手实践"],
        )
    return None


class GemmaLocalEngine:
    """
    Local companion engine with an explicit lifecycle.

    UNINITIALIZED -> INITIALIZING -> READY. Every call except initialize()
    raises EngineNotInitialized until the engine is READY.
    """

    def __init__(self, config: LocalEngineConfig = DEFAULT_LOCAL_CONFIG):
        self.config = config
        self._state = EngineState.UNINITIALIZED
        self._history: List[ConversationData] = []

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is EngineState.READY

    @property
    def conversation_history(self) -> List[ConversationData]:
        return list(self._history)

    # === Lifecycle ===

    async def initialize(self) -> None:
        if self._state is EngineState.READY:
            logger.info("Gemma local engine already initialized")
            return

        logger.info("Initializing Gemma local engine...")
        self._state = EngineState.INITIALIZING
        try:
            await self._load_model()
            await self._setup_emotion_recognition()
            await self._load_educational_content()
        except Exception as e:
            self._state = EngineState.UNINITIALIZED
            logger.error(f"Gemma engine startup failed: {e}", exc_info=True)
            raise StartupFailed("本地AI引擎启动失败") from e

        self._state = EngineState.READY
        logger.info("Gemma local engine ready")

    async def _load_model(self) -> None:
        logger.info(f"Loading model: {self.config.model_path} ({self.config.device_type.value})")
        await asyncio.sleep(self.config.startup_delays[0])
        logger.info("Model loaded")

    async def _setup_emotion_recognition(self) -> None:
        logger.info("Setting up emotion recognition...")
        await asyncio.sleep(self.config.startup_delays[1])
        logger.info("Emotion recognition ready")

    async def _load_educational_content(self) -> None:
        logger.info("Loading educational content library...")
        await asyncio.sleep(self.config.startup_delays[2])
        logger.info("Educational content library loaded")

    def _ensure_ready(self) -> None:
        if self._state is not EngineState.READY:
            raise EngineNotInitialized("Gemma引擎尚未初始化")

    # === Conversation ===

    async def process_conversation(self, data: ConversationData) -> LocalResponse:
        self._ensure_ready()
        start = time.perf_counter()

        try:
            if not isinstance(data.message, str):
                raise TypeError(f"message must be str, got {type(data.message).__name__}")
            self._history.append(data)
            self._trim_history()

            emotion = recognize_emotion(data.message)
            text = self._generate_response(data, emotion)

            return LocalResponse(
                text=text,
                confidence=calculate_confidence(text),
                emotion=emotion.value,
                educational_content=extract_educational_content(data.message),
                processing_time=elapsed_ms(start),
            )
        except Exception as e:
            logger.error(f"Conversation processing failed: {e}", exc_info=True)
            return self._error_response(start)

    def _generate_response(self, data: ConversationData, emotion: Emotion) -> str:
        message = data.message
        if emotion is Emotion.SAD:
            return COMFORT_REPLY
        if emotion is Emotion.EXCITED:
            return EXCITED_REPLY
        if any(keyword in message for keyword in IDIOM_KEYWORDS):
            return IDIOM_REPLY
        if any(keyword in message for keyword in LEARNING_KEYWORDS):
            return LEARNING_REPLY
        return self._general_response(self._recent_context())

    @staticmethod
    def _general_response(context: List[str]) -> str:
        # context[-1] is the current turn
        if len(context) < 2:
            return GENERAL_REPLY
        previous = context[-2][:20]
        return f"我听到了！这很有趣。刚才你说“{previous}”，你还想聊什么呢？"

    def _recent_context(self) -> List[str]:
        recent = self._history[-RECENT_CONTEXT_MESSAGES:]
        return [turn.message for turn in recent if isinstance(turn.message, str)]

    def _trim_history(self) -> None:
        if len(self._history) > MAX_HISTORY_ENTRIES:
            self._history = self._history[-TRIMMED_HISTORY_ENTRIES:]

    # === Guided content ===

    async def teach_idiom(self, idiom: str, child_age: int) -> LocalResponse:
        self._ensure_ready()
        start = time.perf_counter()

        try:
            story = IDIOM_STORIES.get(idiom, f"关于“{idiom}”的故事很有趣，让我来给你讲讲...")
            explanation = IDIOM_EXPLANATIONS.get(idiom, f"“{idiom}”教会我们很重要的道理。")
            interaction = list(IDIOM_INTERACTIONS)

            text = "\n".join([
                f"📚 成语学习：{idiom}",
                "",
                "🎭 故事时间：",
                story,
                "",
                "💡 成语解释：",
                explanation,
                "",
                "🎮 互动环节：",
                *interaction,
            ])

            return LocalResponse(
                text=text,
                confidence=0.95,
                emotion=Emotion.EXCITED.value,
                educational_content=EducationalContent(
                    topic=f"成语：{idiom}",
                    difficulty_level=calculate_difficulty_level(child_age),
                    interactive_elements=interaction,
                ),
                processing_time=elapsed_ms(start),
            )
        except Exception as e:
            logger.error(f"Idiom lesson failed: {e}", exc_info=True)
            return self._error_response(start)

    async def generate_steam_content(self, topic: str, age: int) -> LocalResponse:
        self._ensure_ready()
        start = time.perf_counter()

        try:
            title = STEAM_TOPICS.get(topic, "科学探索")
            activities = list(STEAM_ACTIVITIES)

            text = "\n".join([
                f"🔬 {title}",
                "",
                "📖 今日学习：",
                f"这是一个关于{topic}的有趣探索，特别适合{age}岁的你！",
                "",
                "🎯 动手实践：",
                *activities,
                "",
                "💡 小贴士：",
                f"这个话题很适合{age}岁的你！我们可以一起探索更多有趣的内容。",
            ])

            return LocalResponse(
                text=text,
                confidence=0.92,
                emotion=Emotion.EXCITED.value,
                educational_content=EducationalContent(
                    topic=STEAM_TOPICS.get(topic, topic),
                    difficulty_level=calculate_difficulty_level(age),
                    interactive_elements=activities,
                ),
                processing_time=elapsed_ms(start),
            )
        except Exception as e:
            logger.error(f"STEAM content generation failed: {e}", exc_info=True)
            return self._error_response(start)

    async def provide_emotional_support(self, emotion: str, situation: str) -> LocalResponse:
        self._ensure_ready()
        start = time.perf_counter()

        try:
            logger.info(f"Emotional support requested: {emotion} ({situation})")
            comfort = COMFORT_STRATEGIES.get(emotion, "我感受到了你的情绪，我们一起面对好吗？")

            text = "\n".join([
                f"💝 {comfort}",
                "",
                "🌈 我们可以这样做：",
                *COPING_STRATEGIES,
                "",
                "🫁 放松小练习：",
                BREATHING_EXERCISE,
                "",
                "💫 记住，我永远在这里陪伴你！",
            ])

            return LocalResponse(
                text=text,
                confidence=0.88,
                emotion=Emotion.CARING.value,
                processing_time=elapsed_ms(start),
            )
        except Exception as e:
            logger.error(f"Emotional support failed: {e}", exc_info=True)
            return self._error_response(start)

    @staticmethod
    def _error_response(start: float) -> LocalResponse:
        return LocalResponse(
            text=ERROR_REPLY,
            confidence=0.5,
            emotion=Emotion.CONFUSED.value,
            processing_time=elapsed_ms(start),
        )


def create_gemma_local_engine(config: LocalEngineConfig = DEFAULT_LOCAL_CONFIG) -> GemmaLocalEngine:
    return GemmaLocalEngine(config)
