"""Tests for the rule-based GemmaLocalEngine and its lifecycle."""
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from core.exceptions import EngineNotInitialized, StartupFailed
from models.conversation import ConversationData, Emotion, EngineState, LocalEngineConfig
from services.local_engine import (
    GemmaLocalEngine,
    recognize_emotion,
    calculate_confidence,
    calculate_difficulty_level,
    extract_educational_content,
    COMFORT_REPLY,
    EXCITED_REPLY,
    IDIOM_REPLY,
    LEARNING_REPLY,
    GENERAL_REPLY,
    ERROR_REPLY,
)

FAST_CONFIG = LocalEngineConfig(startup_delays=(0, 0, 0))


def turn(message, user_id="child_001"):
    return ConversationData(user_id=user_id, message=message)


@pytest_asyncio.fixture
async def engine():
    engine = GemmaLocalEngine(FAST_CONFIG)
    await engine.initialize()
    return engine


class TestLifecycle:
    """Test engine startup and the readiness guard."""

    def test_starts_uninitialized(self):
        """A new engine is not ready."""
        engine = GemmaLocalEngine(FAST_CONFIG)
        assert engine.state is EngineState.UNINITIALIZED
        assert not engine.is_initialized

    @pytest.mark.asyncio
    async def test_calls_before_initialize_fail(self):
        """Every public call refuses to run before startup."""
        engine = GemmaLocalEngine(FAST_CONFIG)

        with pytest.raises(EngineNotInitialized):
            await engine.process_conversation(turn("你好"))
        with pytest.raises(EngineNotInitialized):
            await engine.teach_idiom("守株待兔", 8)
        with pytest.raises(EngineNotInitialized):
            await engine.generate_steam_content("science", 8)
        with pytest.raises(EngineNotInitialized):
            await engine.provide_emotional_support("sad", "考试")
        assert engine.conversation_history == []

    @pytest.mark.asyncio
    async def test_initialize_runs_all_steps(self):
        """Startup runs the three loading steps once each."""
        engine = GemmaLocalEngine(FAST_CONFIG)
        engine._load_model = AsyncMock()
        engine._setup_emotion_recognition = AsyncMock()
        engine._load_educational_content = AsyncMock()

        await engine.initialize()

        assert engine.state is EngineState.READY
        engine._load_model.assert_awaited_once()
        engine._setup_emotion_recognition.assert_awaited_once()
        engine._load_educational_content.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_startup_failure_leaves_engine_uninitialized(self):
        """A failed step raises StartupFailed and resets the state."""
        engine = GemmaLocalEngine(FAST_CONFIG)
        engine._setup_emotion_recognition = AsyncMock(side_effect=RuntimeError("no weights"))

        with pytest.raises(StartupFailed) as excinfo:
            await engine.initialize()

        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert engine.state is EngineState.UNINITIALIZED
        with pytest.raises(EngineNotInitialized):
            await engine.process_conversation(turn("你好"))

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, engine):
        """Initializing a ready engine does nothing."""
        engine._load_model = AsyncMock()
        await engine.initialize()
        engine._load_model.assert_not_awaited()
        assert engine.is_initialized


class TestEmotionRecognition:
    """Test the keyword emotion tables."""

    @pytest.mark.parametrize("message,emotion", [
        ("我今天很开心", Emotion.HAPPY),
        ("我很难过", Emotion.SAD),
        ("弟弟真讨厌", Emotion.ANGRY),
        ("哇塞", Emotion.EXCITED),
        ("我有点害怕打雷", Emotion.SCARED),
        ("这道题我不懂", Emotion.CONFUSED),
        ("今天下雨了", Emotion.NEUTRAL),
    ])
    def test_keyword_tables(self, message, emotion):
        """Each table maps its keywords to its emotion."""
        assert recognize_emotion(message) is emotion

    def test_first_table_wins(self):
        """Tables are checked in a fixed order."""
        # "好" is a happy keyword, checked before the sad table
        assert recognize_emotion("我好难过") is Emotion.HAPPY


class TestConfidence:
    """Test the reply confidence heuristic."""

    def test_bounds(self):
        """Confidence grows with length and caps at 0.95."""
        assert calculate_confidence("") == 0.7
        assert calculate_confidence("a" * 200) == 0.9
        assert calculate_confidence("a" * 1000) == 0.95

    def test_emoji_bonus(self):
        """An emoji adds 0.05."""
        assert calculate_confidence("😀" + "a" * 1000) == 1.0
        assert calculate_confidence("😀") == 0.75

    @pytest.mark.parametrize("text", [GENERAL_REPLY, COMFORT_REPLY, "🎉" * 300])
    def test_always_within_range(self, text):
        """Confidence stays between 0.7 and 1.0."""
        assert 0.7 <= calculate_confidence(text) <= 1.0


class TestConversation:
    """Test conversation turns and history."""

    @pytest.mark.asyncio
    async def test_sad_message_gets_comfort(self, engine):
        """Sad messages get the comfort reply."""
        response = await engine.process_conversation(turn("考试没考过，我很伤心"))

        assert response.text == COMFORT_REPLY
        assert response.emotion == "sad"
        assert response.confidence == calculate_confidence(COMFORT_REPLY)
        assert response.educational_content is None

    @pytest.mark.asyncio
    async def test_excited_message(self, engine):
        """Excited messages get the excited reply."""
        response = await engine.process_conversation(turn("明天去动物园，我好期待"))
        # "好" matches the happy table first
        assert response.emotion == "happy"

        response = await engine.process_conversation(turn("哇！下雪了"))
        assert response.text == EXCITED_REPLY
        assert response.emotion == "excited"

    @pytest.mark.asyncio
    async def test_idiom_request(self, engine):
        """Idiom questions get the idiom reply with neutral emotion."""
        response = await engine.process_conversation(
            turn("我今天学了一个新成语叫“拔苗助长”，你能给我讲讲这个故事吗？")
        )

        assert response.text == IDIOM_REPLY
        assert response.emotion == "neutral"
        assert response.educational_content.topic == "知识探索"
        assert response.educational_content.difficulty_level == 2

    @pytest.mark.asyncio
    async def test_learning_question(self, engine):
        """Learning questions get the learning reply."""
        response = await engine.process_conversation(turn("我想学习画画"))
        assert response.text == LEARNING_REPLY
        assert response.educational_content is not None

    @pytest.mark.asyncio
    async def test_general_reply_uses_recent_context(self, engine):
        """The generic reply quotes the previous turn."""
        first = await engine.process_conversation(turn("今天下雨了"))
        second = await engine.process_conversation(turn("我在家里搭积木"))

        assert first.text == GENERAL_REPLY
        assert "今天下雨了" in second.text
        assert second.emotion == "neutral"

    @pytest.mark.asyncio
    async def test_errors_become_fallback_response(self, engine):
        """A bad turn yields the sleepy fallback reply."""
        response = await engine.process_conversation(ConversationData(user_id="child_001", message=None))

        assert response.text == ERROR_REPLY
        assert response.confidence == 0.5
        assert response.emotion == "confused"

    @pytest.mark.asyncio
    async def test_bad_turn_does_not_break_next_turn(self, engine):
        """A non-text message stays out of history so the next turn is normal."""
        await engine.process_conversation(ConversationData(user_id="child_001", message=None))

        response = await engine.process_conversation(turn("今天下雨了"))

        assert response.text == GENERAL_REPLY
        assert [t.message for t in engine.conversation_history] == ["今天下雨了"]

    @pytest.mark.asyncio
    async def test_history_is_bounded(self, engine):
        """History never exceeds fifty turns."""
        for i in range(120):
            await engine.process_conversation(turn(f"第{i}句"))
            assert len(engine.conversation_history) <= 50

    @pytest.mark.asyncio
    async def test_history_trimmed_to_thirty(self, engine):
        """Going past fifty keeps the latest thirty."""
        for i in range(50):
            await engine.process_conversation(turn(f"第{i}句"))
        assert len(engine.conversation_history) == 50

        await engine.process_conversation(turn("第50句"))

        history = engine.conversation_history
        assert len(history) == 30
        assert history[0].message == "第21句"
        assert history[-1].message == "第50句"


class TestGuidedContent:
    """Test idiom, STEAM and emotional support content."""

    @pytest.mark.asyncio
    async def test_teach_known_idiom(self, engine):
        """A known idiom gets its story, meaning and activities."""
        response = await engine.teach_idiom("拔苗助长", 8)

        assert response.confidence == 0.95
        assert response.emotion == "excited"
        assert response.text.startswith("📚 成语学习：拔苗助长")
        assert "农夫" in response.text
        assert "不能急于求成" in response.text
        assert response.educational_content.topic == "成语：拔苗助长"
        assert response.educational_content.difficulty_level == 2
        assert len(response.educational_content.interactive_elements) == 4

    @pytest.mark.asyncio
    async def test_teach_unknown_idiom(self, engine):
        """An unknown idiom gets the generic story text."""
        response = await engine.teach_idiom("画蛇添足", 11)

        assert "关于“画蛇添足”的故事很有趣" in response.text
        assert response.educational_content.difficulty_level == 3

    @pytest.mark.asyncio
    async def test_steam_content(self, engine):
        """Known subjects use their template, others use the subject name."""
        response = await engine.generate_steam_content("science", 7)

        assert response.confidence == 0.92
        assert response.emotion == "excited"
        assert response.text.startswith("🔬 科学探索")
        assert response.educational_content.topic == "科学探索"

        other = await engine.generate_steam_content("astronomy", 14)
        assert other.educational_content.topic == "astronomy"
        assert other.educational_content.difficulty_level == 4

    @pytest.mark.asyncio
    async def test_emotional_support(self, engine):
        """Support text includes coping strategies and breathing."""
        response = await engine.provide_emotional_support("angry", "和弟弟吵架")

        assert response.confidence == 0.88
        assert response.emotion == "caring"
        assert "数到十" in response.text
        assert "慢慢吸气4秒" in response.text

        generic = await engine.provide_emotional_support("lonely", "")
        assert "我们一起面对好吗" in generic.text

    @pytest.mark.parametrize("age,level", [(3, 1), (5, 1), (8, 2), (12, 3), (15, 4)])
    def test_difficulty_levels(self, age, level):
        """Difficulty rises with age bands."""
        assert calculate_difficulty_level(age) == level

    def test_educational_keywords(self):
        """Only messages with learning keywords carry content."""
        assert extract_educational_content("数学好难") is not None
        assert extract_educational_content("我们去玩吧") is None
