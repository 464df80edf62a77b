"""Tests for Gemini model configuration (the SDK is replaced by a mock)."""
from unittest.mock import MagicMock

import pytest

import config.llm as llm
from services.health_analyzer import GeminiHealthAnalyzer
from services.image_generator import ImagenGenerator


@pytest.fixture
def fake_genai(monkeypatch):
    fake = MagicMock()
    monkeypatch.setattr(llm, "genai", fake)
    monkeypatch.setattr(llm, "_configured_key", None)
    return fake


class TestGetGeminiModel:
    """Test model construction and the process-wide API key."""

    def test_services_share_one_configured_key(self, fake_genai, monkeypatch):
        """Two services built in one process are configured with the same key once."""
        monkeypatch.setattr(llm.settings, "GEMINI_API_KEY", "KEY-A")

        analyzer = GeminiHealthAnalyzer()
        generator = ImagenGenerator()

        fake_genai.configure.assert_called_once_with(api_key="KEY-A")
        assert analyzer.model is not None
        assert generator.model is not None
        assert fake_genai.GenerativeModel.call_count == 2

    def test_services_do_not_take_their_own_key(self):
        """A per-instance key is rejected, since the SDK key is global."""
        with pytest.raises(TypeError):
            GeminiHealthAnalyzer(api_key="KEY-B")
        with pytest.raises(TypeError):
            ImagenGenerator(api_key="KEY-B")

    def test_changed_key_is_reapplied(self, fake_genai, monkeypatch):
        """A new key in settings is pushed to the SDK on the next model."""
        monkeypatch.setattr(llm.settings, "GEMINI_API_KEY", "KEY-A")
        llm.get_gemini_model()
        monkeypatch.setattr(llm.settings, "GEMINI_API_KEY", "KEY-B")
        llm.get_gemini_model()

        assert [c.kwargs["api_key"] for c in fake_genai.configure.call_args_list] == ["KEY-A", "KEY-B"]

    def test_missing_key_returns_none(self, fake_genai, monkeypatch):
        """Without a key no model is built and the SDK is left alone."""
        monkeypatch.setattr(llm.settings, "GEMINI_API_KEY", None)

        assert llm.get_gemini_model() is None
        fake_genai.configure.assert_not_called()

    def test_safety_and_generation_config_passed(self, fake_genai, monkeypatch):
        """The model gets the safety settings and the caller's generation config."""
        monkeypatch.setattr(llm.settings, "GEMINI_API_KEY", "KEY-A")

        llm.get_gemini_model("gemini-test", generation_config={"temperature": 0.1})

        fake_genai.GenerativeModel.assert_called_once_with(
            model_name="gemini-test",
            safety_settings=llm.SAFETY_SETTINGS,
            generation_config={"temperature": 0.1},
        )
