"""Tests for the demo entry point (no API calls)."""
from unittest.mock import patch

import quick_start


def test_missing_api_key_exits_with_error(capsys):
    """Without GEMINI_API_KEY the demo prints an error and exits 1."""
    with patch.object(quick_start, "GEMINI_API_KEY", None):
        assert quick_start.main() == 1
    assert "GEMINI_API_KEY not found" in capsys.readouterr().out


def test_demo_failure_exits_with_error():
    """Errors during the demo exit 1."""
    with patch.object(quick_start, "GEMINI_API_KEY", "test-key"), \
            patch.object(quick_start, "run_demo", side_effect=RuntimeError("quota exceeded")):
        assert quick_start.main() == 1


def test_sample_health_data():
    """The sample record is an eight-year-old with ten hours of sleep."""
    data = quick_start.sample_health_data()
    assert data.child_age == 8
    assert data.sleep.total_hours == 10
    assert data.meals.breakfast.has_image
