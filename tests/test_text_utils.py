"""Unit tests for the greeting and small utility helpers."""
import pytest

from tools.text_utils import greet, say_goodbye, calculate_sum, validate_email


class TestGreetings:
    """Test greeting and farewell formatting."""

    @pytest.mark.parametrize("name", ["World", "", "José", "Mary-Jane", "小明"])
    def test_greet_interpolates_name_verbatim(self, name):
        """Names are inserted unchanged."""
        assert greet(name) == f"Hello, {name}!"

    def test_greet_empty_name(self):
        """An empty name still yields the template."""
        assert greet("") == "Hello, !"

    def test_say_goodbye_non_ascii(self):
        """Accented names are kept."""
        assert say_goodbye("José") == "Goodbye, José!"

    def test_say_goodbye_hyphenated(self):
        """Hyphenated names are kept."""
        assert say_goodbye("Jean-Luc") == "Goodbye, Jean-Luc!"


class TestHelpers:
    """Test the numeric and email helpers."""

    def test_calculate_sum(self):
        """Sums ints and floats; empty is zero."""
        assert calculate_sum([1, 2, 3]) == 6
        assert calculate_sum([]) == 0
        assert calculate_sum([1.5, -0.5]) == 1.0

    def test_validate_email(self):
        """Requires one @, a dotted domain and no spaces."""
        assert validate_email("parent@example.com")
        assert not validate_email("parent@example")
        assert not validate_email("parent example@mail.com")
        assert not validate_email("")
