"""Small string and number helpers shared by demos and tests."""
import re
from typing import Iterable

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def greet(name: str) -> str:
    """Greets a person with a hello message."""
    return f"Hello, {name}!"


def say_goodbye(name: str) -> str:
    """Says goodbye to a person."""
    return f"Goodbye, {name}!"


def calculate_sum(numbers: Iterable[float]) -> float:
    return sum(numbers, 0)


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(email))
