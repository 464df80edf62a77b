from typing import List
from dataclasses import dataclass, field


@dataclass
class ValidationResult:
    """Outcome of checking a raw request payload before it is used."""
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors
