"""Validation result shared by every layer."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class ValidationResult:
    """Errors and warnings collected by a validation step."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, message: str):
        self.errors.append(message)

    def add_warning(self, message: str):
        self.warnings.append(message)

    def merge(self, other: "ValidationResult", prefix: str = "") -> "ValidationResult":
        """Append another result's messages, optionally prefixed."""
        self.errors.extend(f"{prefix}{m}" for m in other.errors)
        self.warnings.extend(f"{prefix}{m}" for m in other.warnings)
        return self

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def failure(cls, *errors: str) -> "ValidationResult":
        return cls(errors=list(errors))
