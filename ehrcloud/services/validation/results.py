"""
Structured validation results.

Validator functions return a ValidationResult instead of raising, so that
several rules can be combined before the caller decides to fail the request.

Usage:
    result = validate_appointment_transition(current, target)
    result.raise_for_errors()
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ehrcloud.core.exceptions import FieldViolation, ValidationFailedError


@dataclass
class ValidationResult:
    violations: List[FieldViolation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    def add(self, field_name: str, message: str) -> "ValidationResult":
        self.violations.append(FieldViolation(field_name, message))
        return self

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        self.violations.extend(other.violations)
        return self

    def raise_for_errors(self, message: Optional[str] = None) -> None:
        """Raise ValidationFailedError (400) when at least one rule failed."""
        if self.violations:
            raise ValidationFailedError(message or self.violations[0].message, errors=self.violations)

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def failure(cls, field_name: str, message: str) -> "ValidationResult":
        return cls([FieldViolation(field_name, message)])

    @classmethod
    def combine(cls, results: Iterable["ValidationResult"]) -> "ValidationResult":
        combined = cls()
        for result in results:
            combined.merge(result)
        return combined

    @classmethod
    def from_pydantic(cls, errors: Sequence[Dict[str, Any]]) -> "ValidationResult":
        """
        Convert pydantic / FastAPI error dicts.

        The location prefix added by FastAPI ("body", "query", "path") is
        dropped so clients get plain field names.
        """
        result = cls()
        for error in errors:
            loc = [str(part) for part in error.get("loc", ())]
            if loc and loc[0] in ("body", "query", "path", "header"):
                loc = loc[1:]
            result.add(".".join(loc) or "request", error.get("msg", "Invalid value"))
        return result
