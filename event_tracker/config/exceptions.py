"""Custom exceptions for configuration management."""

from typing import List, Optional

from pydantic import ValidationError

_TYPE_ERRORS = {"string_type", "int_type", "int_parsing", "bool_type", "bool_parsing", "list_type"}


class ConfigurationError(Exception):
    """
    Raised when configuration is missing or invalid.

    Carries a list of specific problems and a list of suggestions; ``str()``
    renders all of them so the CLI can print the exception as-is.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.errors = list(errors or [])
        self.suggestions = list(suggestions or [])
        super().__init__(str(self))

    def __str__(self) -> str:
        lines = [self.message]
        if self.errors:
            lines.append("\nValidation Errors:")
            lines.extend(f"  {number}. {error}" for number, error in enumerate(self.errors, 1))
        if self.suggestions:
            lines.append("\nSuggestions:")
            lines.extend(f"  - {suggestion}" for suggestion in self.suggestions)
        return "\n".join(lines)

    @classmethod
    def from_validation_error(
        cls,
        error: ValidationError,
        message: str = "Configuration validation failed",
        suggestions: Optional[List[str]] = None,
    ) -> "ConfigurationError":
        """Build an error listing one line per pydantic validation failure.

        Example:
            ``server -> port: expected int, got 'lots'``
        """
        problems = []
        for detail in error.errors():
            where = " -> ".join(str(part) for part in detail["loc"]) or "config"
            kind = detail["type"]
            if kind == "missing":
                problems.append(f"Missing required field: {where}")
            elif kind in _TYPE_ERRORS:
                expected = kind.split("_")[0]
                problems.append(f"{where}: expected {expected}, got {detail.get('input')!r}")
            else:
                problems.append(f"{where}: {detail['msg']}")
        return cls(message, errors=problems, suggestions=suggestions)
