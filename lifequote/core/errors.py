"""Custom exceptions for LifeQuote."""

from typing import Any, Optional


class LifeQuoteError(Exception):
    """Base exception for all LifeQuote errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(LifeQuoteError):
    """Raised when static configuration is malformed.

    Examples:
    - A step's ``next`` points at a step id that does not exist
    - A rate bucket has no ages
    - A multiplier table is missing a required key

    These are programmer errors. They should surface at startup, never
    in front of a visitor.
    """

    pass


class ValidationError(LifeQuoteError):
    """Raised when a visitor's answer does not fit the current step.

    Examples:
    - Non-numeric text for a number step
    - Age outside the accepted range
    - An option value that is not in the current menu

    The conversation engine catches this and hands it back as part of the
    turn result so the caller can re-prompt.
    """

    def __init__(self, message: str, step_id: str, raw_input: str, reason: str):
        super().__init__(
            message,
            details={
                "step_id": step_id,
                "raw_input": raw_input,
                "reason": reason,
            },
        )
        self.step_id = step_id
        self.raw_input = raw_input
        self.reason = reason


class ProfileIncomplete(LifeQuoteError):
    """Raised when answers are converted to a profile before all fields exist."""

    def __init__(self, missing: list[str]):
        super().__init__(
            f"Profile incomplete, missing: {', '.join(missing)}",
            details={"missing": missing},
        )
        self.missing = missing
