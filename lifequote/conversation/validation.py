"""Per-step answer validation and normalization.

Each validator either returns the normalized answer string that will be
recorded, or raises ValidationError with a machine-readable ``reason``:

- empty: nothing was entered
- not_a_number: number step got non-numeric text
- out_of_range: number outside the step's bounds
- invalid_phone: not a 10-digit US number
- invalid_email: not an email address
- not_a_boolean: boolean step got something other than yes/no
- not_an_option: value not in the current menu
- pattern_mismatch: text did not match the step's pattern
"""

import re
from typing import Optional, Sequence

from lifequote.core.errors import ValidationError
from lifequote.core.types import InputType
from lifequote.conversation.steps import ConversationStep, Option

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

TRUE_VALUES = {"true", "yes", "y", "1", "verified", "approved"}
FALSE_VALUES = {"false", "no", "n", "0", "unverified", "denied"}


def normalize_phone(raw: str) -> Optional[str]:
    """Convert a US phone number to E.164, or None if it is not one."""
    digits = re.sub(r"\D", "", raw)
    if len(digits) == 10:
        return f"+1{digits}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+{digits}"
    return None


def _fail(step: ConversationStep, raw_input: str, reason: str, message: str) -> ValidationError:
    return ValidationError(message, step_id=step.id, raw_input=raw_input, reason=reason)


def _validate_number(step: ConversationStep, raw_input: str, value: str) -> str:
    cleaned = value.replace(",", "")
    if not re.fullmatch(r"-?\d+", cleaned):
        raise _fail(step, raw_input, "not_a_number", "Please enter a whole number.")
    number = int(cleaned)
    if step.min_value is not None and number < step.min_value:
        raise _fail(
            step,
            raw_input,
            "out_of_range",
            f"Please enter a number between {step.min_value} and {step.max_value}.",
        )
    if step.max_value is not None and number > step.max_value:
        raise _fail(
            step,
            raw_input,
            "out_of_range",
            f"Please enter a number between {step.min_value} and {step.max_value}.",
        )
    return str(number)


def _validate_options(
    step: ConversationStep, raw_input: str, value: str, options: Sequence[Option]
) -> str:
    for option in options:
        if value == option.value:
            return option.value
    # Typed answers may use the label instead of the value
    lowered = value.lower()
    for option in options:
        if lowered == option.label.lower():
            return option.value
    raise _fail(
        step,
        raw_input,
        "not_an_option",
        f"Please choose one of: {', '.join(o.label for o in options)}.",
    )


def validate_input(
    step: ConversationStep, raw_input: str, options: Optional[Sequence[Option]] = None
) -> str:
    """Validate an answer for a step and return its normalized form.

    Args:
        step: The step being answered.
        raw_input: What the visitor submitted.
        options: The menu currently shown (required for options steps).

    Raises:
        ValidationError: If the answer does not fit the step.
    """
    value = (raw_input or "").strip()
    if not value:
        raise _fail(step, raw_input, "empty", "Please enter a response.")

    if step.input_type == InputType.NUMBER:
        return _validate_number(step, raw_input, value)

    if step.input_type == InputType.TEL:
        phone = normalize_phone(value)
        if phone is None:
            raise _fail(step, raw_input, "invalid_phone", "Please enter a 10-digit phone number.")
        return phone

    if step.input_type == InputType.EMAIL:
        if not EMAIL_RE.match(value):
            raise _fail(step, raw_input, "invalid_email", "Please enter a valid email address.")
        return value.lower()

    if step.input_type == InputType.BOOLEAN:
        lowered = value.lower()
        if lowered in TRUE_VALUES:
            return "true"
        if lowered in FALSE_VALUES:
            return "false"
        raise _fail(step, raw_input, "not_a_boolean", "Please answer yes or no.")

    if step.input_type == InputType.OPTIONS:
        return _validate_options(step, raw_input, value, options or ())

    # InputType.TEXT
    if step.pattern and not re.fullmatch(step.pattern, value):
        raise _fail(
            step,
            raw_input,
            "pattern_mismatch",
            f"Please enter {step.pattern_hint or 'a valid value'}.",
        )
    return value
