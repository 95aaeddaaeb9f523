"""Conversion from collected answers to a typed UserProfile."""

from typing import Mapping

from lifequote.core.errors import ProfileIncomplete, ValidationError
from lifequote.core.types import Gender, HealthClass, SmokerStatus, UserProfile

# Step id -> UserProfile field
PROFILE_STEPS = {
    "gender": "gender",
    "age": "age",
    "smoker": "smoker_status",
    "health": "health_class",
    "coverage": "coverage_amount",
    "term": "term_length",
}


def missing_profile_steps(answers: Mapping[str, str]) -> list[str]:
    """Step ids whose answers are still needed to build a profile."""
    return [step_id for step_id in PROFILE_STEPS if not answers.get(step_id)]


def is_profile_complete(answers: Mapping[str, str]) -> bool:
    return not missing_profile_steps(answers)


def build_profile(answers: Mapping[str, str]) -> UserProfile:
    """Build a UserProfile from raw answer strings.

    Raises:
        ProfileIncomplete: If any profile step is unanswered.
        ValidationError: If an answer cannot be converted to its field type.
    """
    missing = missing_profile_steps(answers)
    if missing:
        raise ProfileIncomplete(missing)

    def convert(step_id: str, parse):
        raw = answers[step_id]
        try:
            return parse(raw)
        except ValueError:
            raise ValidationError(
                f"Cannot read {PROFILE_STEPS[step_id]} from {raw!r}",
                step_id=step_id,
                raw_input=raw,
                reason="unparseable",
            ) from None

    return UserProfile(
        age=convert("age", int),
        gender=convert("gender", Gender),
        smoker_status=convert("smoker", SmokerStatus),
        health_class=convert("health", HealthClass),
        coverage_amount=convert("coverage", int),
        term_length=convert("term", int),
    )
