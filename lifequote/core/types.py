"""Core type definitions for LifeQuote."""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

CENT = Decimal("0.01")


def round_cents(amount: float) -> float:
    """Round a dollar amount to cents, with half-cents rounding up.

    Goes through the shortest repr so 31.625 is treated as written rather
    than as its binary approximation.
    """
    return float(Decimal(repr(amount)).quantize(CENT, rounding=ROUND_HALF_UP))


class Gender(str, Enum):
    """Gender for pricing (rate tables are split by gender)."""

    MALE = "male"
    FEMALE = "female"


class SmokerStatus(str, Enum):
    """Tobacco use for underwriting."""

    NEVER = "never"
    CURRENT = "current"
    FORMER = "former"


class HealthClass(str, Enum):
    """Underwriting health classification."""

    PREFERRED_PLUS = "preferred_plus"  # Best rates
    PREFERRED = "preferred"
    STANDARD_PLUS = "standard_plus"
    STANDARD = "standard"
    SUBSTANDARD = "substandard"  # Rated / table ratings


class InputType(str, Enum):
    """How a conversation step expects the visitor to answer."""

    TEXT = "text"
    NUMBER = "number"
    TEL = "tel"
    EMAIL = "email"
    BOOLEAN = "boolean"
    OPTIONS = "options"


@dataclass(frozen=True)
class Carrier:
    """An insurance carrier that appears in the rate table."""

    carrier_id: str
    name: str
    am_best_rating: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "carrier_id": self.carrier_id,
            "name": self.name,
            "am_best_rating": self.am_best_rating,
        }


@dataclass(frozen=True)
class UserProfile:
    """Complete risk profile used for pricing.

    Only built once the conversation has collected every field; see
    ``lifequote.conversation.profile.build_profile``.
    """

    age: int
    gender: Gender
    smoker_status: SmokerStatus
    health_class: HealthClass
    coverage_amount: int
    term_length: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "age": self.age,
            "gender": self.gender.value,
            "smoker_status": self.smoker_status.value,
            "health_class": self.health_class.value,
            "coverage_amount": self.coverage_amount,
            "term_length": self.term_length,
        }


@dataclass(frozen=True)
class CarrierQuote:
    """Estimated monthly and annual price from a single carrier.

    ``annual_rate`` is always derived from ``monthly_rate`` and cannot be
    passed in.
    """

    carrier_id: str
    carrier_name: str
    monthly_rate: float
    am_best_rating: str
    annual_rate: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "annual_rate", round_cents(self.monthly_rate * 12))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "carrier_id": self.carrier_id,
            "carrier_name": self.carrier_name,
            "monthly_rate": self.monthly_rate,
            "annual_rate": self.annual_rate,
            "am_best_rating": self.am_best_rating,
        }
