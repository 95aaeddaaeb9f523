"""Core types, errors and configuration for LifeQuote."""

from lifequote.core.config import LifeQuoteConfig
from lifequote.core.errors import (
    ConfigurationError,
    LifeQuoteError,
    ProfileIncomplete,
    ValidationError,
)
from lifequote.core.types import (
    Carrier,
    CarrierQuote,
    Gender,
    HealthClass,
    InputType,
    SmokerStatus,
    UserProfile,
    round_cents,
)

__all__ = [
    "LifeQuoteConfig",
    "LifeQuoteError",
    "ConfigurationError",
    "ValidationError",
    "ProfileIncomplete",
    "Carrier",
    "CarrierQuote",
    "Gender",
    "HealthClass",
    "InputType",
    "SmokerStatus",
    "UserProfile",
    "round_cents",
]
