"""LifeQuote - term life rate estimates for a conversational quote funnel.

Two pure components sit behind the chat UI:
- Rate estimation: ranked carrier quotes from tabulated base rates,
  interpolated by age and adjusted for health, tobacco and coverage
- Conversation steps: a validated step graph that collects the profile one
  answer at a time and branches on earlier answers

Usage:
    from lifequote import create_engine

    engine = create_engine()
    result = engine.advance("welcome", {}, "yes")
    result.next_step_id  # "for_whom"
"""

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
)
from lifequote.conversation import (
    DONE,
    AdvanceResult,
    ConversationEngine,
    StepGraph,
    build_default_graph,
    build_profile,
    create_engine,
)
from lifequote.leads import LeadRecord, format_lead_notification
from lifequote.rates import RateEstimator, RateTable, default_rate_table, estimate

__version__ = "0.1.0"

__all__ = [
    # Rate estimation
    "estimate",
    "RateEstimator",
    "RateTable",
    "default_rate_table",
    # Conversation
    "create_engine",
    "ConversationEngine",
    "AdvanceResult",
    "StepGraph",
    "build_default_graph",
    "build_profile",
    "DONE",
    # Leads
    "LeadRecord",
    "format_lead_notification",
    # Types
    "Carrier",
    "CarrierQuote",
    "Gender",
    "HealthClass",
    "InputType",
    "SmokerStatus",
    "UserProfile",
    # Errors
    "LifeQuoteError",
    "ConfigurationError",
    "ValidationError",
    "ProfileIncomplete",
    # Config
    "LifeQuoteConfig",
    # Version
    "__version__",
]
