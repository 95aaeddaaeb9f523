"""Conversational quote funnel: step graph, validation and transitions."""

from lifequote.conversation.engine import AdvanceResult, ConversationEngine, create_engine
from lifequote.conversation.flow import build_default_graph, term_options_for
from lifequote.conversation.profile import (
    PROFILE_STEPS,
    build_profile,
    is_profile_complete,
    missing_profile_steps,
)
from lifequote.conversation.steps import (
    DONE,
    Computed,
    ConversationStep,
    Option,
    Static,
    StepGraph,
)
from lifequote.conversation.validation import normalize_phone, validate_input

__all__ = [
    "AdvanceResult",
    "ConversationEngine",
    "create_engine",
    "build_default_graph",
    "term_options_for",
    "PROFILE_STEPS",
    "build_profile",
    "is_profile_complete",
    "missing_profile_steps",
    "DONE",
    "Computed",
    "ConversationStep",
    "Option",
    "Static",
    "StepGraph",
    "normalize_phone",
    "validate_input",
]
