"""Stateless transition logic for the quote conversation.

The hosting application owns each session's current step id and answers
mapping, and passes both in on every turn:

    engine = create_engine()
    step_id, answers = engine.start(), {}
    while not engine.is_terminal(step_id):
        result = engine.advance(step_id, answers, input(engine.prompt_for(step_id, answers)))
        if result.error:
            print(result.error.message)
            continue
        step_id, answers = result.next_step_id, result.answers
        if result.quotes is not None:
            show(result.quotes)

The engine never mutates the answers it is given and keeps nothing between
calls, so one instance can serve any number of concurrent sessions.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from lifequote.core.config import LifeQuoteConfig
from lifequote.core.errors import ConfigurationError, ProfileIncomplete, ValidationError
from lifequote.core.types import CarrierQuote, InputType, UserProfile
from lifequote.conversation.flow import build_default_graph
from lifequote.conversation.profile import build_profile
from lifequote.conversation.steps import DONE, ConversationStep, Option, StepGraph
from lifequote.conversation.validation import validate_input
from lifequote.rates.engine import RateEstimator
from lifequote.rates.tables import RateTable, default_rate_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdvanceResult:
    """Outcome of one conversation turn.

    Attributes:
        next_step_id: Step to show next. Equals the current step when the
            input was rejected.
        answers: Answers including the one just recorded (a new dict; the
            caller's mapping is untouched).
        error: Why the input was rejected, if it was.
        quotes: Carrier quotes, set only when the next step shows quotes.
    """

    next_step_id: str
    answers: dict[str, str]
    error: Optional[ValidationError] = None
    quotes: Optional[tuple[CarrierQuote, ...]] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def done(self) -> bool:
        return self.next_step_id == DONE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "next_step_id": self.next_step_id,
            "answers": dict(self.answers),
        }
        if self.error is not None:
            result["error"] = self.error.to_dict()
        if self.quotes is not None:
            result["quotes"] = [q.to_dict() for q in self.quotes]
        return result


class ConversationEngine:
    """Computes the next conversation step from explicit session state."""

    def __init__(self, graph: StepGraph, estimator: RateEstimator):
        self.graph = graph
        self.estimator = estimator

    def start(self) -> str:
        """Id of the first step."""
        return self.graph.first_step_id

    def step(self, step_id: str) -> ConversationStep:
        return self.graph.get(step_id)

    def is_terminal(self, step_id: str) -> bool:
        """Whether the conversation is over once this step is reached.

        A step is terminal when it is flagged so or when its only way out
        is the end of the conversation.
        """
        if step_id == DONE:
            return True
        step = self.graph.get(step_id)
        return step.terminal or step.next.possible_values() == (DONE,)

    def options_for(self, step_id: str, answers: Mapping[str, str]) -> tuple[Option, ...]:
        """Menu to show for a step given the answers so far (empty if none)."""
        step = self.graph.get(step_id)
        if step.options is None:
            return ()
        return tuple(step.options.resolve(answers))

    def prompt_for(self, step_id: str, answers: Mapping[str, str]) -> str:
        return self.graph.get(step_id).prompt.resolve(answers)

    def progress(self, step_id: str) -> tuple[int, int]:
        """(completed, total) steps along the main path."""
        return self.graph.progress(step_id)

    def build_profile(self, answers: Mapping[str, str]) -> UserProfile:
        return build_profile(answers)

    def quotes_for(self, answers: Mapping[str, str]) -> tuple[CarrierQuote, ...]:
        """Estimate quotes from a complete answer set."""
        return self.estimator.estimate(build_profile(answers))

    def advance(self, step_id: str, answers: Mapping[str, str], raw_input: str) -> AdvanceResult:
        """Apply one answer and work out the next step.

        Args:
            step_id: Step the visitor is answering.
            answers: Answers collected so far in this session.
            raw_input: What the visitor submitted.

        Returns:
            AdvanceResult. Invalid input comes back with ``error`` set and
            ``next_step_id`` unchanged so the caller can re-prompt.

        Raises:
            ConfigurationError: If ``step_id`` is unknown, a computed ``next``
                returns an unknown id, or a show-quotes step is reached
                without a complete profile.
        """
        step = self.graph.get(step_id)

        options: tuple[Option, ...] = ()
        if step.input_type == InputType.OPTIONS:
            options = self.options_for(step_id, answers)

        try:
            value = validate_input(step, raw_input, options)
        except ValidationError as e:
            logger.info(f"[Conversation] Rejected input for '{step_id}': {e.reason}")
            return AdvanceResult(next_step_id=step_id, answers=dict(answers), error=e)

        updated = dict(answers)
        updated[step_id] = value

        next_step_id = step.next.resolve(updated, raw_input)
        if not self.graph.is_valid_target(next_step_id):
            raise ConfigurationError(
                f"Step '{step_id}' resolved to unknown step '{next_step_id}'",
                details={"step_id": step_id, "next_step_id": next_step_id},
            )

        quotes = None
        if next_step_id != DONE and self.graph.get(next_step_id).shows_quotes:
            quotes = self._estimate(next_step_id, updated)

        if next_step_id == DONE:
            logger.info(f"[Conversation] Completed at '{step_id}'")
        else:
            logger.debug(f"[Conversation] {step_id} -> {next_step_id}")

        return AdvanceResult(next_step_id=next_step_id, answers=updated, quotes=quotes)

    def _estimate(self, step_id: str, answers: Mapping[str, str]) -> tuple[CarrierQuote, ...]:
        try:
            profile = build_profile(answers)
        except ValidationError as e:
            raise ConfigurationError(
                f"Step '{step_id}' shows quotes but an answer is unusable: {e.message}",
                details={"step_id": step_id, **e.details},
            ) from e
        except ProfileIncomplete as e:
            raise ConfigurationError(
                f"Step '{step_id}' shows quotes before the profile is complete",
                details={"step_id": step_id, "error": str(e)},
            ) from e

        quotes = self.estimator.estimate(profile)
        if not quotes:
            logger.info(
                f"[Conversation] No carrier quotes for age={profile.age} "
                f"term={profile.term_length} gender={profile.gender.value}"
            )
        return quotes


def create_engine(
    rate_table: Optional[RateTable] = None,
    config: Optional[LifeQuoteConfig] = None,
) -> ConversationEngine:
    """Build an engine over the default flow and the given (or bundled) rate table."""
    rate_table = rate_table or default_rate_table()
    return ConversationEngine(
        graph=build_default_graph(rate_table, config),
        estimator=RateEstimator(rate_table),
    )
