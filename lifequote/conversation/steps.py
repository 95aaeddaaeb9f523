"""Conversation step definitions and the step graph.

A step's ``prompt``, ``options`` and ``next`` are either a fixed value
(``Static``) or a pure function of the answers collected so far
(``Computed``). Both variants expose ``resolve()`` so callers never branch
on which one they hold.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, Mapping, Optional, TypeVar, Union

from lifequote.core.errors import ConfigurationError
from lifequote.core.types import InputType

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Reserved next-step id that ends the conversation
DONE = "done"

Answers = Mapping[str, str]


@dataclass(frozen=True)
class Option:
    """A single menu choice."""

    label: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"label": self.label, "value": self.value}


@dataclass(frozen=True)
class Static(Generic[T]):
    """A value that does not depend on the conversation so far."""

    value: T

    def resolve(self, *args: Any) -> T:
        return self.value

    def possible_values(self) -> tuple:
        """Every value this can resolve to."""
        return (self.value,)


@dataclass(frozen=True)
class Computed(Generic[T]):
    """A value computed from the answers (and, for ``next``, the latest input).

    ``targets`` declares every step id a computed ``next`` can return, so the
    graph can be checked for dangling references without running it. The
    first target is treated as the default branch when measuring progress.
    """

    fn: Callable[..., T]
    targets: tuple[str, ...] = ()

    def resolve(self, *args: Any) -> T:
        return self.fn(*args)

    def possible_values(self) -> tuple:
        return self.targets


Resolvable = Union[Static[T], Computed[T]]


@dataclass(frozen=True)
class ConversationStep:
    """One turn of the conversation.

    Attributes:
        id: Unique step id; answers are recorded under it.
        input_type: Kind of answer expected.
        prompt: Message shown to the visitor. Computed prompts receive the answers.
        next: Following step id. Computed ``next`` receives (answers, raw_input).
        options: Menu for ``options`` steps. Computed options receive the answers.
        terminal: Reaching this step ends the conversation once answered.
        shows_quotes: Entering this step triggers a rate estimate.
        min_value: Inclusive lower bound for number steps.
        max_value: Inclusive upper bound for number steps.
        pattern: Regex a text answer must fully match.
        pattern_hint: Human-readable description of ``pattern``.
        placeholder: Input placeholder text for the UI.
    """

    id: str
    input_type: InputType
    prompt: Resolvable[str]
    next: Resolvable[str]
    options: Optional[Resolvable[tuple[Option, ...]]] = None
    terminal: bool = False
    shows_quotes: bool = False
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    pattern: Optional[str] = None
    pattern_hint: Optional[str] = None
    placeholder: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Describe the step for display (computed parts are summarized)."""
        result = {
            "id": self.id,
            "input_type": self.input_type.value,
            "next": list(self.next.possible_values()),
            "computed_next": isinstance(self.next, Computed),
        }
        if self.options is not None:
            result["computed_options"] = isinstance(self.options, Computed)
        if self.terminal:
            result["terminal"] = True
        if self.shows_quotes:
            result["shows_quotes"] = True
        return result


class StepGraph:
    """Immutable, validated set of conversation steps.

    Construction fails with ConfigurationError if any step id is duplicated,
    any ``next`` can point at a step that does not exist, or the end of the
    conversation cannot be reached from the first step.
    """

    def __init__(self, steps: list[ConversationStep], first_step_id: str = "welcome"):
        self._steps: dict[str, ConversationStep] = {}
        for step in steps:
            if step.id in self._steps or step.id == DONE:
                raise ConfigurationError(
                    f"Duplicate or reserved step id: {step.id}", details={"step_id": step.id}
                )
            self._steps[step.id] = step
        self.first_step_id = first_step_id
        self.validate()
        self._main_path = self._compute_main_path()

    def __contains__(self, step_id: object) -> bool:
        return step_id in self._steps

    def __iter__(self) -> Iterator[ConversationStep]:
        return iter(self._steps.values())

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def step_ids(self) -> list[str]:
        return list(self._steps)

    def get(self, step_id: str) -> ConversationStep:
        """Look up a step.

        Raises:
            ConfigurationError: If the id is not in the graph.
        """
        step = self._steps.get(step_id)
        if step is None:
            raise ConfigurationError(f"Unknown step: {step_id}", details={"step_id": step_id})
        return step

    def is_valid_target(self, step_id: str) -> bool:
        return step_id == DONE or step_id in self._steps

    def validate(self) -> None:
        """Check every reference in the graph resolves."""
        if self.first_step_id not in self._steps:
            raise ConfigurationError(
                f"First step '{self.first_step_id}' is not defined",
                details={"step_id": self.first_step_id},
            )

        for step in self._steps.values():
            targets = step.next.possible_values()
            if not targets:
                raise ConfigurationError(
                    f"Step '{step.id}' has a computed next with no declared targets",
                    details={"step_id": step.id},
                )
            dangling = [t for t in targets if not self.is_valid_target(t)]
            if dangling:
                raise ConfigurationError(
                    f"Step '{step.id}' points at unknown steps: {dangling}",
                    details={"step_id": step.id, "dangling": dangling},
                )
            if step.terminal and targets != (DONE,):
                raise ConfigurationError(
                    f"Terminal step '{step.id}' must lead to '{DONE}'",
                    details={"step_id": step.id, "next": list(targets)},
                )

            if step.input_type == InputType.OPTIONS:
                if step.options is None:
                    raise ConfigurationError(
                        f"Options step '{step.id}' has no options", details={"step_id": step.id}
                    )
                if isinstance(step.options, Static):
                    values = [o.value for o in step.options.value]
                    if not values or len(set(values)) != len(values):
                        raise ConfigurationError(
                            f"Options step '{step.id}' needs unique, non-empty options",
                            details={"step_id": step.id, "values": values},
                        )

        reachable = self._reachable()
        if DONE not in reachable:
            raise ConfigurationError(
                f"'{DONE}' is not reachable from '{self.first_step_id}'",
                details={"reachable": sorted(reachable)},
            )
        unreachable = sorted(set(self._steps) - reachable)
        if unreachable:
            logger.warning(f"[StepGraph] Unreachable steps: {unreachable}")

    def _reachable(self) -> set[str]:
        seen: set[str] = set()
        frontier = [self.first_step_id]
        while frontier:
            step_id = frontier.pop()
            if step_id in seen:
                continue
            seen.add(step_id)
            if step_id != DONE:
                frontier.extend(self._steps[step_id].next.possible_values())
        return seen

    def _compute_main_path(self) -> list[str]:
        """Follow the default branch from the first step to the end."""
        path: list[str] = []
        step_id = self.first_step_id
        while step_id != DONE and step_id not in path:
            path.append(step_id)
            step_id = self._steps[step_id].next.possible_values()[0]
        return path

    @property
    def main_path(self) -> list[str]:
        return list(self._main_path)

    def progress(self, step_id: str) -> tuple[int, int]:
        """How far along the default path a step is.

        Returns:
            (completed, total) where ``completed`` counts the main-path steps
            before this one. Side-branch steps report the position of the
            main-path step they lead back to.
        """
        total = len(self._main_path)
        if step_id == DONE:
            return total, total

        seen: set[str] = set()
        current = step_id
        while current not in self._main_path:
            if current == DONE or current in seen:
                return total, total
            seen.add(current)
            current = self.get(current).next.possible_values()[0]
        return self._main_path.index(current), total
