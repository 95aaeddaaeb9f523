"""Tests for the conversation step graph and engine."""

import pytest

from lifequote.conversation import (
    DONE,
    Computed,
    ConversationEngine,
    ConversationStep,
    Option,
    Static,
    StepGraph,
    build_default_graph,
    create_engine,
)
from lifequote.core.errors import ConfigurationError, ValidationError
from lifequote.core.types import InputType
from lifequote.rates import RateEstimator


def walk(engine: ConversationEngine, inputs, answers=None):
    """Feed (step_id, raw_input) pairs through the engine, checking each step."""
    answers = dict(answers or {})
    results = []
    for expected_step, raw in inputs:
        result = engine.advance(expected_step, answers, raw)
        assert result.error is None, f"{expected_step}: {result.error}"
        answers = result.answers
        results.append(result)
    return results


def _step(step_id, next_, **kwargs) -> ConversationStep:
    kwargs.setdefault("input_type", InputType.TEXT)
    return ConversationStep(id=step_id, prompt=Static(step_id), next=next_, **kwargs)


class TestDefaultGraph:
    """Tests for the bundled conversation."""

    def test_starts_with_welcome(self, graph: StepGraph):
        assert graph.first_step_id == "welcome"
        assert graph.step_ids[0] == "welcome"

    def test_ends_with_lock_in(self, graph: StepGraph):
        assert graph.step_ids[-1] == "lock_in"
        assert graph.get("lock_in").terminal is True

    def test_age_step_is_numeric(self, graph: StepGraph):
        step = graph.get("age")
        assert step.input_type == InputType.NUMBER
        assert (step.min_value, step.max_value) == (18, 85)

    def test_coverage_flows_to_income(self, graph: StepGraph):
        assert graph.get("coverage").next == Static("income")

    def test_income_has_five_options(self, engine: ConversationEngine):
        options = engine.options_for("income", {})
        assert [o.value for o in options] == [
            "under_30k",
            "30k_50k",
            "50k_75k",
            "75k_100k",
            "over_100k",
        ]

    def test_coverage_options_match_rate_table(self, engine, rate_table):
        values = [o.value for o in engine.options_for("coverage", {})]
        assert values == [str(a) for a in rate_table.coverage_amounts()]

    def test_every_declared_next_resolves(self, graph: StepGraph):
        for step in graph:
            for target in step.next.possible_values():
                assert target == DONE or target in graph

    def test_computed_next_resolves_for_sample_answers(self, graph: StepGraph):
        samples = [
            {},
            {"for_whom": "myself", "age": "35", "verify_phone": "true"},
            {"for_whom": "spouse", "age": "84", "verify_phone": "false"},
        ]
        for step in graph:
            if isinstance(step.next, Computed):
                for answers in samples:
                    target = step.next.resolve(answers, "")
                    assert graph.is_valid_target(target)
                    assert target in step.next.possible_values()

    def test_one_step_shows_quotes(self, graph: StepGraph):
        assert [s.id for s in graph if s.shows_quotes] == ["show_quotes"]

    def test_main_path(self, graph: StepGraph):
        path = graph.main_path
        assert path[0] == "welcome"
        assert path[-1] == "lock_in"
        assert "insured_aware" not in path
        assert "no_term_available" not in path

    def test_agent_phone_in_lock_in_prompt(self, rate_table):
        from lifequote.core.config import LifeQuoteConfig

        config = LifeQuoteConfig(agent_phone="555-0100")
        engine = create_engine(rate_table, config)
        prompt = engine.prompt_for("lock_in", {"first_name": "Sam"})
        assert "Sam" in prompt
        assert "555-0100" in prompt


class TestTermOptions:
    """Tests for the age-dependent term menu."""

    def _values(self, engine, age=None):
        answers = {} if age is None else {"age": str(age)}
        return [o.value for o in engine.options_for("term", answers)]

    def test_all_terms_without_age(self, engine):
        assert self._values(engine) == ["10", "15", "20", "30"]

    def test_all_terms_when_young(self, engine):
        assert self._values(engine, 35) == ["10", "15", "20", "30"]
        assert self._values(engine, 55) == ["10", "15", "20", "30"]

    def test_thirty_year_drops_after_55(self, engine):
        assert self._values(engine, 56) == ["10", "15", "20"]

    def test_twenty_year_drops_after_65(self, engine):
        assert self._values(engine, 66) == ["10", "15"]

    def test_only_ten_year_after_75(self, engine):
        assert self._values(engine, 76) == ["10"]

    def test_excluded_term_rejected(self, engine):
        result = engine.advance("term", {"age": "60"}, "30")
        assert result.error is not None
        assert result.error.reason == "not_an_option"
        assert result.next_step_id == "term"


class TestAdvance:
    """Tests for single transitions."""

    def test_welcome_to_for_whom(self, engine):
        result = engine.advance("welcome", {}, "yes")
        assert result.ok
        assert result.next_step_id == "for_whom"
        assert result.answers == {"welcome": "yes"}

    def test_caller_answers_not_mutated(self, engine):
        answers = {"welcome": "yes"}
        result = engine.advance("for_whom", answers, "myself")
        assert answers == {"welcome": "yes"}
        assert result.answers == {"welcome": "yes", "for_whom": "myself"}

    def test_option_label_accepted(self, engine):
        result = engine.advance("for_whom", {}, "myself")
        by_label = engine.advance("for_whom", {}, "Myself")
        assert by_label.answers["for_whom"] == result.answers["for_whom"] == "myself"

    def test_for_whom_myself_goes_to_gender(self, engine):
        assert engine.advance("for_whom", {}, "myself").next_step_id == "gender"

    @pytest.mark.parametrize("who", ["spouse", "parent", "someone_else"])
    def test_for_whom_other_goes_to_insured_aware(self, engine, who):
        result = engine.advance("for_whom", {}, who)
        assert result.next_step_id == "insured_aware"
        assert engine.advance("insured_aware", result.answers, "yes").next_step_id == "gender"

    def test_non_numeric_age_rejected(self, engine):
        result = engine.advance("age", {"gender": "male"}, "thirty")
        assert not result.ok
        assert isinstance(result.error, ValidationError)
        assert result.error.reason == "not_a_number"
        assert result.next_step_id == "age"
        assert "age" not in result.answers

    @pytest.mark.parametrize("age", ["17", "86", "0"])
    def test_age_out_of_range_rejected(self, engine, age):
        result = engine.advance("age", {}, age)
        assert result.error.reason == "out_of_range"

    @pytest.mark.parametrize("age", ["18", "85"])
    def test_age_bounds_inclusive(self, engine, age):
        assert engine.advance("age", {}, age).ok

    def test_quotable_age_goes_to_smoker(self, engine):
        assert engine.advance("age", {}, "80").next_step_id == "smoker"

    def test_too_old_for_term_skips_pricing(self, engine):
        assert engine.advance("age", {}, "81").next_step_id == "no_term_available"

    def test_failed_verification_returns_to_phone(self, engine):
        result = engine.advance("verify_phone", {"phone": "+15551234567"}, "no")
        assert result.next_step_id == "phone"

    def test_unknown_step_is_configuration_error(self, engine):
        with pytest.raises(ConfigurationError):
            engine.advance("nonexistent", {}, "yes")

    def test_advancing_past_done_is_configuration_error(self, engine):
        with pytest.raises(ConfigurationError):
            engine.advance(DONE, {}, "yes")

    def test_terminal_step_leads_to_done(self, engine):
        result = engine.advance("lock_in", {}, "finish")
        assert result.done
        assert engine.is_terminal("lock_in")
        assert engine.is_terminal(DONE)
        assert not engine.is_terminal("welcome")

    def test_step_leading_only_to_done_is_terminal(self, estimator):
        graph = StepGraph([_step("welcome", Static(DONE))])
        engine = ConversationEngine(graph, estimator)
        assert engine.is_terminal("welcome")
        assert engine.advance("welcome", {}, "hi").done

    def test_step_that_may_end_is_not_terminal(self, estimator):
        graph = StepGraph(
            [
                _step("welcome", Computed(lambda a, r: DONE, targets=(DONE, "more"))),
                _step("more", Static(DONE)),
            ]
        )
        engine = ConversationEngine(graph, estimator)
        assert not engine.is_terminal("welcome")
        assert engine.is_terminal("more")

    def test_to_dict_includes_error(self, engine):
        data = engine.advance("email", {}, "not-an-email").to_dict()
        assert data["next_step_id"] == "email"
        assert data["error"]["details"]["reason"] == "invalid_email"


class TestFullConversation:
    """Tests that walk the whole flow."""

    def test_self_path_shows_quotes_and_finishes(self, engine, quote_inputs, contact_inputs):
        results = walk(engine, quote_inputs)
        last = results[-1]
        assert last.next_step_id == "show_quotes"
        assert last.quotes is not None
        assert len(last.quotes) == 5
        assert all(r.quotes is None for r in results[:-1])

        results = walk(engine, [("show_quotes", "continue")] + contact_inputs, last.answers)
        final = results[-1]
        assert final.done
        assert final.answers["phone"] == "+15551234567"
        assert final.answers["email"] == "jamie@example.com"
        assert final.answers["consent"] == "true"

    def test_quotes_match_direct_estimate(self, engine, quote_inputs):
        last = walk(engine, quote_inputs)[-1]
        profile = engine.build_profile(last.answers)
        assert last.quotes == engine.estimator.estimate(profile)
        assert engine.quotes_for(last.answers) == last.quotes

    def test_spouse_path_finishes(self, engine, contact_inputs):
        inputs = [
            ("welcome", "yes"),
            ("for_whom", "spouse"),
            ("insured_aware", "yes"),
            ("gender", "female"),
            ("age", "62"),
            ("smoker", "former"),
            ("health", "standard"),
            ("coverage", "500000"),
            ("income", "50k_75k"),
            ("timing", "few_months"),
            ("term", "15"),
            ("show_quotes", "continue"),
        ] + contact_inputs
        results = walk(engine, inputs)
        assert results[-1].done

    def test_too_old_path_finishes_without_quotes(self, engine, contact_inputs):
        inputs = [
            ("welcome", "yes"),
            ("for_whom", "parent"),
            ("insured_aware", "no"),
            ("gender", "male"),
            ("age", "84"),
            ("no_term_available", "agent"),
        ] + contact_inputs
        results = walk(engine, inputs)
        assert results[-1].done
        assert all(r.quotes is None for r in results)

    def test_reverification_loop(self, engine, quote_inputs):
        answers = walk(engine, quote_inputs)[-1].answers
        results = walk(
            engine,
            [
                ("show_quotes", "continue"),
                ("first_name", "Jamie"),
                ("email", "jamie@example.com"),
                ("phone", "5551234567"),
                ("verify_phone", "no"),
                ("phone", "555-987-6543"),
                ("verify_phone", "yes"),
            ],
            answers,
        )
        assert results[4].next_step_id == "phone"
        assert results[-1].next_step_id == "zip"
        assert results[-1].answers["phone"] == "+15559876543"

    def test_no_carrier_match_returns_empty_quotes(self, fixture_rate_table):
        """Test an uncovered profile reaches the quote step with no quotes."""
        engine = create_engine(fixture_rate_table)
        inputs = [
            ("welcome", "yes"),
            ("for_whom", "myself"),
            ("gender", "female"),
            ("age", "55"),
            ("smoker", "never"),
            ("health", "preferred"),
            ("coverage", "250000"),
            ("income", "over_100k"),
            ("timing", "asap"),
            ("term", "10"),
        ]
        last = walk(engine, inputs)[-1]
        assert last.next_step_id == "show_quotes"
        assert last.quotes == ()


class TestPromptsAndProgress:
    """Tests for prompt text and the progress indicator."""

    @pytest.mark.parametrize(
        "who,expected",
        [
            ("myself", "How old are you?"),
            ("spouse", "How old is your spouse?"),
            ("parent", "How old is your parent?"),
            ("someone_else", "How old are they?"),
        ],
    )
    def test_age_prompt_follows_for_whom(self, engine, who, expected):
        assert engine.prompt_for("age", {"for_whom": who}) == expected

    def test_smoker_prompt_grammar(self, engine):
        assert engine.prompt_for("smoker", {"for_whom": "myself"}).startswith("Have you")
        assert engine.prompt_for("smoker", {"for_whom": "spouse"}).startswith("Has your spouse")

    def test_progress_along_main_path(self, engine, graph):
        total = len(graph.main_path)
        assert engine.progress("welcome") == (0, total)
        assert engine.progress("lock_in") == (total - 1, total)
        assert engine.progress(DONE) == (total, total)

    def test_branch_progress_uses_rejoin_point(self, engine):
        assert engine.progress("insured_aware") == engine.progress("gender")
        assert engine.progress("no_term_available") == engine.progress("first_name")


class TestStepGraphValidation:
    """Tests that malformed graphs fail at construction."""

    def test_dangling_static_next(self):
        with pytest.raises(ConfigurationError, match="unknown steps"):
            StepGraph([_step("welcome", Static("missing"))])

    def test_dangling_computed_target(self):
        with pytest.raises(ConfigurationError, match="unknown steps"):
            StepGraph(
                [_step("welcome", Computed(lambda a, r: DONE, targets=(DONE, "missing")))]
            )

    def test_computed_next_needs_targets(self):
        with pytest.raises(ConfigurationError, match="no declared targets"):
            StepGraph([_step("welcome", Computed(lambda a, r: DONE))])

    def test_duplicate_step_id(self):
        with pytest.raises(ConfigurationError, match="Duplicate"):
            StepGraph([_step("welcome", Static(DONE)), _step("welcome", Static(DONE))])

    def test_reserved_step_id(self):
        with pytest.raises(ConfigurationError):
            StepGraph([_step("welcome", Static(DONE)), _step(DONE, Static(DONE))])

    def test_missing_first_step(self):
        with pytest.raises(ConfigurationError, match="First step"):
            StepGraph([_step("intro", Static(DONE))])

    def test_terminal_must_lead_to_done(self):
        with pytest.raises(ConfigurationError, match="Terminal"):
            StepGraph(
                [
                    _step("welcome", Static("end")),
                    _step("end", Static("welcome"), terminal=True),
                ]
            )

    def test_done_must_be_reachable(self):
        with pytest.raises(ConfigurationError, match="not reachable"):
            StepGraph([_step("welcome", Static("loop")), _step("loop", Static("welcome"))])

    def test_options_step_needs_options(self):
        with pytest.raises(ConfigurationError, match="no options"):
            StepGraph([_step("welcome", Static(DONE), input_type=InputType.OPTIONS)])

    def test_duplicate_option_values(self):
        options = Static((Option("A", "a"), Option("Also A", "a")))
        with pytest.raises(ConfigurationError, match="unique"):
            StepGraph(
                [_step("welcome", Static(DONE), input_type=InputType.OPTIONS, options=options)]
            )

    def test_lying_computed_next_caught_at_runtime(self, estimator):
        graph = StepGraph(
            [_step("welcome", Computed(lambda a, r: "elsewhere", targets=(DONE,)))]
        )
        engine = ConversationEngine(graph, estimator)
        with pytest.raises(ConfigurationError, match="unknown step"):
            engine.advance("welcome", {}, "hello")

    def test_quotes_step_before_profile_is_configuration_error(self, estimator):
        graph = StepGraph(
            [
                _step("welcome", Static("quotes")),
                _step("quotes", Static(DONE), shows_quotes=True),
            ]
        )
        engine = ConversationEngine(graph, estimator)
        with pytest.raises(ConfigurationError, match="before the profile is complete"):
            engine.advance("welcome", {}, "hello")

    def test_default_graph_builds_with_fixture_table(self, fixture_rate_table):
        graph = build_default_graph(fixture_rate_table)
        engine = ConversationEngine(graph, RateEstimator(fixture_rate_table))
        # Oldest quotable age in the fixture table is 60
        assert engine.advance("age", {}, "60").next_step_id == "smoker"
        assert engine.advance("age", {}, "61").next_step_id == "no_term_available"
