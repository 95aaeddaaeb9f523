"""Pytest fixtures for LifeQuote tests."""

import pytest

from lifequote.conversation import ConversationEngine, StepGraph, build_default_graph, create_engine
from lifequote.core.types import Carrier, Gender, HealthClass, SmokerStatus, UserProfile
from lifequote.rates import RateEstimator, RateTable, default_rate_table


@pytest.fixture
def fixture_rate_table() -> RateTable:
    """Small hand-written table with easy numbers.

    alpha writes 20-year terms for both genders; beta writes 20-year (male)
    and 10-year (male) with wider age gaps.
    """
    return RateTable(
        carriers=[
            Carrier(carrier_id="alpha", name="Alpha Life", am_best_rating="A+"),
            Carrier(carrier_id="beta", name="Beta Mutual", am_best_rating="A"),
        ],
        base_rates={
            "alpha": {
                "male": {20: {30: 20.0, 40: 30.0, 50: 60.0}},
                "female": {20: {30: 16.0, 40: 24.0}},
            },
            "beta": {
                "male": {
                    10: {30: 12.0, 60: 40.0},
                    20: {30: 22.0, 50: 50.0},
                },
            },
        },
        health_multipliers={
            HealthClass.PREFERRED_PLUS: 1.0,
            HealthClass.PREFERRED: 1.0,
            HealthClass.STANDARD_PLUS: 1.0,
            HealthClass.STANDARD: 1.5,
            HealthClass.SUBSTANDARD: 2.0,
        },
        smoker_multipliers={
            SmokerStatus.NEVER: 1.0,
            SmokerStatus.FORMER: 1.5,
            SmokerStatus.CURRENT: 3.0,
        },
        coverage_multipliers={250_000: 1.0, 500_000: 2.0},
    )


@pytest.fixture
def rate_table() -> RateTable:
    """The bundled rate table."""
    return default_rate_table()


@pytest.fixture
def estimator(rate_table: RateTable) -> RateEstimator:
    return RateEstimator(rate_table)


@pytest.fixture
def fixture_estimator(fixture_rate_table: RateTable) -> RateEstimator:
    return RateEstimator(fixture_rate_table)


@pytest.fixture
def base_profile() -> UserProfile:
    """35-year-old male, best class, $250k over 20 years."""
    return UserProfile(
        age=35,
        gender=Gender.MALE,
        smoker_status=SmokerStatus.NEVER,
        health_class=HealthClass.PREFERRED_PLUS,
        coverage_amount=250_000,
        term_length=20,
    )


@pytest.fixture
def graph(rate_table: RateTable) -> StepGraph:
    return build_default_graph(rate_table)


@pytest.fixture
def engine(rate_table: RateTable) -> ConversationEngine:
    return create_engine(rate_table)


@pytest.fixture
def quote_inputs() -> list[tuple[str, str]]:
    """Answers that take a self-shopper from welcome to the quotes."""
    return [
        ("welcome", "yes"),
        ("for_whom", "myself"),
        ("gender", "male"),
        ("age", "35"),
        ("smoker", "never"),
        ("health", "preferred_plus"),
        ("coverage", "250000"),
        ("income", "over_100k"),
        ("timing", "asap"),
        ("term", "20"),
    ]


@pytest.fixture
def contact_inputs() -> list[tuple[str, str]]:
    """Answers from the first-name step to the end."""
    return [
        ("first_name", "Jamie"),
        ("email", "Jamie@Example.com"),
        ("phone", "(555) 123-4567"),
        ("verify_phone", "yes"),
        ("zip", "30301"),
        ("consent", "yes"),
        ("lock_in", "finish"),
    ]
