"""Rate tables and the carrier quote estimator."""

from lifequote.rates.engine import RateEstimator, estimate, interpolate_rate
from lifequote.rates.tables import (
    BASE_RATES,
    CARRIERS,
    COVERAGE_MULTIPLIERS,
    HEALTH_CLASS_MULTIPLIERS,
    SMOKER_MULTIPLIERS,
    RateTable,
    default_rate_table,
)

__all__ = [
    "RateEstimator",
    "estimate",
    "interpolate_rate",
    "RateTable",
    "default_rate_table",
    "CARRIERS",
    "BASE_RATES",
    "HEALTH_CLASS_MULTIPLIERS",
    "SMOKER_MULTIPLIERS",
    "COVERAGE_MULTIPLIERS",
]
