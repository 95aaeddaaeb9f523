"""Static rate data for term life quotes.

Base rates are estimated monthly premiums in dollars for a $250,000 policy
at the best class (preferred plus, never smoked), indexed by:
- Carrier
- Gender
- Term length (years)
- Issue age (sparse; gaps are interpolated by the estimator)

Adjustments for health class, tobacco use and coverage amount are applied
as independent multipliers.
"""

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional

from lifequote.core.errors import ConfigurationError
from lifequote.core.types import Carrier, Gender, HealthClass, SmokerStatus

logger = logging.getLogger(__name__)


CARRIERS = [
    Carrier(carrier_id="banner", name="Banner Life", am_best_rating="A+"),
    Carrier(carrier_id="protective", name="Protective Life", am_best_rating="A+"),
    Carrier(carrier_id="pacific", name="Pacific Life", am_best_rating="A+"),
    Carrier(carrier_id="prudential", name="Prudential", am_best_rating="A+"),
    Carrier(carrier_id="lincoln", name="Lincoln Financial", am_best_rating="A"),
]

# =============================================================================
# BASE RATES
# carrier -> gender -> term -> {age: monthly rate}
# Lincoln does not write 15-year terms. 30-year terms stop at 55,
# 20-year at 65, 15-year at 75, 10-year at 80.
# =============================================================================

BASE_RATES = {
    "banner": {
        "male": {
            10: {18: 9.87, 25: 10.15, 30: 10.72, 35: 11.84, 40: 15.23, 45: 22.00, 50: 32.99, 55: 51.14, 60: 82.91, 65: 136.21, 70: 230.96, 75: 393.39, 80: 669.66},
            15: {18: 11.55, 25: 11.88, 30: 12.54, 35: 13.86, 40: 17.82, 45: 25.74, 50: 38.60, 55: 59.83, 60: 97.00, 65: 159.36, 70: 270.22, 75: 460.27},
            20: {18: 13.82, 25: 14.21, 30: 15.00, 35: 16.58, 40: 21.32, 45: 30.79, 50: 46.19, 55: 71.59, 60: 116.07, 65: 190.69},
            30: {18: 19.94, 25: 20.51, 30: 21.65, 35: 23.92, 40: 30.76, 45: 44.43, 50: 66.65, 55: 103.29},
        },
        "female": {
            10: {18: 8.19, 25: 8.43, 30: 8.89, 35: 9.83, 40: 12.64, 45: 18.26, 50: 27.39, 55: 42.44, 60: 68.81, 65: 113.05, 70: 191.70, 75: 326.51, 80: 555.81},
            15: {18: 9.58, 25: 9.86, 30: 10.41, 35: 11.50, 40: 14.79, 45: 21.36, 50: 32.04, 55: 49.66, 60: 80.51, 65: 132.27, 70: 224.28, 75: 382.02},
            20: {18: 11.47, 25: 11.80, 30: 12.45, 35: 13.76, 40: 17.69, 45: 25.56, 50: 38.34, 55: 59.42, 60: 96.34, 65: 158.27},
            30: {18: 16.55, 25: 17.02, 30: 17.97, 35: 19.86, 40: 25.53, 45: 36.88, 50: 55.32, 55: 85.73},
        },
    },
    "protective": {
        "male": {
            10: {18: 10.19, 30: 11.06, 35: 12.22, 40: 15.71, 45: 22.70, 50: 34.05, 55: 52.77, 60: 85.55, 65: 140.55, 70: 238.33, 75: 405.94, 80: 691.03},
            15: {18: 11.92, 30: 12.94, 35: 14.30, 40: 18.39, 45: 26.56, 50: 39.83, 55: 61.74, 60: 100.10, 65: 164.45, 70: 278.84, 75: 474.96},
            20: {18: 14.26, 30: 15.48, 35: 17.11, 40: 22.00, 45: 31.78, 50: 47.67, 55: 73.88, 60: 119.78, 65: 196.77},
            30: {18: 20.57, 30: 22.34, 35: 24.69, 40: 31.74, 45: 45.85, 50: 68.77, 55: 106.59},
        },
        "female": {
            10: {18: 8.45, 30: 9.18, 35: 10.14, 40: 13.04, 45: 18.84, 50: 28.26, 55: 43.80, 60: 71.01, 65: 116.66, 70: 197.81, 75: 336.93, 80: 573.55},
            15: {18: 9.89, 30: 10.74, 35: 11.87, 40: 15.26, 45: 22.04, 50: 33.06, 55: 51.24, 60: 83.08, 65: 136.49, 70: 231.44, 75: 394.21},
            20: {18: 11.83, 30: 12.85, 35: 14.20, 40: 18.26, 45: 26.38, 50: 39.56, 55: 61.32, 60: 99.41, 65: 163.32},
            30: {18: 17.08, 30: 18.54, 35: 20.49, 40: 26.35, 45: 38.06, 50: 57.08, 55: 88.47},
        },
    },
    "pacific": {
        "male": {
            10: {18: 10.81, 30: 11.74, 40: 16.69, 50: 36.15, 55: 56.03, 60: 90.85, 65: 149.25, 70: 253.07, 75: 431.06, 80: 733.77},
            15: {18: 12.65, 30: 13.74, 40: 19.52, 50: 42.30, 55: 65.56, 60: 106.29, 65: 174.62, 70: 296.09, 75: 504.33},
            20: {18: 15.14, 30: 16.44, 40: 23.36, 50: 50.61, 55: 78.44, 60: 127.18, 65: 208.95},
            30: {18: 21.85, 30: 23.72, 40: 33.71, 50: 73.03, 55: 113.18},
        },
        "female": {
            10: {18: 8.98, 30: 9.75, 40: 13.85, 50: 30.01, 55: 46.51, 60: 75.40, 65: 123.88, 70: 210.05, 75: 357.78, 80: 609.03},
            15: {18: 10.50, 30: 11.40, 40: 16.20, 50: 35.11, 55: 54.41, 60: 88.22, 65: 144.93, 70: 245.76, 75: 418.60},
            20: {18: 12.57, 30: 13.64, 40: 19.39, 50: 42.01, 55: 65.11, 60: 105.56, 65: 173.43},
            30: {18: 18.13, 30: 19.69, 40: 27.98, 50: 60.61, 55: 93.94},
        },
    },
    "prudential": {
        "male": {
            10: {18: 11.34, 25: 11.66, 35: 13.61, 45: 25.27, 55: 58.75, 65: 156.49, 75: 451.98, 80: 769.39},
            15: {18: 13.27, 25: 13.65, 35: 15.92, 45: 29.57, 55: 68.74, 65: 183.10, 75: 528.82},
            20: {18: 15.88, 25: 16.33, 35: 19.05, 45: 35.38, 55: 82.25, 65: 219.09},
            30: {18: 22.91, 25: 23.56, 35: 27.49, 45: 51.05, 55: 118.68},
        },
        "female": {
            10: {18: 9.41, 25: 9.68, 35: 11.29, 45: 20.98, 55: 48.76, 65: 129.89, 75: 375.14, 80: 638.60},
            15: {18: 11.01, 25: 11.33, 35: 13.21, 45: 24.54, 55: 57.05, 65: 151.97, 75: 438.92},
            20: {18: 13.18, 25: 13.55, 35: 15.81, 45: 29.37, 55: 68.27, 65: 181.84},
            30: {18: 19.01, 25: 19.56, 35: 22.82, 45: 42.37, 55: 98.50},
        },
    },
    "lincoln": {
        "male": {
            10: {18: 10.61, 25: 10.91, 30: 11.51, 35: 12.73, 40: 16.36, 45: 23.63, 50: 35.45, 55: 54.94, 60: 89.08, 65: 146.35, 70: 248.16, 75: 422.69, 80: 719.52},
            20: {18: 14.85, 25: 15.27, 30: 16.12, 35: 17.82, 40: 22.91, 45: 33.09, 50: 49.63, 55: 76.92, 60: 124.71, 65: 204.89},
            30: {18: 21.42, 25: 22.03, 30: 23.26, 35: 25.71, 40: 33.05, 45: 47.74, 50: 71.61, 55: 110.99},
        },
        "female": {
            10: {18: 8.80, 25: 9.05, 30: 9.56, 35: 10.56, 40: 13.58, 45: 19.62, 50: 29.42, 55: 45.60, 60: 73.94, 65: 121.47, 70: 205.97, 75: 350.83, 80: 597.20},
            20: {18: 12.32, 25: 12.68, 30: 13.38, 35: 14.79, 40: 19.01, 45: 27.46, 50: 41.19, 55: 63.84, 60: 103.51, 65: 170.06},
            30: {18: 17.78, 25: 18.29, 30: 19.30, 35: 21.34, 40: 27.43, 45: 39.62, 50: 59.44, 55: 92.12},
        },
    },
}

# =============================================================================
# MULTIPLIERS
# =============================================================================

HEALTH_CLASS_MULTIPLIERS = {
    HealthClass.PREFERRED_PLUS: 1.00,
    HealthClass.PREFERRED: 1.18,
    HealthClass.STANDARD_PLUS: 1.42,
    HealthClass.STANDARD: 1.70,
    HealthClass.SUBSTANDARD: 2.40,
}

SMOKER_MULTIPLIERS = {
    SmokerStatus.NEVER: 1.00,
    SmokerStatus.FORMER: 1.45,  # Quit within the last few years
    SmokerStatus.CURRENT: 2.75,
}

# Relative to the $250,000 base
COVERAGE_MULTIPLIERS = {
    100_000: 0.55,
    250_000: 1.00,
    500_000: 1.75,
    750_000: 2.50,
    1_000_000: 3.20,
}


def _freeze(mapping: Mapping) -> Mapping:
    """Deep-copy nested dicts into read-only mapping proxies."""
    return MappingProxyType(
        {k: _freeze(v) if isinstance(v, Mapping) else v for k, v in mapping.items()}
    )


class RateTable:
    """Read-only pricing data shared by every session.

    Built once at startup and passed into the estimator. Construction
    validates the data and raises ConfigurationError if it is malformed.
    """

    def __init__(
        self,
        carriers: list[Carrier],
        base_rates: Mapping[str, Mapping[str, Mapping[int, Mapping[int, float]]]],
        health_multipliers: Mapping[HealthClass, float],
        smoker_multipliers: Mapping[SmokerStatus, float],
        coverage_multipliers: Mapping[int, float],
    ):
        self._carriers = tuple(carriers)
        self._base_rates = _freeze(base_rates)
        self._health_multipliers = MappingProxyType(dict(health_multipliers))
        self._smoker_multipliers = MappingProxyType(dict(smoker_multipliers))
        self._coverage_multipliers = MappingProxyType(dict(coverage_multipliers))
        self.validate()

    @property
    def carriers(self) -> tuple[Carrier, ...]:
        """Carriers in quoting order."""
        return self._carriers

    def bucket(self, carrier_id: str, gender: Gender, term_length: int) -> Optional[Mapping[int, float]]:
        """Get the age -> rate slice for a carrier/gender/term, if offered."""
        carrier_rates = self._base_rates.get(carrier_id)
        if carrier_rates is None:
            return None
        gender_rates = carrier_rates.get(Gender(gender).value)
        if gender_rates is None:
            return None
        return gender_rates.get(term_length)

    def health_multiplier(self, health_class: HealthClass) -> float:
        return self._health_multipliers.get(health_class, 1.0)

    def smoker_multiplier(self, smoker_status: SmokerStatus) -> float:
        return self._smoker_multipliers.get(smoker_status, 1.0)

    def coverage_multiplier(self, coverage_amount: int) -> float:
        return self._coverage_multipliers.get(coverage_amount, 1.0)

    def coverage_amounts(self) -> list[int]:
        """Coverage amounts that have a multiplier, ascending."""
        return sorted(self._coverage_multipliers)

    def term_lengths(self) -> list[int]:
        """Every term length offered by at least one carrier, ascending."""
        terms = set()
        for carrier_rates in self._base_rates.values():
            for gender_rates in carrier_rates.values():
                terms.update(gender_rates.keys())
        return sorted(terms)

    def max_issue_age(self, term_length: int) -> Optional[int]:
        """Oldest tabulated age for a term across all carriers and genders."""
        oldest = None
        for carrier_rates in self._base_rates.values():
            for gender_rates in carrier_rates.values():
                ages = gender_rates.get(term_length)
                if ages:
                    top = max(ages)
                    oldest = top if oldest is None else max(oldest, top)
        return oldest

    def validate(self) -> None:
        """Check the table is internally consistent.

        Raises:
            ConfigurationError: On any structural defect.
        """
        carrier_ids = [c.carrier_id for c in self._carriers]
        if len(set(carrier_ids)) != len(carrier_ids):
            raise ConfigurationError(
                "Duplicate carrier ids in rate table", details={"carriers": carrier_ids}
            )

        for carrier_id in self._base_rates:
            if carrier_id not in carrier_ids:
                raise ConfigurationError(
                    f"Rates defined for unknown carrier: {carrier_id}",
                    details={"carrier_id": carrier_id},
                )

        for carrier_id, carrier_rates in self._base_rates.items():
            for gender, gender_rates in carrier_rates.items():
                if gender not in {g.value for g in Gender}:
                    raise ConfigurationError(
                        f"Unknown gender '{gender}' for carrier {carrier_id}",
                        details={"carrier_id": carrier_id, "gender": gender},
                    )
                for term, ages in gender_rates.items():
                    where = {"carrier_id": carrier_id, "gender": gender, "term_length": term}
                    if not ages:
                        raise ConfigurationError(f"Empty rate bucket: {where}", details=where)
                    if any(rate < 0 for rate in ages.values()):
                        raise ConfigurationError(f"Negative base rate in bucket: {where}", details=where)

        for name, table, required in (
            ("health", self._health_multipliers, list(HealthClass)),
            ("smoker", self._smoker_multipliers, list(SmokerStatus)),
        ):
            missing = [key.value for key in required if key not in table]
            if missing:
                raise ConfigurationError(
                    f"{name} multiplier table missing keys: {missing}",
                    details={"table": name, "missing": missing},
                )

        if not self._coverage_multipliers:
            raise ConfigurationError("Coverage multiplier table is empty")
        if any(amount <= 0 for amount in self._coverage_multipliers):
            raise ConfigurationError(
                "Coverage amounts must be positive",
                details={"amounts": sorted(self._coverage_multipliers)},
            )

        logger.debug(
            f"[RateTable] Validated {len(self._carriers)} carriers, terms {self.term_lengths()}"
        )


@lru_cache(maxsize=1)
def default_rate_table() -> RateTable:
    """Build the bundled rate table (once per process)."""
    return RateTable(
        carriers=CARRIERS,
        base_rates=BASE_RATES,
        health_multipliers=HEALTH_CLASS_MULTIPLIERS,
        smoker_multipliers=SMOKER_MULTIPLIERS,
        coverage_multipliers=COVERAGE_MULTIPLIERS,
    )
