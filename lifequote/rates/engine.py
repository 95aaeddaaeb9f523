"""Rate estimation across carriers.

For each carrier the estimator looks up the carrier/gender/term bucket,
resolves a base rate for the visitor's age (interpolating between tabulated
ages), applies the health, tobacco and coverage multipliers, and returns the
quotes cheapest first.
"""

import logging
from typing import Mapping, Optional

from lifequote.core.types import CarrierQuote, UserProfile, round_cents
from lifequote.rates.tables import RateTable, default_rate_table

logger = logging.getLogger(__name__)


def interpolate_rate(age_rates: Mapping[int, float], age: int) -> Optional[float]:
    """Resolve a base rate for an age from a sparse age -> rate table.

    Exact ages are returned as-is. Ages between two tabulated ages are
    linearly interpolated. Ages outside the tabulated range return None;
    there is no extrapolation.
    """
    if age in age_rates:
        return age_rates[age]

    lower: Optional[int] = None
    upper: Optional[int] = None
    for tabulated in sorted(age_rates):
        if tabulated <= age:
            lower = tabulated
        if tabulated >= age and upper is None:
            upper = tabulated

    if lower is None or upper is None:
        return None
    if lower == upper:
        return age_rates[lower]

    ratio = (age - lower) / (upper - lower)
    return age_rates[lower] + ratio * (age_rates[upper] - age_rates[lower])


class RateEstimator:
    """Produces ranked carrier quotes for a complete profile.

    Example:
        estimator = RateEstimator(default_rate_table())
        quotes = estimator.estimate(profile)
        best = quotes[0] if quotes else None
    """

    def __init__(self, rate_table: RateTable):
        self.rate_table = rate_table

    def quote_carrier(self, carrier_id: str, profile: UserProfile) -> Optional[CarrierQuote]:
        """Quote a single carrier, or None if it does not cover the profile."""
        carrier = next((c for c in self.rate_table.carriers if c.carrier_id == carrier_id), None)
        if carrier is None:
            return None

        age_rates = self.rate_table.bucket(carrier_id, profile.gender, profile.term_length)
        if not age_rates:
            logger.debug(
                f"[RateEstimator] {carrier_id}: no {profile.term_length}yr "
                f"bucket for {profile.gender.value}"
            )
            return None

        base_rate = interpolate_rate(age_rates, profile.age)
        if base_rate is None:
            logger.debug(
                f"[RateEstimator] {carrier_id}: age {profile.age} outside "
                f"{min(age_rates)}-{max(age_rates)} for {profile.term_length}yr"
            )
            return None

        monthly = (
            base_rate
            * self.rate_table.health_multiplier(profile.health_class)
            * self.rate_table.smoker_multiplier(profile.smoker_status)
            * self.rate_table.coverage_multiplier(profile.coverage_amount)
        )

        return CarrierQuote(
            carrier_id=carrier.carrier_id,
            carrier_name=carrier.name,
            monthly_rate=round_cents(monthly),
            am_best_rating=carrier.am_best_rating,
        )

    def estimate(self, profile: UserProfile) -> tuple[CarrierQuote, ...]:
        """Quote every carrier and sort cheapest first.

        Args:
            profile: Complete visitor profile.

        Returns:
            Quotes ordered by monthly rate. Carriers that do not offer the
            gender/term/age combination are left out, so the result may be
            empty.
        """
        quotes = []
        for carrier in self.rate_table.carriers:
            quote = self.quote_carrier(carrier.carrier_id, profile)
            if quote is not None:
                quotes.append(quote)

        # sorted() is stable: ties keep carrier order
        quotes = sorted(quotes, key=lambda q: q.monthly_rate)

        logger.debug(
            f"[RateEstimator] {len(quotes)}/{len(self.rate_table.carriers)} carriers quoted "
            f"age={profile.age} term={profile.term_length}"
        )
        return tuple(quotes)


def estimate(profile: UserProfile, rate_table: Optional[RateTable] = None) -> tuple[CarrierQuote, ...]:
    """Estimate quotes using the given table, or the bundled one."""
    return RateEstimator(rate_table or default_rate_table()).estimate(profile)
