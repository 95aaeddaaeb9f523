"""Lead payload assembly.

Once the conversation reaches its terminal step the hosting application
stores the lead, posts a chat notification and fires a ``lead/captured``
event. This module builds those payloads from the session's answers and the
quotes that were shown; it performs no I/O itself.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from lifequote.core.types import CarrierQuote, UserProfile
from lifequote.conversation.profile import build_profile, is_profile_complete
from lifequote.conversation.validation import normalize_phone

LEAD_CAPTURED_EVENT = "lead/captured"

CONSENT_TEXT = (
    "By checking this box, I consent to receiving estimated life insurance quotes. "
    "I understand these quotes are estimates and not a final locked-in rate. I agree "
    "to be contacted by a licensed insurance agent at the phone number provided, "
    "including by autodialer, prerecorded message, or email, to help me lock in a "
    "final rate or explore additional coverage options for my family. This is not a "
    "condition of any purchase. I also agree to the Privacy Policy and Terms of Service."
)

# Marketing attribution keys carried through from the landing page
ATTRIBUTION_KEYS = (
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_content",
    "utm_term",
    "gclid",
    "fbclid",
    "referrer",
    "landing_page",
)


@dataclass(frozen=True)
class LeadRecord:
    """Everything captured for one visitor."""

    first_name: str
    email: str
    phone: str
    zip: str
    consent_given: bool
    profile: Optional[UserProfile] = None
    rates_shown: tuple[CarrierQuote, ...] = ()
    consent_text: str = CONSENT_TEXT
    for_whom: Optional[str] = None
    income: Optional[str] = None
    timing: Optional[str] = None
    attribution: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_answers(
        cls,
        answers: Mapping[str, str],
        quotes: Sequence[CarrierQuote] = (),
        attribution: Optional[Mapping[str, str]] = None,
    ) -> "LeadRecord":
        """Assemble a lead from a finished conversation.

        Visitors routed past pricing (e.g. too old for term coverage) have
        no profile; their lead is still captured.
        """
        phone = answers.get("phone", "")
        return cls(
            first_name=answers.get("first_name", ""),
            email=answers.get("email", ""),
            phone=normalize_phone(phone) or phone,
            zip=answers.get("zip", ""),
            consent_given=answers.get("consent") == "true",
            profile=build_profile(answers) if is_profile_complete(answers) else None,
            rates_shown=tuple(quotes),
            for_whom=answers.get("for_whom"),
            income=answers.get("income"),
            timing=answers.get("timing"),
            attribution={
                k: v for k, v in (attribution or {}).items() if k in ATTRIBUTION_KEYS and v
            },
        )

    @property
    def best_quote(self) -> Optional[CarrierQuote]:
        return self.rates_shown[0] if self.rates_shown else None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        result: dict[str, Any] = {
            "first_name": self.first_name,
            "email": self.email,
            "phone": self.phone,
            "zip": self.zip,
            "consent_given": self.consent_given,
            "consent_text": self.consent_text,
            "for_whom": self.for_whom,
            "income": self.income,
            "timing": self.timing,
            "rates_shown": [q.to_dict() for q in self.rates_shown],
        }
        if self.profile is not None:
            result.update(self.profile.to_dict())
        for key in ATTRIBUTION_KEYS:
            result[key] = self.attribution.get(key)
        return result

    def to_event(self, lead_id: str) -> dict[str, Any]:
        """Payload for the downstream ``lead/captured`` event."""
        data: dict[str, Any] = {
            "lead_id": lead_id,
            "first_name": self.first_name,
            "email": self.email,
            "phone": self.phone,
            "zip": self.zip,
            "rates_shown": json.dumps([q.to_dict() for q in self.rates_shown]),
        }
        if self.profile is not None:
            data.update(self.profile.to_dict())
        return {"name": LEAD_CAPTURED_EVENT, "data": data}


def format_lead_notification(lead: LeadRecord) -> str:
    """Render the chat notification text for a new lead."""
    lines = [f"*New Lead: {lead.first_name}*"]
    if lead.profile is not None:
        p = lead.profile
        lines.extend(
            [
                f"Age: {p.age} | Gender: {p.gender.value}",
                f"Coverage: ${p.coverage_amount:,} / {p.term_length}yr term",
                f"Health: {p.health_class.value} | Smoker: {p.smoker_status.value}",
            ]
        )
    else:
        lines.append("No quote profile (routed to agent)")
    lines.append(f"Phone: {lead.phone} | Email: {lead.email}")
    lines.append(f"ZIP: {lead.zip}")
    if lead.best_quote is not None:
        q = lead.best_quote
        lines.append(f"Best rate: {q.carrier_name} ${q.monthly_rate:,.2f}/mo")
    return "\n".join(lines)
