"""The quote funnel conversation.

Main path:
    welcome -> for_whom -> gender -> age -> smoker -> health -> coverage
    -> income -> timing -> term -> show_quotes -> first_name -> email
    -> phone -> verify_phone -> zip -> consent -> lock_in -> done

Branches:
- for_whom: anyone other than "myself" first confirms the insured knows
  (insured_aware) before rejoining at gender.
- age: too old for every term length on file skips pricing and goes to
  no_term_available, then straight to contact capture.
- verify_phone: a failed SMS check sends the visitor back to phone.

The term-length menu only lists terms some carrier still writes at the
visitor's age, using the oldest issue age in the rate table.
"""

from typing import Optional

from lifequote.core.config import LifeQuoteConfig
from lifequote.core.types import InputType
from lifequote.conversation.steps import (
    DONE,
    Answers,
    Computed,
    ConversationStep,
    Option,
    Static,
    StepGraph,
)
from lifequote.rates.tables import RateTable, default_rate_table

FOR_WHOM_OPTIONS = (
    Option("Myself", "myself"),
    Option("My spouse or partner", "spouse"),
    Option("A parent", "parent"),
    Option("Someone else", "someone_else"),
)

HEALTH_OPTIONS = (
    Option("Excellent - no conditions or medications", "preferred_plus"),
    Option("Very good - minor, well-controlled issues", "preferred"),
    Option("Good - a condition or two", "standard_plus"),
    Option("Fair - managing ongoing conditions", "standard"),
    Option("Poor - serious health history", "substandard"),
)

INCOME_OPTIONS = (
    Option("Under $30k", "under_30k"),
    Option("$30k - $50k", "30k_50k"),
    Option("$50k - $75k", "50k_75k"),
    Option("$75k - $100k", "75k_100k"),
    Option("Over $100k", "over_100k"),
)

TIMING_OPTIONS = (
    Option("As soon as possible", "asap"),
    Option("In the next few months", "few_months"),
    Option("Just researching", "researching"),
)

_WHO = {
    "myself": ("you", "your"),
    "spouse": ("your spouse", "your spouse's"),
    "parent": ("your parent", "your parent's"),
    "someone_else": ("they", "their"),
}


def _who(answers: Answers) -> tuple[str, str]:
    return _WHO.get(answers.get("for_whom", "myself"), _WHO["myself"])


def _answered_age(answers: Answers) -> Optional[int]:
    try:
        return int(answers["age"])
    except (KeyError, ValueError):
        return None


def _format_amount(amount: int) -> str:
    return f"${amount:,}"


def term_options_for(rate_table: RateTable):
    """Build the term-length menu function for a rate table."""
    limits = {term: rate_table.max_issue_age(term) for term in rate_table.term_lengths()}

    def options(answers: Answers) -> tuple[Option, ...]:
        age = _answered_age(answers)
        return tuple(
            Option(f"{term} years", str(term))
            for term, max_age in limits.items()
            if age is None or (max_age is not None and age <= max_age)
        )

    return options


def build_default_graph(
    rate_table: Optional[RateTable] = None,
    config: Optional[LifeQuoteConfig] = None,
) -> StepGraph:
    """Build the funnel's step graph.

    Args:
        rate_table: Table used for coverage and term menus (defaults to the bundled one).
        config: Age bounds and agent phone (defaults to LifeQuoteConfig()).
    """
    rate_table = rate_table or default_rate_table()
    config = config or LifeQuoteConfig()

    issue_ages = [rate_table.max_issue_age(t) for t in rate_table.term_lengths()]
    oldest_quotable = max((a for a in issue_ages if a is not None), default=None)

    def after_for_whom(answers: Answers, raw_input: str) -> str:
        return "gender" if answers.get("for_whom") == "myself" else "insured_aware"

    def after_age(answers: Answers, raw_input: str) -> str:
        age = _answered_age(answers)
        if oldest_quotable is None or (age is not None and age > oldest_quotable):
            return "no_term_available"
        return "smoker"

    def after_verify(answers: Answers, raw_input: str) -> str:
        return "zip" if answers.get("verify_phone") == "true" else "phone"

    def age_prompt(answers: Answers) -> str:
        who, _ = _who(answers)
        if who == "you":
            return "How old are you?"
        return f"How old is {who}?" if who != "they" else "How old are they?"

    def gender_prompt(answers: Answers) -> str:
        _, whose = _who(answers)
        return f"What is {whose} gender?"

    def smoker_prompt(answers: Answers) -> str:
        who, _ = _who(answers)
        verb = "Have" if who in ("you", "they") else "Has"
        return f"{verb} {who} used tobacco or nicotine?"

    def health_prompt(answers: Answers) -> str:
        _, whose = _who(answers)
        return f"How would you describe {whose} overall health?"

    def lock_in_prompt(answers: Answers) -> str:
        name = answers.get("first_name", "")
        greeting = f"Thanks, {name}!" if name else "Thanks!"
        if config.agent_phone:
            return (
                f"{greeting} A licensed agent will reach out shortly to lock in your rate, "
                f"or call {config.agent_phone} to speak with one now."
            )
        return f"{greeting} A licensed agent will reach out shortly to lock in your rate."

    coverage_options = tuple(
        Option(_format_amount(amount), str(amount)) for amount in rate_table.coverage_amounts()
    )

    steps = [
        ConversationStep(
            id="welcome",
            input_type=InputType.OPTIONS,
            prompt=Static(
                "Hi! I can compare life insurance rates from top-rated carriers "
                "in about a minute. Ready to get started?"
            ),
            options=Static((Option("Yes, let's go", "yes"),)),
            next=Static("for_whom"),
        ),
        ConversationStep(
            id="for_whom",
            input_type=InputType.OPTIONS,
            prompt=Static("Who is the coverage for?"),
            options=Static(FOR_WHOM_OPTIONS),
            next=Computed(after_for_whom, targets=("gender", "insured_aware")),
        ),
        ConversationStep(
            id="insured_aware",
            input_type=InputType.BOOLEAN,
            prompt=Static(
                "Does the person you're shopping for know? They'll need to take part "
                "in the application."
            ),
            next=Static("gender"),
        ),
        ConversationStep(
            id="gender",
            input_type=InputType.OPTIONS,
            prompt=Computed(gender_prompt),
            options=Static((Option("Male", "male"), Option("Female", "female"))),
            next=Static("age"),
        ),
        ConversationStep(
            id="age",
            input_type=InputType.NUMBER,
            prompt=Computed(age_prompt),
            min_value=config.min_age,
            max_value=config.max_age,
            placeholder="Age",
            next=Computed(after_age, targets=("smoker", "no_term_available")),
        ),
        ConversationStep(
            id="no_term_available",
            input_type=InputType.OPTIONS,
            prompt=Static(
                "Term coverage isn't available online at this age, but a licensed agent "
                "can walk you through final expense and whole life options."
            ),
            options=Static((Option("Have an agent reach out", "agent"),)),
            next=Static("first_name"),
        ),
        ConversationStep(
            id="smoker",
            input_type=InputType.OPTIONS,
            prompt=Computed(smoker_prompt),
            options=Static(
                (
                    Option("Never", "never"),
                    Option("Used to, but quit", "former"),
                    Option("Currently", "current"),
                )
            ),
            next=Static("health"),
        ),
        ConversationStep(
            id="health",
            input_type=InputType.OPTIONS,
            prompt=Computed(health_prompt),
            options=Static(HEALTH_OPTIONS),
            next=Static("coverage"),
        ),
        ConversationStep(
            id="coverage",
            input_type=InputType.OPTIONS,
            prompt=Static("How much coverage are you looking for?"),
            options=Static(coverage_options),
            next=Static("income"),
        ),
        ConversationStep(
            id="income",
            input_type=InputType.OPTIONS,
            prompt=Static("What's your household income? This helps size the right policy."),
            options=Static(INCOME_OPTIONS),
            next=Static("timing"),
        ),
        ConversationStep(
            id="timing",
            input_type=InputType.OPTIONS,
            prompt=Static("When are you hoping to have coverage in place?"),
            options=Static(TIMING_OPTIONS),
            next=Static("term"),
        ),
        ConversationStep(
            id="term",
            input_type=InputType.OPTIONS,
            prompt=Static("How long do you want the coverage to last?"),
            options=Computed(term_options_for(rate_table)),
            next=Static("show_quotes"),
        ),
        ConversationStep(
            id="show_quotes",
            input_type=InputType.OPTIONS,
            prompt=Static("Here are your estimated monthly rates, cheapest first."),
            options=Static((Option("Lock in my rate", "continue"),)),
            shows_quotes=True,
            next=Static("first_name"),
        ),
        ConversationStep(
            id="first_name",
            input_type=InputType.TEXT,
            prompt=Static("Great! What's your first name?"),
            placeholder="First name",
            next=Static("email"),
        ),
        ConversationStep(
            id="email",
            input_type=InputType.EMAIL,
            prompt=Static("What's the best email to send your quote to?"),
            placeholder="you@example.com",
            next=Static("phone"),
        ),
        ConversationStep(
            id="phone",
            input_type=InputType.TEL,
            prompt=Static("And your mobile number? We'll text a code to confirm it."),
            placeholder="(555) 555-5555",
            next=Static("verify_phone"),
        ),
        ConversationStep(
            id="verify_phone",
            input_type=InputType.BOOLEAN,
            prompt=Static("Enter the 6-digit code we just texted you."),
            next=Computed(after_verify, targets=("zip", "phone")),
        ),
        ConversationStep(
            id="zip",
            input_type=InputType.TEXT,
            prompt=Static("Last one: what's your ZIP code?"),
            pattern=r"\d{5}",
            pattern_hint="a 5-digit ZIP code",
            placeholder="ZIP",
            next=Static("consent"),
        ),
        ConversationStep(
            id="consent",
            input_type=InputType.BOOLEAN,
            prompt=Static("Please review and accept the consent below to receive your quotes."),
            next=Static("lock_in"),
        ),
        ConversationStep(
            id="lock_in",
            input_type=InputType.OPTIONS,
            prompt=Computed(lock_in_prompt),
            options=Static(
                (
                    Option("Talk to an agent now", "call_now"),
                    Option("I'm all set", "finish"),
                )
            ),
            terminal=True,
            next=Static(DONE),
        ),
    ]

    return StepGraph(steps, first_step_id="welcome")
