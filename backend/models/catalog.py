"""
Question catalog for the Stripe integration onboarding flow.

The five questions, their exact prompt text and their exact suggested
responses are fixed. The flow controller and the system instructions both
read from here, so the wording must not drift.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Question:
    """A single step of the onboarding questionnaire."""
    id: int  # 1-based ordinal
    section: str  # e.g. "business model"
    prompt_text: str
    options: Tuple[str, ...]


QUESTIONS: Tuple[Question, ...] = (
    Question(
        id=1,
        section="business model",
        prompt_text="What is your business model: a SaaS platform or a Marketplace?",
        options=("SaaS platform", "Marketplace", "I'm not sure"),
    ),
    Question(
        id=2,
        section="fees",
        prompt_text="How do you want to collect and pay for fees?",
        options=("Seller pays fees", "You pay fees", "What are the benefits?"),
    ),
    Question(
        id=3,
        section="onboarding",
        prompt_text="How do you want your users to onboard to your platform?",
        options=(
            "With a Stripe-hosted onboarding flow",
            "With an embedded onboarding flow",
            "I want to build my own onboarding flow",
        ),
    ),
    Question(
        id=4,
        section="checkout",
        prompt_text=(
            "How will buyers pay your sellers: With Stripe-hosted Checkout, "
            "embedded components on your site, or with payment links?"
        ),
        options=("Use Checkout", "Embed components into my site", "Use payment links"),
    ),
    Question(
        id=5,
        section="dashboard",
        prompt_text=(
            "How will sellers manage their account: with the Stripe Dashboard "
            "or embedded components on your site?"
        ),
        options=("Stripe Dashboard", "Embedded components", "I'm not sure"),
    ),
)

TOTAL_QUESTIONS = len(QUESTIONS)

# Options that are offered as chips but always ask for more information
INFORMATIONAL_OPTIONS = frozenset({"i'm not sure", "what are the benefits?"})

OPENING_MESSAGE = (
    "Thank you for providing that information about your business. To help set up "
    "your Stripe integration, I need to know your preferences.\n\n"
    + QUESTIONS[0].prompt_text
)

TERMINAL_OPTIONS = ["Edit my integration", "Walk me through the codebase"]

# The fees section is reachable by name but is not offered in the menu
EDIT_MENU_OPTIONS = ["Business model", "Onboarding", "Checkout", "Dashboard"]


def normalize_text(text: str) -> str:
    """Trim, case-fold and straighten apostrophes for comparisons."""
    if not text:
        return ""
    return " ".join(text.replace("’", "'").replace("‘", "'").split()).casefold()


def question_at(index: int) -> Optional[Question]:
    """Return the question awaiting an answer at a 0-based cursor, if any."""
    if 0 <= index < TOTAL_QUESTIONS:
        return QUESTIONS[index]
    return None


def options_for(index: int) -> List[str]:
    """Return the suggested responses for the question at ``index``."""
    question = question_at(index)
    return list(question.options) if question else []


def question_for_section(name: str) -> Optional[Question]:
    """Look up a question by its section name (case-insensitive)."""
    if not name:
        return None
    wanted = normalize_text(name)
    for question in QUESTIONS:
        if question.section == wanted:
            return question
    return None
