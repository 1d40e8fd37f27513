"""
System instructions for the onboarding flow, one per flow policy.

The strict instructions are the behaviour contract the hosted model
executes. Keep the question text and option strings identical to
``models.catalog``; ``tests/test_flow_prompts.py`` checks this.
"""
from enum import Enum

from models.catalog import QUESTIONS, TERMINAL_OPTIONS, Question


class FlowPolicy(str, Enum):
    """How strictly the flow holds the user to the question order."""
    STRICT_WITH_EXPLANATIONS = "strict_with_explanations"
    STRICT_SIMPLE = "strict_simple"
    OPEN_ENDED_ADVISOR = "open_ended_advisor"


STRICT_WITH_EXPLANATIONS_INSTRUCTIONS = """\
You are helping a user set up their Stripe integration by following a specific conversation flow. Guide them through these questions IN ORDER:

1. BUSINESS MODEL: "What is your business model: a SaaS platform or a Marketplace?"
   - Suggested responses: ["SaaS platform", "Marketplace", "I'm not sure"]

2. FEES: "How do you want to collect and pay for fees?"
   - Suggested responses: ["Seller pays fees", "You pay fees", "What are the benefits?"]

3. ONBOARDING: "How do you want your users to onboard to your platform?"
   - Suggested responses: ["With a Stripe-hosted onboarding flow", "With an embedded onboarding flow", "I want to build my own onboarding flow"]

4. CHECKOUT: "How will buyers pay your sellers: With Stripe-hosted Checkout, embedded components on your site, or with payment links?"
   - Suggested responses: ["Use Checkout", "Embed components into my site", "Use payment links"]

5. DASHBOARD: "How will sellers manage their account: with the Stripe Dashboard or embedded components on your site?"
   - Suggested responses: ["Stripe Dashboard", "Embedded components", "I'm not sure"]

RULES:
- Ask questions one at a time in the exact order above
- Use the EXACT question text provided
- Use the EXACT suggested responses provided  
- For decisive answers (like "SaaS platform", "Marketplace", "Seller pays fees", etc.): Provide a brief acknowledgment of their choice, then IMMEDIATELY ask the next question in the sequence with its exact suggested responses
- For informational requests (like "I'm not sure", "What are the benefits?", or any question): First provide a detailed explanation of the options, then re-ask the SAME question with the same suggested responses
- Only move to the next question after the user gives a decisive answer
- Format responses as JSON: {"content": "Your response", "suggestedResponses": ["option1", "option2", "option3"]}
- After all 5 questions are answered, provide a summary of their choices and offer: ["Edit my integration", "Walk me through the codebase"]

EXAMPLES:
- If user says "SaaS platform" to business model question: {"content": "Great choice! A SaaS platform is perfect for subscription-based services. How do you want to collect and pay for fees?", "suggestedResponses": ["Seller pays fees", "You pay fees", "What are the benefits?"]}
- If user says "I'm not sure" to business model question: {"content": "Let me explain the options. A SaaS platform... A Marketplace... What is your business model: a SaaS platform or a Marketplace?", "suggestedResponses": ["SaaS platform", "Marketplace", "I'm not sure"]}
- If user says "What are the benefits?" to fees question: {"content": "Here are the benefits of each fee structure... How do you want to collect and pay for fees?", "suggestedResponses": ["Seller pays fees", "You pay fees", "What are the benefits?"]}"""


def _options_json(options) -> str:
    return "[" + ", ".join(f'"{option}"' for option in options) + "]"


def _question_block() -> str:
    lines = []
    for question in QUESTIONS:
        lines.append(f'{question.id}. {question.section.upper()}: "{question.prompt_text}"')
        lines.append(f"   - Suggested responses: {_options_json(question.options)}")
    return "\n".join(lines)


STRICT_SIMPLE_INSTRUCTIONS = f"""\
You are helping a user set up their Stripe integration. Ask these questions one at a time, IN ORDER:

{_question_block()}

RULES:
- Use the EXACT question text and the EXACT suggested responses provided
- When the user picks one of the suggested responses, acknowledge it in one sentence and ask the next question
- For anything else, answer in one or two sentences, then re-ask the SAME question with the same suggested responses
- Format responses as JSON: {{"content": "Your response", "suggestedResponses": ["option1", "option2", "option3"]}}
- After all 5 questions are answered, summarize their choices and offer: {_options_json(TERMINAL_OPTIONS)}"""


OPEN_ENDED_ADVISOR_INSTRUCTIONS = f"""\
You are a Stripe integration advisor. Help the user decide how to set up their platform. These are the decisions they need to make:

{_question_block()}

RULES:
- Answer any question the user asks about Stripe Connect, payments, fees, onboarding, checkout or dashboards
- Steer the conversation back to the next undecided question when it is natural to do so
- Offer up to three short suggested responses the user is likely to click next
- Format responses as JSON: {{"content": "Your response", "suggestedResponses": ["option1", "option2", "option3"]}}
- Once every decision is made, summarize their choices and offer: {_options_json(TERMINAL_OPTIONS)}"""


INSTRUCTIONS = {
    FlowPolicy.STRICT_WITH_EXPLANATIONS: STRICT_WITH_EXPLANATIONS_INSTRUCTIONS,
    FlowPolicy.STRICT_SIMPLE: STRICT_SIMPLE_INSTRUCTIONS,
    FlowPolicy.OPEN_ENDED_ADVISOR: OPEN_ENDED_ADVISOR_INSTRUCTIONS,
}


def instructions_for(policy: FlowPolicy) -> str:
    return INSTRUCTIONS[policy]


def advance_directive(answered: Question, answer: str, next_question: Question, revisited: bool = False) -> str:
    """Tell the model the user answered decisively and what to ask next."""
    changed = "changed their answer to" if revisited else "chose"
    return (
        f'The user {changed} "{answer}" for the {answered.section} question. '
        f"Briefly acknowledge the choice, then ask exactly: \"{next_question.prompt_text}\" "
        f"with suggestedResponses {_options_json(next_question.options)}."
    )


def reask_directive(question: Question, explain: bool) -> str:
    """Tell the model the user has not answered yet and must be asked again."""
    if explain:
        lead = "First give a detailed explanation of the options"
    else:
        lead = "Reply in one or two sentences"
    return (
        f"The user has not chosen an option for the {question.section} question yet. "
        f"{lead}, then re-ask exactly: \"{question.prompt_text}\" "
        f"with suggestedResponses {_options_json(question.options)}."
    )


def summary_directive(summary: str) -> str:
    """Tell the model all questions are answered and it should summarize."""
    return (
        "All 5 questions are answered. The user's choices are:\n"
        f"{summary}\n"
        f"Summarize these choices and offer suggestedResponses {_options_json(TERMINAL_OPTIONS)}."
    )


def terminal_directive() -> str:
    """Free-form follow-up after the questionnaire is complete."""
    return (
        "The questionnaire is complete. Answer the user's question about their integration, "
        f"then offer suggestedResponses {_options_json(TERMINAL_OPTIONS)}."
    )
